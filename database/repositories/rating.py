from typing import List, Optional
from sqlalchemy import select, delete

from database.models import UserRating
from database.repositories.base import BaseRepository


class RatingRepository(BaseRepository):
    def add(
        self,
        request_id: int,
        rater_id: int,
        rated_id: int,
        rating: int,
        comment: Optional[str] = None
    ) -> UserRating:
        record = UserRating(
            request_id=request_id,
            rater_id=rater_id,
            rated_id=rated_id,
            rating=rating,
            comment=comment,
        )
        self.db.add(record)
        return record

    def list_for_request(self, request_id: int) -> List[UserRating]:
        stmt = select(UserRating).where(UserRating.request_id == request_id).order_by(UserRating.rating_id)
        return self.db.execute(stmt).scalars().all()

    def delete_for_request(self, request_id: int) -> int:
        result = self.db.execute(delete(UserRating).where(UserRating.request_id == request_id))
        return result.rowcount
