import logging
from typing import Iterable, List, Optional, Set
from sqlalchemy import select, update, delete, or_

from database.models import StudyMatch, StudyRequest, MatchStatus, NON_TERMINAL_MATCH_STATUSES
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class StudyMatchRepository(BaseRepository):
    def create(self, request_id: int, teacher_id: int, student_id: int) -> StudyMatch:
        match = StudyMatch(
            request_id=request_id,
            teacher_id=teacher_id,
            student_id=student_id,
            status=MatchStatus.PENDING,
        )
        self.db.add(match)
        self.db.flush()  # Surfaces the open-match unique index violation here
        return match

    def get(self, match_id: int) -> Optional[StudyMatch]:
        stmt = select(StudyMatch).where(StudyMatch.match_id == match_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_open_for_request(self, request_id: int) -> Optional[StudyMatch]:
        """The single pending/active match of a request, if any."""
        stmt = select(StudyMatch).where(
            StudyMatch.request_id == request_id,
            StudyMatch.status.in_(NON_TERMINAL_MATCH_STATUSES)
        )
        return self.db.execute(stmt).scalars().first()

    def pending_teacher_ids(self, request_id: int) -> Set[int]:
        stmt = select(StudyMatch.teacher_id).where(
            StudyMatch.request_id == request_id,
            StudyMatch.status == MatchStatus.PENDING
        )
        return set(self.db.execute(stmt).scalars().all())

    def transition_status(
        self,
        match_id: int,
        expected: Iterable[MatchStatus],
        new_status: MatchStatus
    ) -> bool:
        """Conditional status update; False means the match already moved on."""
        stmt = (
            update(StudyMatch)
            .where(
                StudyMatch.match_id == match_id,
                StudyMatch.status.in_(list(expected))
            )
            .values(status=new_status)
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def delete_pending(self, match_id: int) -> bool:
        result = self.db.execute(
            delete(StudyMatch).where(
                StudyMatch.match_id == match_id,
                StudyMatch.status == MatchStatus.PENDING
            )
        )
        return result.rowcount == 1

    def delete_for_request(self, request_id: int) -> int:
        result = self.db.execute(
            delete(StudyMatch).where(StudyMatch.request_id == request_id)
        )
        if result.rowcount:
            logger.info(f"Removed {result.rowcount} match(es) of request {request_id}")
        return result.rowcount

    def list_open_for_participant_in_bubble(self, user_id: int, bubble_id: int) -> List[StudyMatch]:
        """Pending/active matches the user takes part in, on requests of one bubble."""
        stmt = (
            select(StudyMatch)
            .join(StudyRequest, StudyRequest.request_id == StudyMatch.request_id)
            .where(
                or_(StudyMatch.teacher_id == user_id, StudyMatch.student_id == user_id),
                StudyRequest.bubble_id == bubble_id,
                StudyMatch.status.in_(NON_TERMINAL_MATCH_STATUSES)
            )
            .order_by(StudyMatch.match_id)
        )
        return self.db.execute(stmt).scalars().all()

    def list_for_user(self, user_id: int, as_teacher: bool) -> List[StudyMatch]:
        column = StudyMatch.teacher_id if as_teacher else StudyMatch.student_id
        stmt = (
            select(StudyMatch)
            .where(column == user_id)
            .order_by(StudyMatch.created_at.desc(), StudyMatch.match_id.desc())
        )
        return self.db.execute(stmt).scalars().all()
