import logging
from typing import Iterable, List, Optional
from sqlalchemy import select, update, delete

from database.models import StudyRequest, RequestStatus
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class StudyRequestRepository(BaseRepository):
    def create(
        self,
        requester_id: int,
        bubble_id: int,
        skill_id: int,
        specific_topic: str,
        learning_objectives: str,
        preferred_schedule: str
    ) -> StudyRequest:
        request = StudyRequest(
            requester_id=requester_id,
            bubble_id=bubble_id,
            skill_id=skill_id,
            specific_topic=specific_topic,
            learning_objectives=learning_objectives,
            preferred_schedule=preferred_schedule,
            status=RequestStatus.OPEN,
        )
        self.db.add(request)
        self.db.flush()  # Generate ID
        return request

    def get(self, request_id: int) -> Optional[StudyRequest]:
        stmt = select(StudyRequest).where(StudyRequest.request_id == request_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def transition_status(
        self,
        request_id: int,
        expected: Iterable[RequestStatus],
        new_status: RequestStatus,
        **values
    ) -> bool:
        """
        Conditional status update guarded by the expected prior status.

        Returns False when no row matched: the request vanished or another
        caller already moved it.
        """
        stmt = (
            update(StudyRequest)
            .where(
                StudyRequest.request_id == request_id,
                StudyRequest.status.in_(list(expected))
            )
            .values(status=new_status, **values)
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def delete(self, request_id: int, expected: Optional[Iterable[RequestStatus]] = None) -> bool:
        """Hard-delete a request, optionally only while it is in one of `expected`."""
        stmt = delete(StudyRequest).where(StudyRequest.request_id == request_id)
        if expected is not None:
            stmt = stmt.where(StudyRequest.status.in_(list(expected)))
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def list_for_requester(self, requester_id: int) -> List[StudyRequest]:
        stmt = (
            select(StudyRequest)
            .where(StudyRequest.requester_id == requester_id)
            .order_by(StudyRequest.created_at.desc(), StudyRequest.request_id.desc())
        )
        return self.db.execute(stmt).scalars().all()

    def list_open_in_bubble(self, bubble_id: int) -> List[StudyRequest]:
        stmt = (
            select(StudyRequest)
            .where(
                StudyRequest.bubble_id == bubble_id,
                StudyRequest.status == RequestStatus.OPEN
            )
            .order_by(StudyRequest.created_at.desc(), StudyRequest.request_id.desc())
        )
        return self.db.execute(stmt).scalars().all()

    def list_for_requester_in_bubble(
        self,
        requester_id: int,
        bubble_id: int,
        statuses: Iterable[RequestStatus]
    ) -> List[StudyRequest]:
        stmt = select(StudyRequest).where(
            StudyRequest.requester_id == requester_id,
            StudyRequest.bubble_id == bubble_id,
            StudyRequest.status.in_(list(statuses))
        ).order_by(StudyRequest.request_id)
        return self.db.execute(stmt).scalars().all()
