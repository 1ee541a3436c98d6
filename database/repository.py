import logging

from sqlalchemy.orm import Session

from database.repositories import (
    UserRepository,
    StudyRequestRepository,
    StudyMatchRepository,
    NotificationRepository,
    RatingRepository,
)

logger = logging.getLogger(__name__)


class TulenRepository:
    """
    All repositories bound to one Session, so a unit of work spans every table
    a lifecycle transition touches.
    """

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.requests = StudyRequestRepository(db)
        self.matches = StudyMatchRepository(db)
        self.notifications = NotificationRepository(db)
        self.ratings = RatingRepository(db)
