from database.repositories.base import BaseRepository
from database.repositories.user import UserRepository
from database.repositories.study_request import StudyRequestRepository
from database.repositories.study_match import StudyMatchRepository
from database.repositories.notification import NotificationRepository
from database.repositories.rating import RatingRepository

__all__ = [
    'BaseRepository',
    'UserRepository',
    'StudyRequestRepository',
    'StudyMatchRepository',
    'NotificationRepository',
    'RatingRepository',
]
