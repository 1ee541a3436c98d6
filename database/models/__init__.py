from .base import Base
from .status import RequestStatus, MatchStatus, NON_TERMINAL_MATCH_STATUSES
from .user import Bubble, Skill, User, UserSkill
from .study import StudyRequest, StudyMatch
from .notification import Notification
from .rating import UserRating

__all__ = [
    'Base',
    'RequestStatus',
    'MatchStatus',
    'NON_TERMINAL_MATCH_STATUSES',
    'Bubble',
    'Skill',
    'User',
    'UserSkill',
    'StudyRequest',
    'StudyMatch',
    'Notification',
    'UserRating',
]
