"""Read-side services backing the API routes."""

from .directory_service import DirectoryService
from .match_service import MatchService
from .notification_service import NotificationServiceWrapper
