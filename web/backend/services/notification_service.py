#!/usr/bin/env python3
"""
Notification service wrapper for the web application.
"""

import logging
from typing import List
from sqlalchemy.orm import Session

from notification import NotificationService
from database.repositories import NotificationRepository
from ..models.responses import NotificationItem
from ..utils import safe_datetime_iso

logger = logging.getLogger(__name__)


class NotificationServiceWrapper:
    """Wrapper for NotificationService with database session."""

    def __init__(self, db: Session):
        self.db = db
        self.notification_service = NotificationService(NotificationRepository(db))

    def list_notifications(self, user_id: int, unread_only: bool = False) -> List[NotificationItem]:
        """
        Get the user's notifications, newest first.

        Args:
            user_id: Recipient.
            unread_only: Skip notifications already marked read.

        Returns:
            Notification items.
        """
        return [
            NotificationItem(
                notification_id=n.notification_id,
                message=n.message,
                type=n.type,
                read=bool(n.read),
                created_at=safe_datetime_iso(n.created_at)
            )
            for n in self.notification_service.list_for_user(user_id, unread_only=unread_only)
        ]

    def mark_all_read(self, user_id: int) -> int:
        """
        Mark all of the user's notifications read and commit.

        Returns:
            Number of notifications changed.
        """
        try:
            count = self.notification_service.mark_all_read(user_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return count
