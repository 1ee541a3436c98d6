#!/usr/bin/env python3
"""
In-app notification service.

Lifecycle transitions append notifications through this service inside
their own unit of work, so a notification exists only if the transition
committed. Delivery is pull-based: clients poll list_for_user().
"""

import logging
from typing import List, Optional

from database.models import Notification
from database.repositories.notification import NotificationRepository
from notification.message_builder import NotificationMessageBuilder, NotificationType

logger = logging.getLogger(__name__)


class NotificationService:
    """Append-only notification sink backed by the notifications table."""

    def __init__(self, repo: NotificationRepository):
        self.repo = repo

    def notify(
        self,
        user_id: int,
        notification_type: NotificationType,
        topic: Optional[str] = None
    ) -> Notification:
        message = NotificationMessageBuilder.build(notification_type, topic)
        notification = self.repo.add(user_id=user_id, message=message, type=notification_type.value)
        logger.info(f"Queued {notification_type.value} notification for user {user_id}")
        return notification

    def list_for_user(self, user_id: int, unread_only: bool = False) -> List[Notification]:
        return self.repo.list_for_user(user_id, unread_only=unread_only)

    def mark_all_read(self, user_id: int) -> int:
        """Mark every unread notification of the user as read; returns how many changed."""
        count = self.repo.mark_all_read(user_id)
        if count:
            logger.info(f"Marked {count} notification(s) read for user {user_id}")
        return count
