"""
Notification Module

In-app notifications produced as side effects of the study request lifecycle.

Usage:
    from notification import NotificationService, NotificationType

    with tulen_uow() as repo:
        service = NotificationService(repo.notifications)
        service.notify(user_id=42, notification_type=NotificationType.NEW_REQUEST)
"""

from notification.message_builder import (
    NotificationType,
    NotificationMessageBuilder,
)

from notification.service import (
    NotificationService,
)

__all__ = [
    'NotificationType',
    'NotificationMessageBuilder',
    'NotificationService',
]
