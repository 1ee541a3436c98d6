#!/usr/bin/env python3
"""
Notification endpoints - read and acknowledge in-app notifications.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..dependencies import get_db, get_current_user_id
from ..services.notification_service import NotificationServiceWrapper
from ..models.responses import (
    NotificationsResponse,
    MarkReadResponse
)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationServiceWrapper:
    """Dependency to get notification service."""
    return NotificationServiceWrapper(db)


@router.get("", response_model=NotificationsResponse)
def list_notifications(
    unread_only: bool = Query(default=False, description="Only return unread notifications"),
    user_id: int = Depends(get_current_user_id),
    notification_service: NotificationServiceWrapper = Depends(get_notification_service)
):
    """Get the caller's notifications, newest first."""
    notifications = notification_service.list_notifications(user_id, unread_only=unread_only)

    return NotificationsResponse(
        success=True,
        count=len(notifications),
        unread_count=sum(1 for n in notifications if not n.read),
        notifications=notifications
    )


@router.put("/read", response_model=MarkReadResponse)
def mark_notifications_read(
    user_id: int = Depends(get_current_user_id),
    notification_service: NotificationServiceWrapper = Depends(get_notification_service)
):
    """Mark all of the caller's notifications as read."""
    updated = notification_service.mark_all_read(user_id)

    return MarkReadResponse(
        success=True,
        updated=updated,
        message="Notifications marked as read"
    )
