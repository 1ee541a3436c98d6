from enum import Enum
from typing import Optional


class NotificationType(str, Enum):
    """Notification categories stored in notifications.type."""
    NEW_REQUEST = 'new_request'
    REQUEST_SENT = 'request_sent'
    REQUEST_ACCEPTED = 'request_accepted'
    REQUEST_DECLINED = 'request_declined'
    REQUEST_CANCELLED = 'request_cancelled'
    MATCH_CANCELLED = 'match_cancelled'
    MATCH_COMPLETED = 'match_completed'
    PARTNER_LEFT_BUBBLE = 'partner_left_bubble'
    REQUEST_REOPENED = 'request_reopened'


_TEMPLATES = {
    NotificationType.NEW_REQUEST: "You have received a new study request",
    NotificationType.REQUEST_SENT: "Your study request has been sent to the teacher",
    NotificationType.REQUEST_ACCEPTED: "Your study request has been accepted!",
    NotificationType.REQUEST_DECLINED: "Your study request has been declined.",
    NotificationType.REQUEST_CANCELLED: "A study request has been cancelled by the student",
    NotificationType.MATCH_CANCELLED: "Your study session has been cancelled by your partner",
    NotificationType.MATCH_COMPLETED: "Your study session has been marked as completed",
    NotificationType.PARTNER_LEFT_BUBBLE: "Your study partner left the bubble, so the session was cancelled",
    NotificationType.REQUEST_REOPENED: "The teacher left the bubble; your study request is open again",
}


class NotificationMessageBuilder:
    @staticmethod
    def build(notification_type: NotificationType, topic: Optional[str] = None) -> str:
        """
        Build the notification text.

        Args:
            notification_type: Event category.
            topic: Optional request topic appended for context.

        Returns:
            Message text.
        """
        message = _TEMPLATES[notification_type]
        if topic:
            message = f'{message} ("{topic}")'
        return message
