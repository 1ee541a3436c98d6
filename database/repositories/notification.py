import logging
from typing import List
from sqlalchemy import select, update

from database.models import Notification
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class NotificationRepository(BaseRepository):
    def add(self, user_id: int, message: str, type: str) -> Notification:
        notification = Notification(user_id=user_id, message=message, type=type, read=False)
        self.db.add(notification)
        return notification

    def list_for_user(self, user_id: int, unread_only: bool = False) -> List[Notification]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.read.is_(False))
        stmt = stmt.order_by(Notification.created_at.desc(), Notification.notification_id.desc())
        return self.db.execute(stmt).scalars().all()

    def mark_all_read(self, user_id: int) -> int:
        result = self.db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .values(read=True)
        )
        return result.rowcount
