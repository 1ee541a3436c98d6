from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Boolean, Integer, Index, func
from sqlalchemy.orm import relationship

from .base import Base


class Notification(Base):
    """
    In-app notification produced by lifecycle transitions.

    Append-only; the only mutation is the recipient's bulk "mark read".
    Clients poll for these, ordered by creation time.
    """
    __tablename__ = 'notifications'

    notification_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(Text, nullable=False)  # new_request, request_sent, request_accepted, ...
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User")

    __table_args__ = (
        Index('idx_notifications_user', 'user_id', 'created_at'),
        Index('idx_notifications_unread', 'user_id', 'read'),
    )
