from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Integer, Index, CheckConstraint, func

from .base import Base


class UserRating(Base):
    """Feedback left by one participant of a completed match about the other."""
    __tablename__ = 'user_ratings'

    rating_id = Column(Integer, primary_key=True, autoincrement=True)
    request_id = Column(Integer, ForeignKey('study_requests.request_id', ondelete='CASCADE'), nullable=False)
    rater_id = Column(Integer, ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    rated_id = Column(Integer, ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint('rating BETWEEN 1 AND 5', name='ck_user_ratings_range'),
        Index('idx_user_ratings_rated', 'rated_id'),
        Index('idx_user_ratings_request', 'request_id'),
    )
