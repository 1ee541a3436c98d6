from sqlalchemy import Column, Text, Integer, TIMESTAMP, ForeignKey, Index, func
from sqlalchemy.sql import text as sql_text
from sqlalchemy.orm import relationship

from .base import Base
from .status import RequestStatus, MatchStatus, status_column_type


class StudyRequest(Base):
    """
    A student's ask for help with a skill/topic inside a bubble.

    Owned by its requester. Transitions in place; only hard-deleted on explicit delete.
    """
    __tablename__ = 'study_requests'

    request_id = Column(Integer, primary_key=True, autoincrement=True)
    requester_id = Column(Integer, ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    bubble_id = Column(Integer, ForeignKey('bubbles.bubble_id', ondelete='CASCADE'), nullable=False)
    skill_id = Column(Integer, ForeignKey('skills.skill_id'), nullable=False)

    specific_topic = Column(Text, nullable=False)
    learning_objectives = Column(Text, nullable=False)
    preferred_schedule = Column(Text, nullable=False)

    status = Column(status_column_type(RequestStatus), nullable=False, default=RequestStatus.OPEN)
    feedback = Column(Text)  # Set on completion

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    requester = relationship("User")
    bubble = relationship("Bubble")
    skill = relationship("Skill")
    matches = relationship("StudyMatch", back_populates="request", passive_deletes=True)

    __table_args__ = (
        Index('idx_study_requests_requester', 'requester_id'),
        Index('idx_study_requests_bubble_status', 'bubble_id', 'status'),
    )


class StudyMatch(Base):
    """
    Pairing of a request with one teacher, tracked independently of the request status.

    The partial unique index enforces at most one pending/active match per request.
    """
    __tablename__ = 'study_matches'

    match_id = Column(Integer, primary_key=True, autoincrement=True)
    request_id = Column(Integer, ForeignKey('study_requests.request_id', ondelete='CASCADE'), nullable=False)
    teacher_id = Column(Integer, ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    student_id = Column(Integer, ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)

    status = Column(status_column_type(MatchStatus), nullable=False, default=MatchStatus.PENDING)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    request = relationship("StudyRequest", back_populates="matches")
    teacher = relationship("User", foreign_keys=[teacher_id])
    student = relationship("User", foreign_keys=[student_id])

    __table_args__ = (
        Index(
            'uq_study_matches_open_request',
            'request_id',
            unique=True,
            postgresql_where=sql_text("status IN ('pending', 'active')"),
            sqlite_where=sql_text("status IN ('pending', 'active')"),
        ),
        Index('idx_study_matches_teacher', 'teacher_id', 'status'),
        Index('idx_study_matches_student', 'student_id', 'status'),
    )

    def counterpart_of(self, user_id: int) -> int:
        """Return the other participant's id."""
        return self.student_id if user_id == self.teacher_id else self.teacher_id

    def has_participant(self, user_id: int) -> bool:
        return user_id in (self.teacher_id, self.student_id)
