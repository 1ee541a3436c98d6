from sqlalchemy import Column, Text, Boolean, Integer, TIMESTAMP, ForeignKey, Index, CheckConstraint, func
from sqlalchemy.orm import relationship

from .base import Base


class Bubble(Base):
    """
    Topical group a user joins. Scopes the requests and matches a user takes part in.
    """
    __tablename__ = 'bubbles'

    bubble_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    description = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    skills = relationship("Skill", back_populates="bubble")


class Skill(Base):
    __tablename__ = 'skills'

    skill_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    # NULL = not tied to a bubble, usable everywhere
    bubble_id = Column(Integer, ForeignKey('bubbles.bubble_id', ondelete='SET NULL'), nullable=True)

    bubble = relationship("Bubble", back_populates="skills")


class User(Base):
    """
    Student account. Created by the auth service; this app only writes
    `current_bubble_id` (join/leave bubble) and the editable profile fields.
    """
    __tablename__ = 'users'

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    department = Column(Text, nullable=False)
    study_year = Column(Integer, nullable=False)
    university = Column(Text)
    major = Column(Text)
    current_bubble_id = Column(Integer, ForeignKey('bubbles.bubble_id', ondelete='SET NULL'), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    current_bubble = relationship("Bubble")
    skills = relationship("UserSkill", back_populates="user", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint('study_year >= 1', name='ck_users_study_year'),
        Index('idx_users_current_bubble', 'current_bubble_id'),
    )


class UserSkill(Base):
    """
    Skill endorsement: a user's self-declared proficiency, and whether they offer to teach it.
    """
    __tablename__ = 'user_skills'

    user_id = Column(Integer, ForeignKey('users.user_id', ondelete='CASCADE'), primary_key=True)
    skill_id = Column(Integer, ForeignKey('skills.skill_id', ondelete='CASCADE'), primary_key=True)
    proficiency_level = Column(Integer, nullable=False)
    is_teaching = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="skills")
    skill = relationship("Skill")

    __table_args__ = (
        CheckConstraint('proficiency_level BETWEEN 1 AND 5', name='ck_user_skills_proficiency'),
        Index('idx_user_skills_teaching', 'skill_id', 'is_teaching'),
    )
