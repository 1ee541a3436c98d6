#!/usr/bin/env python3
"""
Directory service - read-only views of skills, bubbles, requests and profiles.

Nothing here changes state; writes go through LifecycleService.
"""

import logging
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from database.models import Bubble, StudyRequest
from database.repository import TulenRepository
from core.lifecycle.exceptions import NotFoundError
from ..models.responses import (
    SkillSummary,
    BubbleSummary,
    StudyRequestSummary,
    ProfileSkill,
    UserProfile,
)
from ..utils import safe_str, safe_datetime_iso

logger = logging.getLogger(__name__)


def bubble_summary(bubble: Bubble) -> BubbleSummary:
    return BubbleSummary(
        bubble_id=bubble.bubble_id,
        name=bubble.name,
        description=bubble.description,
        created_at=safe_datetime_iso(bubble.created_at)
    )


def request_summary(request: StudyRequest, viewer_id: Optional[int] = None) -> StudyRequestSummary:
    """Flatten a request with its skill, bubble and requester names."""
    return StudyRequestSummary(
        request_id=request.request_id,
        requester_id=request.requester_id,
        requester_name=request.requester.username if request.requester else None,
        bubble_id=request.bubble_id,
        bubble_name=request.bubble.name if request.bubble else None,
        skill_id=request.skill_id,
        skill_name=request.skill.name if request.skill else None,
        specific_topic=request.specific_topic,
        learning_objectives=request.learning_objectives,
        preferred_schedule=request.preferred_schedule,
        status=safe_str(request.status),
        feedback=request.feedback,
        created_at=safe_datetime_iso(request.created_at),
        is_own_request=(request.requester_id == viewer_id) if viewer_id is not None else None
    )


class DirectoryService:
    """Service for browsing reference data and requests."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TulenRepository(db)

    def list_skills(self) -> List[SkillSummary]:
        return [
            SkillSummary(skill_id=s.skill_id, name=s.name, bubble_id=s.bubble_id)
            for s in self.repo.users.list_skills()
        ]

    def list_bubbles(self, user_id: Optional[int] = None) -> Tuple[List[BubbleSummary], Optional[BubbleSummary]]:
        """
        All bubbles and, for a known caller, the bubble they are currently in.

        Returns:
            (bubbles, current_bubble)
        """
        bubbles = [bubble_summary(b) for b in self.repo.users.list_bubbles()]

        current = None
        if user_id is not None:
            user = self.repo.users.get_user(user_id)
            if user is not None and user.current_bubble is not None:
                current = bubble_summary(user.current_bubble)

        return bubbles, current

    def get_bubble(self, bubble_id: int) -> BubbleSummary:
        bubble = self.repo.users.get_bubble(bubble_id)
        if bubble is None:
            raise NotFoundError(f"Bubble {bubble_id} not found")
        return bubble_summary(bubble)

    def list_bubble_skills(self, bubble_id: int) -> List[SkillSummary]:
        self.get_bubble(bubble_id)
        return [
            SkillSummary(skill_id=s.skill_id, name=s.name, bubble_id=s.bubble_id)
            for s in self.repo.users.list_skills(bubble_id=bubble_id)
        ]

    def list_open_requests(self, bubble_id: int, viewer_id: Optional[int] = None) -> List[StudyRequestSummary]:
        """Open requests in a bubble, newest first, flagged with is_own_request for the viewer."""
        self.get_bubble(bubble_id)
        return [request_summary(r, viewer_id) for r in self.repo.requests.list_open_in_bubble(bubble_id)]

    def list_my_requests(self, user_id: int) -> List[StudyRequestSummary]:
        return [request_summary(r, user_id) for r in self.repo.requests.list_for_requester(user_id)]

    def get_request(self, request_id: int, viewer_id: Optional[int] = None) -> StudyRequestSummary:
        request = self.repo.requests.get(request_id)
        if request is None:
            raise NotFoundError(f"Study request {request_id} not found")
        return request_summary(request, viewer_id)

    def get_profile(self, user_id: int) -> UserProfile:
        """
        The caller's profile with skill endorsements.

        Raises:
            NotFoundError: If the token names a user that does not exist.
        """
        user = self.repo.users.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")

        skills = [
            ProfileSkill(
                skill_id=e.skill_id,
                name=e.skill.name if e.skill else None,
                proficiency_level=e.proficiency_level,
                is_teaching=bool(e.is_teaching)
            )
            for e in self.repo.users.list_endorsements(user_id)
        ]

        return UserProfile(
            user_id=user.user_id,
            username=user.username,
            email=user.email,
            department=user.department,
            study_year=user.study_year,
            university=user.university,
            major=user.major,
            current_bubble_id=user.current_bubble_id,
            skills=skills
        )
