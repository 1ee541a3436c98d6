#!/usr/bin/env python3
"""
Match service - read-side views of a user's study matches.
"""

import logging
from typing import List
from sqlalchemy.orm import Session

from database.models import StudyMatch
from database.repository import TulenRepository
from core.lifecycle.exceptions import ValidationError
from ..models.responses import MatchSummary
from ..utils import safe_str, safe_datetime_iso

logger = logging.getLogger(__name__)

ROLES = ('teaching', 'learning')


class MatchService:
    """Service for listing matches from one participant's point of view."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TulenRepository(db)

    def list_matches(self, user_id: int, role: str) -> List[MatchSummary]:
        """
        Matches where the user is the teacher ("teaching") or the student ("learning").

        Args:
            user_id: Caller.
            role: "teaching" or "learning".

        Returns:
            Newest first, each with the other participant's username.
        """
        if role not in ROLES:
            raise ValidationError(
                f"Invalid role '{role}'",
                {'role': f"Must be one of: {', '.join(ROLES)}"}
            )

        as_teacher = role == 'teaching'
        matches = self.repo.matches.list_for_user(user_id, as_teacher=as_teacher)
        return [self._to_summary(m, as_teacher) for m in matches]

    @staticmethod
    def _to_summary(match: StudyMatch, as_teacher: bool) -> MatchSummary:
        request = match.request
        other = match.student if as_teacher else match.teacher
        return MatchSummary(
            match_id=match.match_id,
            request_id=match.request_id,
            teacher_id=match.teacher_id,
            student_id=match.student_id,
            match_status=safe_str(match.status),
            status=safe_str(request.status),
            topic=request.specific_topic,
            learning_objectives=request.learning_objectives,
            preferred_schedule=request.preferred_schedule,
            feedback=request.feedback,
            skill_name=request.skill.name if request.skill else None,
            other_user=other.username if other else None,
            created_at=safe_datetime_iso(match.created_at)
        )
