#!/usr/bin/env python3
"""
Lifecycle Models - typed records passed in and out of LifecycleService.

Records are detached snapshots of rows, safe to use after the unit of work
that produced them has closed.
"""

from datetime import datetime
from typing import Dict, List, Optional
from dataclasses import dataclass, field

from database.models import StudyRequest, StudyMatch, UserRating, RequestStatus, MatchStatus
from core.lifecycle.exceptions import ValidationError

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class NewStudyRequest:
    """Input for creating a study request."""
    bubble_id: int
    skill_id: Optional[int]
    specific_topic: str
    learning_objectives: str
    preferred_schedule: str

    def validated(self) -> "NewStudyRequest":
        """
        Return a copy with free text stripped.

        Raises:
            ValidationError: listing every missing field
        """
        errors: Dict[str, str] = {}

        topic = (self.specific_topic or "").strip()
        objectives = (self.learning_objectives or "").strip()
        schedule = (self.preferred_schedule or "").strip()

        if not topic:
            errors['specific_topic'] = 'Topic is required'
        if not objectives:
            errors['learning_objectives'] = 'Learning objectives are required'
        if not schedule:
            errors['preferred_schedule'] = 'Schedule is required'
        if not self.skill_id:
            errors['skill_id'] = 'Skill is required'
        if not self.bubble_id:
            errors['bubble_id'] = 'Bubble is required'

        if errors:
            raise ValidationError("Invalid study request", errors)

        return NewStudyRequest(
            bubble_id=self.bubble_id,
            skill_id=self.skill_id,
            specific_topic=topic,
            learning_objectives=objectives,
            preferred_schedule=schedule,
        )


@dataclass(frozen=True)
class ProfileUpdate:
    """Profile fields a user may change; None leaves a field as it is."""
    username: Optional[str] = None
    email: Optional[str] = None
    university: Optional[str] = None
    major: Optional[str] = None

    def changes(self) -> Dict[str, Optional[str]]:
        """
        Column values to write, with free text stripped.

        Raises:
            ValidationError: nothing to change, or a blank/malformed username or email
        """
        errors: Dict[str, str] = {}
        values: Dict[str, Optional[str]] = {}

        if self.username is not None:
            values['username'] = self.username.strip()
            if not values['username']:
                errors['username'] = 'Username cannot be blank'
        if self.email is not None:
            values['email'] = self.email.strip()
            if '@' not in values['email']:
                errors['email'] = 'Email must be a valid address'
        # Blank university/major clears the field
        if self.university is not None:
            values['university'] = self.university.strip() or None
        if self.major is not None:
            values['major'] = self.major.strip() or None

        if errors:
            raise ValidationError("Invalid profile update", errors)
        if not values:
            raise ValidationError("Nothing to update", {'profile': 'No profile fields given'})
        return values


def validate_rating(rating) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be an integer", {'rating': 'Rating must be an integer'})
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}",
            {'rating': f'Rating must be between {MIN_RATING} and {MAX_RATING}'}
        )
    return rating


@dataclass(frozen=True)
class StudyRequestRecord:
    request_id: int
    requester_id: int
    bubble_id: int
    skill_id: int
    specific_topic: str
    learning_objectives: str
    preferred_schedule: str
    status: RequestStatus
    feedback: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, request: StudyRequest, **overrides) -> "StudyRequestRecord":
        values = dict(
            request_id=request.request_id,
            requester_id=request.requester_id,
            bubble_id=request.bubble_id,
            skill_id=request.skill_id,
            specific_topic=request.specific_topic,
            learning_objectives=request.learning_objectives,
            preferred_schedule=request.preferred_schedule,
            status=RequestStatus(request.status),
            feedback=request.feedback,
            created_at=request.created_at,
        )
        values.update(overrides)
        return cls(**values)


@dataclass(frozen=True)
class StudyMatchRecord:
    match_id: int
    request_id: int
    teacher_id: int
    student_id: int
    status: MatchStatus
    request_status: RequestStatus

    @classmethod
    def from_model(cls, match: StudyMatch, request_status: RequestStatus, **overrides) -> "StudyMatchRecord":
        values = dict(
            match_id=match.match_id,
            request_id=match.request_id,
            teacher_id=match.teacher_id,
            student_id=match.student_id,
            status=MatchStatus(match.status),
            request_status=request_status,
        )
        values.update(overrides)
        return cls(**values)


@dataclass(frozen=True)
class RatingRecord:
    request_id: int
    rater_id: int
    rated_id: int
    rating: int
    comment: Optional[str] = None

    @classmethod
    def from_model(cls, rating: UserRating) -> "RatingRecord":
        return cls(
            request_id=rating.request_id,
            rater_id=rating.rater_id,
            rated_id=rating.rated_id,
            rating=rating.rating,
            comment=rating.comment,
        )


@dataclass(frozen=True)
class CompletionResult:
    match: StudyMatchRecord
    rating: RatingRecord


@dataclass
class LeaveBubbleResult:
    """What a bubble departure touched."""
    bubble_id: int
    cancelled_request_ids: List[int] = field(default_factory=list)
    cancelled_match_ids: List[int] = field(default_factory=list)
    reopened_request_ids: List[int] = field(default_factory=list)
