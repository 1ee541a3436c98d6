#!/usr/bin/env python3
"""
Lifecycle Module - study requests and matches from creation to completion.

Public API:
- LifecycleService: every state-changing operation, one transaction each
- plan_transition / allowed_events: the transition table as functions
- NewStudyRequest: validated input for create_request
- ProfileUpdate: validated input for update_profile
- TulenError and subclasses: NotFound, Unauthorized, Conflict, Validation, Storage
"""

from core.lifecycle.exceptions import (
    TulenError,
    NotFoundError,
    UnauthorizedError,
    ConflictError,
    ValidationError,
    StorageError,
)
from core.lifecycle.states import (
    LifecycleEvent,
    Transition,
    TRANSITIONS,
    DELETABLE_REQUEST_STATUSES,
    plan_transition,
    allowed_events,
)
from core.lifecycle.models import (
    NewStudyRequest,
    ProfileUpdate,
    StudyRequestRecord,
    StudyMatchRecord,
    RatingRecord,
    CompletionResult,
    LeaveBubbleResult,
    validate_rating,
)
from core.lifecycle.service import LifecycleService

__all__ = [
    'TulenError',
    'NotFoundError',
    'UnauthorizedError',
    'ConflictError',
    'ValidationError',
    'StorageError',
    'LifecycleEvent',
    'Transition',
    'TRANSITIONS',
    'DELETABLE_REQUEST_STATUSES',
    'plan_transition',
    'allowed_events',
    'NewStudyRequest',
    'ProfileUpdate',
    'StudyRequestRecord',
    'StudyMatchRecord',
    'RatingRecord',
    'CompletionResult',
    'LeaveBubbleResult',
    'validate_rating',
    'LifecycleService',
]
