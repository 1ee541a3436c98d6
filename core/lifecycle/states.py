#!/usr/bin/env python3
"""
Request/match state machine.

TRANSITIONS is the single authority on which status pairs each lifecycle
event may move from and to. Anything not listed is rejected with
ConflictError.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

from database.models import RequestStatus, MatchStatus
from core.lifecycle.exceptions import ConflictError


class LifecycleEvent(str, Enum):
    SELECT_TEACHER = 'select_teacher'
    ACCEPT = 'accept'
    DECLINE = 'decline'
    CANCEL_PENDING = 'cancel_pending'
    CANCEL_ACTIVE = 'cancel_active'
    COMPLETE = 'complete'
    # Bubble departure, split by the leaver's role in the match
    LEAVE_BUBBLE = 'leave_bubble'
    TEACHER_LEFT_PENDING = 'teacher_left_pending'
    TEACHER_LEFT_ACTIVE = 'teacher_left_active'


@dataclass(frozen=True)
class Transition:
    """
    One row of the transition table.

    In match_from, None means "no open match exists". A match_to of None
    means the match row is deleted.
    """
    event: LifecycleEvent
    request_from: FrozenSet[RequestStatus]
    request_to: RequestStatus
    match_from: FrozenSet[Optional[MatchStatus]]
    match_to: Optional[MatchStatus]

    @property
    def expected_match_statuses(self) -> FrozenSet[MatchStatus]:
        return frozenset(s for s in self.match_from if s is not None)


def _row(event, request_from, request_to, match_from, match_to) -> Transition:
    return Transition(event, frozenset(request_from), request_to, frozenset(match_from), match_to)


TRANSITIONS: Dict[LifecycleEvent, Transition] = {
    t.event: t for t in (
        _row(LifecycleEvent.SELECT_TEACHER,
             {RequestStatus.OPEN}, RequestStatus.PENDING,
             {None}, MatchStatus.PENDING),
        _row(LifecycleEvent.ACCEPT,
             {RequestStatus.PENDING}, RequestStatus.ACTIVE,
             {MatchStatus.PENDING}, MatchStatus.ACTIVE),
        _row(LifecycleEvent.DECLINE,
             {RequestStatus.PENDING}, RequestStatus.OPEN,
             {MatchStatus.PENDING}, MatchStatus.DECLINED),
        _row(LifecycleEvent.CANCEL_PENDING,
             {RequestStatus.PENDING}, RequestStatus.OPEN,
             {MatchStatus.PENDING}, None),
        _row(LifecycleEvent.CANCEL_ACTIVE,
             {RequestStatus.ACTIVE}, RequestStatus.CANCELLED,
             {MatchStatus.ACTIVE}, MatchStatus.CANCELLED),
        _row(LifecycleEvent.COMPLETE,
             {RequestStatus.ACTIVE}, RequestStatus.COMPLETED,
             {MatchStatus.ACTIVE}, MatchStatus.COMPLETED),
        _row(LifecycleEvent.LEAVE_BUBBLE,
             {RequestStatus.OPEN, RequestStatus.PENDING, RequestStatus.MATCHED, RequestStatus.ACTIVE},
             RequestStatus.CANCELLED,
             {None, MatchStatus.PENDING, MatchStatus.ACTIVE}, MatchStatus.CANCELLED),
        _row(LifecycleEvent.TEACHER_LEFT_PENDING,
             {RequestStatus.PENDING}, RequestStatus.OPEN,
             {MatchStatus.PENDING}, MatchStatus.CANCELLED),
        _row(LifecycleEvent.TEACHER_LEFT_ACTIVE,
             {RequestStatus.MATCHED, RequestStatus.ACTIVE}, RequestStatus.CANCELLED,
             {MatchStatus.ACTIVE}, MatchStatus.CANCELLED),
    )
}

# Requests with no live match; only these may be hard-deleted.
DELETABLE_REQUEST_STATUSES = frozenset({
    RequestStatus.OPEN,
    RequestStatus.DECLINED,
    RequestStatus.COMPLETED,
    RequestStatus.CANCELLED,
})


def plan_transition(
    event: LifecycleEvent,
    request_status: RequestStatus,
    match_status: Optional[MatchStatus] = None
) -> Transition:
    """
    Look up the transition for an event and check the current statuses against it.

    Args:
        event: Lifecycle event being applied
        request_status: Current status of the study request
        match_status: Current status of its open match, or None if there is none

    Returns:
        The matching Transition

    Raises:
        ConflictError: If the event is not allowed from these statuses
    """
    transition = TRANSITIONS[event]

    if request_status not in transition.request_from:
        raise ConflictError(
            f"Cannot {event.value.replace('_', ' ')}: study request is {_label(request_status)}"
        )

    if match_status not in transition.match_from:
        raise ConflictError(
            f"Cannot {event.value.replace('_', ' ')}: "
            + (f"match is {_label(match_status)}" if match_status is not None else "there is no open match")
        )

    return transition


def allowed_events(
    request_status: RequestStatus,
    match_status: Optional[MatchStatus] = None
) -> FrozenSet[LifecycleEvent]:
    """Events the table permits from a (request, match) status pair."""
    return frozenset(
        t.event for t in TRANSITIONS.values()
        if request_status in t.request_from and match_status in t.match_from
    )


def _label(status) -> str:
    return status.value if isinstance(status, Enum) else str(status)
