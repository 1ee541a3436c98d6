from enum import Enum

from sqlalchemy import Enum as SAEnum


class RequestStatus(str, Enum):
    """Student-facing status of a study request."""
    OPEN = 'open'
    PENDING = 'pending'
    MATCHED = 'matched'  # Legacy rows only, never entered by a transition
    ACTIVE = 'active'
    DECLINED = 'declined'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class MatchStatus(str, Enum):
    """Teacher-facing status of a study match."""
    PENDING = 'pending'
    ACTIVE = 'active'
    DECLINED = 'declined'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


# Match statuses that still hold the request; at most one per request.
NON_TERMINAL_MATCH_STATUSES = (MatchStatus.PENDING, MatchStatus.ACTIVE)


def status_column_type(enum_cls) -> SAEnum:
    """Stored as plain strings (VARCHAR) so pre-existing rows stay readable."""
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=16,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
