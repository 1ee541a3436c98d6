import contextlib
import logging
from typing import Callable, Iterator, Optional

from sqlalchemy.orm import Session

from database.database import get_session_factory
from database.repository import TulenRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def tulen_uow(session_factory: Optional[Callable[[], Session]] = None) -> Iterator[TulenRepository]:
    """Per-unit-of-work transaction scope.

    Yields a TulenRepository bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with tulen_uow() as repo:
            request = repo.requests.get(request_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    session = (session_factory or get_session_factory())()
    try:
        repo = TulenRepository(session)
        yield repo
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
