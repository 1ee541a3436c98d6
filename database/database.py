import contextlib
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from core.config_loader import load_config


@lru_cache()
def get_engine() -> Engine:
    """Engine for the configured DATABASE_URL, created on first use."""
    config = load_config()
    return create_engine(
        config.database.url,
        echo=config.database.echo,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=config.database.pool_size,
        max_overflow=config.database.max_overflow,
    )


@lru_cache()
def get_session_factory() -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


@contextlib.contextmanager
def db_session_scope(session_factory=None):
    """Provide a transactional scope around a series of operations."""
    session = (session_factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
