"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import pytest


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring PostgreSQL (deselect with '-m \"not db\"')"
    )


@pytest.fixture(scope="session")
def test_database():
    """
    PostgreSQL URL for tests that exercise Postgres-specific behaviour.

    Uses TEST_DATABASE_URL; tests depending on this fixture are skipped
    when it is unset or the server is unreachable.
    """
    from tests import TEST_DB_URL

    if not TEST_DB_URL:
        pytest.skip("TEST_DATABASE_URL not set")

    from sqlalchemy import create_engine, text
    from sqlalchemy.exc import OperationalError

    engine = create_engine(TEST_DB_URL)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except OperationalError as e:
        pytest.skip(f"Test database not available: {e}")
    finally:
        engine.dispose()

    yield TEST_DB_URL
