#!/usr/bin/env python3
"""
Migration: Enforce at most one open match per study request

Databases created before this index existed can hold several pending/active
matches for the same request. This migration:
1. Cancels every open match except the newest one of each request
2. Creates the partial unique index uq_study_matches_open_request

Date: 2026-03-02
"""

import argparse
import logging
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from core.config_loader import load_config

logger = logging.getLogger(__name__)

INDEX_NAME = 'uq_study_matches_open_request'


def _engine(engine: Optional[Engine]) -> Engine:
    return engine or create_engine(load_config().database.url)


def migrate(engine: Optional[Engine] = None) -> int:
    """
    Cancel duplicate open matches and create the partial unique index.

    Returns:
        Number of matches cancelled.
    """
    engine = _engine(engine)

    with engine.begin() as conn:
        result = conn.execute(text("""
            UPDATE study_matches
            SET status = 'cancelled'
            WHERE status IN ('pending', 'active')
              AND match_id NOT IN (
                  SELECT MAX(match_id)
                  FROM study_matches
                  WHERE status IN ('pending', 'active')
                  GROUP BY request_id
              )
        """))
        cancelled = result.rowcount or 0

        conn.execute(text(f"""
            CREATE UNIQUE INDEX IF NOT EXISTS {INDEX_NAME}
            ON study_matches (request_id)
            WHERE status IN ('pending', 'active')
        """))

    if cancelled:
        logger.warning(f"Cancelled {cancelled} duplicate open match(es)")
    logger.info(f"Index '{INDEX_NAME}' created or verified")
    return cancelled


def rollback(engine: Optional[Engine] = None):
    """Drop the partial unique index. Cancelled duplicates stay cancelled."""
    engine = _engine(engine)

    with engine.begin() as conn:
        conn.execute(text(f"DROP INDEX IF EXISTS {INDEX_NAME}"))

    logger.info(f"Index '{INDEX_NAME}' dropped")


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    parser = argparse.ArgumentParser(description="Migration enforcing one open match per request")
    parser.add_argument("--rollback", action="store_true", help="Rollback the migration")

    args = parser.parse_args()

    if args.rollback:
        rollback()
    else:
        migrate()
