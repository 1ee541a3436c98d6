import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from tenacity import retry, stop_after_attempt, wait_fixed

from core.config_loader import SeedConfig, load_config
from database.database import get_engine, db_session_scope
from database.models import Base, Bubble, Skill

logger = logging.getLogger(__name__)


def seed_reference_data(session: Session, seed: SeedConfig) -> int:
    """
    Insert configured bubbles and skills that do not exist yet (matched by name).

    Returns:
        Number of rows inserted.
    """
    inserted = 0

    bubbles = {b.name: b for b in session.execute(select(Bubble)).scalars().all()}
    for seed_bubble in seed.bubbles:
        if seed_bubble.name in bubbles:
            continue
        bubble = Bubble(name=seed_bubble.name, description=seed_bubble.description)
        session.add(bubble)
        bubbles[bubble.name] = bubble
        inserted += 1
    session.flush()

    existing_skills = set(session.execute(select(Skill.name)).scalars().all())
    for seed_skill in seed.skills:
        if seed_skill.name in existing_skills:
            continue
        bubble_id = None
        if seed_skill.bubble is not None:
            if seed_skill.bubble not in bubbles:
                raise ValueError(f"Skill '{seed_skill.name}' refers to unknown bubble '{seed_skill.bubble}'")
            bubble_id = bubbles[seed_skill.bubble].bubble_id
        session.add(Skill(name=seed_skill.name, bubble_id=bubble_id))
        existing_skills.add(seed_skill.name)
        inserted += 1

    return inserted


@retry(stop=stop_after_attempt(5), wait=wait_fixed(2))
def init_db(engine: Optional[Engine] = None, seed: Optional[SeedConfig] = None):
    """Create tables and seed reference data. Retried while the database is still starting."""
    engine = engine or get_engine()
    seed = seed if seed is not None else load_config().seed

    logger.info("Initializing database...")
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Tables created or verified.")

        with db_session_scope(sessionmaker(bind=engine)) as session:
            inserted = seed_reference_data(session, seed)
        logger.info(f"Seeded {inserted} bubble/skill row(s).")

    except Exception as e:
        logger.error(f"Error initializing DB: {e}")
        raise


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    init_db()
