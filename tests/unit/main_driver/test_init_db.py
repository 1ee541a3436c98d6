#!/usr/bin/env python3
"""
Tests for database initialization and reference data seeding.
"""

import unittest
from unittest.mock import patch

from sqlalchemy import select
from sqlalchemy.orm import Session
from tenacity import RetryError, stop_after_attempt

from core.config_loader import SeedConfig, SeedBubble, SeedSkill
from database.models import Bubble, Skill
from main_driver.init_db import init_db, seed_reference_data
from tests import create_test_engine


def sample_seed() -> SeedConfig:
    return SeedConfig(
        bubbles=[
            SeedBubble(name="Computer Science", description="Code"),
            SeedBubble(name="Mathematics"),
        ],
        skills=[
            SeedSkill(name="Python", bubble="Computer Science"),
            SeedSkill(name="Calculus", bubble="Mathematics"),
            SeedSkill(name="Academic Writing"),
        ],
    )


class TestSeedReferenceData(unittest.TestCase):

    def setUp(self):
        self.engine = create_test_engine()

    def tearDown(self):
        self.engine.dispose()

    def skills_by_name(self):
        with Session(self.engine) as session:
            rows = session.execute(
                select(Skill.name, Bubble.name).outerjoin(Bubble, Skill.bubble_id == Bubble.bubble_id)
            ).all()
        return {skill: bubble for skill, bubble in rows}

    def test_inserts_bubbles_and_skills(self):
        with Session(self.engine) as session:
            inserted = seed_reference_data(session, sample_seed())
            session.commit()

        self.assertEqual(inserted, 5)
        self.assertEqual(
            self.skills_by_name(),
            {"Python": "Computer Science", "Calculus": "Mathematics", "Academic Writing": None}
        )

    def test_idempotent(self):
        for _ in range(2):
            with Session(self.engine) as session:
                seed_reference_data(session, sample_seed())
                session.commit()

        with Session(self.engine) as session:
            self.assertEqual(len(session.execute(select(Bubble)).scalars().all()), 2)
            self.assertEqual(len(session.execute(select(Skill)).scalars().all()), 3)

    def test_adds_only_missing_rows(self):
        with Session(self.engine) as session:
            session.add(Bubble(name="Computer Science"))
            session.commit()

        with Session(self.engine) as session:
            inserted = seed_reference_data(session, sample_seed())
            session.commit()

        self.assertEqual(inserted, 4)
        self.assertEqual(self.skills_by_name()["Python"], "Computer Science")

    def test_unknown_bubble_rejected(self):
        seed = SeedConfig(skills=[SeedSkill(name="Rust", bubble="Systems")])
        with Session(self.engine) as session:
            with self.assertRaises(ValueError):
                seed_reference_data(session, seed)


class TestInitDb(unittest.TestCase):

    def setUp(self):
        self.engine = create_test_engine()

    def tearDown(self):
        self.engine.dispose()

    def test_creates_schema_and_seeds(self):
        init_db(engine=self.engine, seed=sample_seed())

        with Session(self.engine) as session:
            names = session.execute(select(Bubble.name).order_by(Bubble.name)).scalars().all()
        self.assertEqual(names, ["Computer Science", "Mathematics"])

    def test_gives_up_after_retries(self):
        bad_seed = SeedConfig(skills=[SeedSkill(name="Rust", bubble="Systems")])
        single_attempt = init_db.retry_with(stop=stop_after_attempt(1))

        with self.assertRaises(RetryError):
            single_attempt(engine=self.engine, seed=bad_seed)


class TestMainDriver(unittest.TestCase):

    @patch('main.init_db')
    def test_init_db_command(self, mock_init_db):
        import main

        main.main(['init-db'])

        mock_init_db.assert_called_once_with()

    @patch('main.serve')
    def test_serve_is_default(self, mock_serve):
        import main

        main.main([])

        mock_serve.assert_called_once()


if __name__ == '__main__':
    unittest.main()
