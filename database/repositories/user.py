import logging
from typing import List, Optional, Tuple
from sqlalchemy import select, update

from database.models import User, UserSkill, Bubble, Skill
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository):
    def get_user(self, user_id: int) -> Optional[User]:
        stmt = select(User).where(User.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_bubble(self, bubble_id: int) -> Optional[Bubble]:
        stmt = select(Bubble).where(Bubble.bubble_id == bubble_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_skill(self, skill_id: int) -> Optional[Skill]:
        stmt = select(Skill).where(Skill.skill_id == skill_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_bubbles(self) -> List[Bubble]:
        stmt = select(Bubble).order_by(Bubble.name)
        return self.db.execute(stmt).scalars().all()

    def list_skills(self, bubble_id: Optional[int] = None) -> List[Skill]:
        stmt = select(Skill)
        if bubble_id is not None:
            stmt = stmt.where(Skill.bubble_id == bubble_id)
        stmt = stmt.order_by(Skill.name)
        return self.db.execute(stmt).scalars().all()

    def list_endorsements(self, user_id: int) -> List[UserSkill]:
        stmt = select(UserSkill).where(UserSkill.user_id == user_id).order_by(UserSkill.skill_id)
        return self.db.execute(stmt).scalars().all()

    def get_endorsement(self, user_id: int, skill_id: int) -> Optional[UserSkill]:
        stmt = select(UserSkill).where(
            UserSkill.user_id == user_id,
            UserSkill.skill_id == skill_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def find_teaching_candidates(self, skill_id: int, exclude_user_id: int) -> List[Tuple[User, UserSkill]]:
        """
        Users eligible to teach a skill: a teaching endorsement for it, not the
        requester, and currently inside some bubble.
        """
        stmt = (
            select(User, UserSkill)
            .join(UserSkill, UserSkill.user_id == User.user_id)
            .where(
                UserSkill.skill_id == skill_id,
                UserSkill.is_teaching.is_(True),
                User.user_id != exclude_user_id,
                User.current_bubble_id.is_not(None),
            )
            .order_by(User.user_id)
        )
        return [(row[0], row[1]) for row in self.db.execute(stmt).all()]

    def set_current_bubble(self, user_id: int, bubble_id: Optional[int], expected_bubble_id: Optional[int]) -> bool:
        """
        Move a user between bubbles, guarded by the bubble they are expected to be in.

        Returns False when the user row no longer matches (lost race).
        """
        stmt = update(User).where(User.user_id == user_id)
        if expected_bubble_id is None:
            stmt = stmt.where(User.current_bubble_id.is_(None))
        else:
            stmt = stmt.where(User.current_bubble_id == expected_bubble_id)
        result = self.db.execute(stmt.values(current_bubble_id=bubble_id))
        return result.rowcount == 1

    def update_profile(self, user_id: int, **values) -> bool:
        """Write profile columns; False when the user row does not exist."""
        stmt = update(User).where(User.user_id == user_id).values(**values)
        return self.db.execute(stmt).rowcount == 1
