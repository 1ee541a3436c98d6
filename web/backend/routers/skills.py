#!/usr/bin/env python3
"""
Skill endpoints - the skill catalog.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..dependencies import get_db
from ..services.directory_service import DirectoryService
from ..models.responses import SkillsResponse

router = APIRouter(prefix="/api/skills", tags=["skills"])


@router.get("", response_model=SkillsResponse)
def list_skills(db: Session = Depends(get_db)):
    """List every skill, alphabetically. No authentication required."""
    skills = DirectoryService(db).list_skills()
    return SkillsResponse(success=True, count=len(skills), skills=skills)
