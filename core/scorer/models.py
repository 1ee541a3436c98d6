#!/usr/bin/env python3
"""
Scoring Models - Data structures for candidate scoring.
"""

from typing import Dict, Any
from dataclasses import dataclass, field, asdict


@dataclass(frozen=True)
class RequesterProfile:
    """The student asking for help."""
    department: str
    study_year: int


@dataclass(frozen=True)
class CandidateProfile:
    """A potential teacher, as seen by the scorer."""
    user_id: int
    proficiency_level: int  # 1-5, from the teaching endorsement
    department: str
    study_year: int
    username: str = ""
    has_request_pending: bool = False


@dataclass(frozen=True)
class ScoreBreakdown:
    """Raw component scores (each 0-100, before weighting)."""
    proficiency_score: float
    department_score: float
    year_score: float
    department_match: bool
    year_difference: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RankedCandidate:
    """Scored candidate returned to the requester."""
    user_id: int
    username: str
    department: str
    study_year: int
    proficiency_level: int
    has_request_pending: bool
    score: int
    match_details: Dict[str, Any] = field(default_factory=dict)
