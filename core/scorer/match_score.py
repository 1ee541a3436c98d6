#!/usr/bin/env python3
"""
Match Score - weighted compatibility between a candidate teacher and a student.

Formula:
    proficiency = level / 5 * 100
    department  = 100 if same department else 0
    seniority   = 0 if candidate is not senior, else min(gap / 4 * 100, 100)
    score       = round_half_up(0.5 * proficiency + 0.3 * department + 0.2 * seniority), capped at 100

Scores are integer percentages (0-100).
"""

import math
import logging
from typing import Iterable, List

from core.scorer.models import CandidateProfile, RequesterProfile, ScoreBreakdown, RankedCandidate

logger = logging.getLogger(__name__)

WEIGHT_PROFICIENCY = 0.5
WEIGHT_DEPARTMENT = 0.3
WEIGHT_SENIORITY = 0.2

MAX_PROFICIENCY = 5
SENIORITY_CAP_YEARS = 4


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; scores round .5 up
    return int(math.floor(value + 0.5))


def score_components(candidate: CandidateProfile, requester: RequesterProfile) -> ScoreBreakdown:
    """Raw component scores, each in [0, 100]."""
    proficiency_score = (candidate.proficiency_level / MAX_PROFICIENCY) * 100

    department_match = candidate.department == requester.department
    department_score = 100.0 if department_match else 0.0

    gap = candidate.study_year - requester.study_year
    if gap <= 0:
        # Junior or same-year candidates get no seniority credit
        year_score = 0.0
    else:
        year_score = min((gap / SENIORITY_CAP_YEARS) * 100, 100.0)

    return ScoreBreakdown(
        proficiency_score=proficiency_score,
        department_score=department_score,
        year_score=year_score,
        department_match=department_match,
        year_difference=abs(gap),
    )


def calculate_match_score(candidate: CandidateProfile, requester: RequesterProfile) -> int:
    """
    Compatibility score of a candidate teacher for a requesting student.

    Args:
        candidate: Candidate teacher (proficiency 1-5, department, study year)
        requester: Requesting student (department, study year)

    Returns:
        Integer score in [0, 100]
    """
    components = score_components(candidate, requester)

    weighted = (
        components.proficiency_score * WEIGHT_PROFICIENCY +
        components.department_score * WEIGHT_DEPARTMENT +
        components.year_score * WEIGHT_SENIORITY
    )

    logger.debug(
        f"Score for candidate {candidate.user_id}: proficiency={components.proficiency_score:.1f}, "
        f"department={components.department_score:.0f}, year={components.year_score:.1f}, "
        f"weighted={weighted:.2f}"
    )

    return min(100, max(0, _round_half_up(weighted)))


def rank_candidates(
    candidates: Iterable[CandidateProfile],
    requester: RequesterProfile
) -> List[RankedCandidate]:
    """
    Score candidates and order them by descending score.

    Equal scores are ordered by ascending user_id so results are reproducible.
    """
    ranked = []
    for candidate in candidates:
        components = score_components(candidate, requester)
        ranked.append(RankedCandidate(
            user_id=candidate.user_id,
            username=candidate.username,
            department=candidate.department,
            study_year=candidate.study_year,
            proficiency_level=candidate.proficiency_level,
            has_request_pending=candidate.has_request_pending,
            score=calculate_match_score(candidate, requester),
            match_details=components.to_dict(),
        ))

    ranked.sort(key=lambda c: (-c.score, c.user_id))
    return ranked
