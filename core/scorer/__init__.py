#!/usr/bin/env python3
"""
Scoring Module - candidate teacher ranking.

Public API:
- calculate_match_score: weighted 0-100 compatibility of a candidate teacher
- score_components: raw per-feature scores (proficiency / department / seniority)
- rank_candidates: score and order a list of candidates

Modules:
- models.py: Data structures (CandidateProfile, RequesterProfile, ScoreBreakdown, RankedCandidate)
- match_score.py: Scoring formula and ranking
"""

from core.scorer.models import CandidateProfile, RequesterProfile, ScoreBreakdown, RankedCandidate
from core.scorer.match_score import (
    calculate_match_score,
    score_components,
    rank_candidates,
    WEIGHT_PROFICIENCY,
    WEIGHT_DEPARTMENT,
    WEIGHT_SENIORITY,
)

__all__ = [
    'CandidateProfile',
    'RequesterProfile',
    'ScoreBreakdown',
    'RankedCandidate',
    'calculate_match_score',
    'score_components',
    'rank_candidates',
    'WEIGHT_PROFICIENCY',
    'WEIGHT_DEPARTMENT',
    'WEIGHT_SENIORITY',
]
