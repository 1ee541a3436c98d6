#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any


class MessageResponse(BaseModel):
    """Generic acknowledgement."""
    success: bool
    message: str


class SkillSummary(BaseModel):
    skill_id: int
    name: str
    bubble_id: Optional[int] = None


class SkillsResponse(BaseModel):
    success: bool
    count: int
    skills: List[SkillSummary]


class BubbleSummary(BaseModel):
    bubble_id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[str] = None


class BubblesResponse(BaseModel):
    """All bubbles plus the caller's current one (null for anonymous callers)."""
    success: bool
    bubbles: List[BubbleSummary]
    current_bubble: Optional[BubbleSummary] = None


class BubbleResponse(BaseModel):
    success: bool
    bubble: BubbleSummary


class JoinBubbleResponse(BaseModel):
    success: bool
    bubble_id: int
    joined: bool = Field(description="False when the caller was already in the bubble")
    message: str


class LeaveBubbleResponse(BaseModel):
    success: bool
    bubble_id: int
    cancelled_request_ids: List[int]
    cancelled_match_ids: List[int]
    reopened_request_ids: List[int]
    message: str


class StudyRequestSummary(BaseModel):
    """A study request with display names joined in."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "request_id": 12,
                "requester_id": 3,
                "requester_name": "mina",
                "bubble_id": 1,
                "bubble_name": "Computer Science",
                "skill_id": 2,
                "skill_name": "Data Structures",
                "specific_topic": "Red-black tree rotations",
                "learning_objectives": "Implement insert with rebalancing",
                "preferred_schedule": "Weekday evenings",
                "status": "open",
                "feedback": None,
                "created_at": "2026-03-01T18:30:00",
                "is_own_request": False
            }
        }
    )

    request_id: int
    requester_id: int
    requester_name: Optional[str] = None
    bubble_id: int
    bubble_name: Optional[str] = None
    skill_id: int
    skill_name: Optional[str] = None
    specific_topic: str
    learning_objectives: str
    preferred_schedule: str
    status: str
    feedback: Optional[str] = None
    created_at: Optional[str] = None
    is_own_request: Optional[bool] = None


class StudyRequestsResponse(BaseModel):
    success: bool
    count: int
    requests: List[StudyRequestSummary]


class StudyRequestResponse(BaseModel):
    success: bool
    request: StudyRequestSummary


class CandidateSummary(BaseModel):
    """A ranked candidate teacher."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": 7,
                "username": "jonas",
                "department": "Computer Science",
                "study_year": 3,
                "proficiency_level": 4,
                "has_request_pending": False,
                "score": 90,
                "match_details": {
                    "proficiency_score": 80.0,
                    "department_score": 100.0,
                    "year_score": 100.0,
                    "department_match": True,
                    "year_difference": 2
                }
            }
        }
    )

    user_id: int
    username: str
    department: str
    study_year: int
    proficiency_level: int = Field(ge=1, le=5)
    has_request_pending: bool
    score: int = Field(ge=0, le=100)
    match_details: Dict[str, Any]


class PotentialMatchesResponse(BaseModel):
    success: bool
    request_id: int
    count: int
    candidates: List[CandidateSummary]


class MatchRecord(BaseModel):
    """State of a match and its request right after a transition."""
    match_id: int
    request_id: int
    teacher_id: int
    student_id: int
    status: str
    request_status: str


class MatchActionResponse(BaseModel):
    success: bool
    match: MatchRecord
    message: str


class RatingSummary(BaseModel):
    request_id: int
    rater_id: int
    rated_id: int
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None


class CompleteMatchResponse(BaseModel):
    success: bool
    match: MatchRecord
    rating: RatingSummary
    message: str


class MatchSummary(BaseModel):
    """A match as seen by one participant."""
    match_id: int
    request_id: int
    teacher_id: int
    student_id: int
    match_status: str
    status: str = Field(description="Status of the underlying study request")
    topic: str
    learning_objectives: str
    preferred_schedule: str
    feedback: Optional[str] = None
    skill_name: Optional[str] = None
    other_user: Optional[str] = Field(None, description="Username of the other participant")
    created_at: Optional[str] = None


class MatchesResponse(BaseModel):
    success: bool
    role: str
    count: int
    matches: List[MatchSummary]


class NotificationItem(BaseModel):
    notification_id: int
    message: str
    type: str
    read: bool
    created_at: Optional[str] = None


class NotificationsResponse(BaseModel):
    success: bool
    count: int
    unread_count: int
    notifications: List[NotificationItem]


class MarkReadResponse(BaseModel):
    success: bool
    updated: int
    message: str


class ProfileSkill(BaseModel):
    skill_id: int
    name: Optional[str] = None
    proficiency_level: int
    is_teaching: bool


class UserProfile(BaseModel):
    user_id: int
    username: str
    email: str
    department: str
    study_year: int
    university: Optional[str] = None
    major: Optional[str] = None
    current_bubble_id: Optional[int] = None
    skills: List[ProfileSkill] = Field(default_factory=list)


class ProfileResponse(BaseModel):
    success: bool
    profile: UserProfile
