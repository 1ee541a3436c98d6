#!/usr/bin/env python3
"""
Request models for API endpoints.

Field presence and types are checked here; business rules (blank text,
rating range, eligibility) are enforced by the lifecycle service.
"""

from pydantic import BaseModel, Field
from typing import Optional


class CreateStudyRequest(BaseModel):
    """Request to post a study request in a bubble."""
    bubble_id: int = Field(..., description="Bubble the request is posted in")
    skill_id: int = Field(..., description="Skill the requester wants help with")
    specific_topic: str = Field(..., description="What exactly to study")
    learning_objectives: str = Field(..., description="What the requester wants to get out of it")
    preferred_schedule: str = Field(..., description="When the requester is available")


class SelectTeacherRequest(BaseModel):
    """Request to send an open study request to one teacher."""
    teacher_id: int = Field(..., description="User id of the chosen teacher")


class RespondRequest(BaseModel):
    """Teacher's answer to a pending study request."""
    accepted: bool = Field(..., description="True to accept, false to decline")


class CompleteMatchRequest(BaseModel):
    """Request to mark an active match completed."""
    rating: int = Field(..., description="Rating of the other participant (1-5)")
    feedback: Optional[str] = Field(None, description="Free-text feedback, stored on the request")


class UpdateProfileRequest(BaseModel):
    """Profile fields to change; omitted fields are left as they are."""
    username: Optional[str] = Field(None, description="New display name")
    email: Optional[str] = Field(None, description="New email, must not belong to another account")
    university: Optional[str] = Field(None, description="University, blank to clear")
    major: Optional[str] = Field(None, description="Major, blank to clear")
