#!/usr/bin/env python3
"""
Profile endpoints - read and edit the caller's own profile.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.lifecycle import LifecycleService, ProfileUpdate
from ..dependencies import get_db, get_lifecycle_service, get_current_user_id
from ..services.directory_service import DirectoryService
from ..models.requests import UpdateProfileRequest
from ..models.responses import ProfileResponse

router = APIRouter(prefix="/api/user", tags=["profile"])


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get the caller's profile and skill endorsements."""
    return ProfileResponse(success=True, profile=DirectoryService(db).get_profile(user_id))


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    body: UpdateProfileRequest,
    user_id: int = Depends(get_current_user_id),
    service: LifecycleService = Depends(get_lifecycle_service),
    db: Session = Depends(get_db)
):
    """
    Update username, email, university or major.

    Only the fields sent are changed. Returns the profile as stored afterwards.
    """
    service.update_profile(user_id, ProfileUpdate(
        username=body.username,
        email=body.email,
        university=body.university,
        major=body.major
    ))
    return ProfileResponse(success=True, profile=DirectoryService(db).get_profile(user_id))
