#!/usr/bin/env python3
"""
Study request endpoints - create, list, select a teacher, respond, cancel, delete.
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.lifecycle import LifecycleService, NewStudyRequest, StudyMatchRecord
from ..dependencies import get_db, get_lifecycle_service, get_current_user_id
from ..services.directory_service import DirectoryService
from ..models.requests import CreateStudyRequest, SelectTeacherRequest, RespondRequest
from ..models.responses import (
    MessageResponse,
    StudyRequestResponse,
    StudyRequestsResponse,
    MatchActionResponse,
    MatchRecord,
    CandidateSummary,
    PotentialMatchesResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["study-requests"])


def match_record(record: StudyMatchRecord) -> MatchRecord:
    return MatchRecord(
        match_id=record.match_id,
        request_id=record.request_id,
        teacher_id=record.teacher_id,
        student_id=record.student_id,
        status=record.status.value,
        request_status=record.request_status.value
    )


@router.post("/api/study-requests", response_model=StudyRequestResponse, status_code=201)
def create_study_request(
    body: CreateStudyRequest,
    user_id: int = Depends(get_current_user_id),
    service: LifecycleService = Depends(get_lifecycle_service),
    db: Session = Depends(get_db)
):
    """
    Post a study request in the caller's current bubble.

    The skill must belong to the bubble (or be global) and all text fields
    must be non-blank.
    """
    record = service.create_request(
        user_id,
        NewStudyRequest(
            bubble_id=body.bubble_id,
            skill_id=body.skill_id,
            specific_topic=body.specific_topic,
            learning_objectives=body.learning_objectives,
            preferred_schedule=body.preferred_schedule
        )
    )

    created = DirectoryService(db).get_request(record.request_id, viewer_id=user_id)
    return StudyRequestResponse(success=True, request=created)


@router.get("/api/my-requests", response_model=StudyRequestsResponse)
def list_my_requests(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """The caller's own study requests in every status, newest first."""
    requests = DirectoryService(db).list_my_requests(user_id)
    return StudyRequestsResponse(success=True, count=len(requests), requests=requests)


@router.delete("/api/study-requests/{request_id}", response_model=MessageResponse)
def delete_study_request(
    request_id: int,
    user_id: int = Depends(get_current_user_id),
    service: LifecycleService = Depends(get_lifecycle_service)
):
    """
    Delete a request together with its match history and ratings.

    Pending or active requests must be cancelled first (409 otherwise).
    """
    service.delete_or_cancel_request(request_id, user_id)
    return MessageResponse(success=True, message="Request deleted successfully")


@router.post("/api/study-requests/{request_id}/cancel", response_model=StudyRequestResponse)
def cancel_pending_request(
    request_id: int,
    user_id: int = Depends(get_current_user_id),
    service: LifecycleService = Depends(get_lifecycle_service),
    db: Session = Depends(get_db)
):
    """Withdraw a pending request from its teacher; the request becomes open again."""
    service.cancel_pending(request_id, user_id)
    reopened = DirectoryService(db).get_request(request_id, viewer_id=user_id)
    return StudyRequestResponse(success=True, request=reopened)


@router.post("/api/study-requests/{request_id}/select", response_model=MatchActionResponse, status_code=201)
def select_teacher(
    request_id: int,
    body: SelectTeacherRequest,
    user_id: int = Depends(get_current_user_id),
    service: LifecycleService = Depends(get_lifecycle_service)
):
    """Send an open request to one of its potential teachers."""
    record = service.select_teacher(request_id, body.teacher_id, user_id)
    return MatchActionResponse(
        success=True,
        match=match_record(record),
        message="Request sent to teacher successfully"
    )


@router.post("/api/study-requests/{request_id}/respond", response_model=MatchActionResponse)
def respond_to_request(
    request_id: int,
    body: RespondRequest,
    user_id: int = Depends(get_current_user_id),
    service: LifecycleService = Depends(get_lifecycle_service)
):
    """
    Accept or decline a pending request as its chosen teacher.

    Declining reopens the request for the student. Answering twice is a 409.
    """
    record = service.respond(request_id, user_id, body.accepted)
    return MatchActionResponse(
        success=True,
        match=match_record(record),
        message=f"Request {'accepted' if body.accepted else 'declined'} successfully"
    )


@router.get("/api/potential-matches/{request_id}", response_model=PotentialMatchesResponse)
def get_potential_matches(
    request_id: int,
    user_id: int = Depends(get_current_user_id),
    service: LifecycleService = Depends(get_lifecycle_service)
):
    """
    Ranked candidate teachers for one of the caller's requests.

    Sorted by score (highest first), ties broken by user id.
    """
    ranked = service.compute_ranked_candidates(request_id, viewer_id=user_id)
    candidates = [
        CandidateSummary(
            user_id=c.user_id,
            username=c.username,
            department=c.department,
            study_year=c.study_year,
            proficiency_level=c.proficiency_level,
            has_request_pending=c.has_request_pending,
            score=c.score,
            match_details=c.match_details
        )
        for c in ranked
    ]
    return PotentialMatchesResponse(
        success=True,
        request_id=request_id,
        count=len(candidates),
        candidates=candidates
    )
