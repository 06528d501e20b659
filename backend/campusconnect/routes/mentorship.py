# backend/campusconnect/routes/mentorship.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from .. import config
from ..db import get_session
from ..deps import get_current_user
from ..models import MentorshipStatus, User
from ..schemas import MentorshipCreate, MentorshipStatusUpdate
from ..serializers import mentorship_to_dict
from ..services import mentorship as mentorship_service

router = APIRouter(prefix="/mentorship", tags=["mentorship"])


@router.get("/requests")
def list_requests(
    status: Optional[MentorshipStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    result = mentorship_service.list_requests(
        session, current_user, status=status, page=page, limit=limit
    )
    return result.to_dict(mentorship_to_dict)


@router.post("/requests", status_code=201)
def create_request(
    payload: MentorshipCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return mentorship_to_dict(mentorship_service.create_request(session, payload, current_user))


@router.put("/requests/{request_id}/accept")
def accept_request(
    request_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return mentorship_to_dict(mentorship_service.accept_request(session, request_id, current_user))


@router.put("/requests/{request_id}")
def update_request_status(
    request_id: str,
    payload: MentorshipStatusUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    request = mentorship_service.update_status(session, request_id, current_user, payload.status)
    return mentorship_to_dict(request)
