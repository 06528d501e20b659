# backend/campusconnect/routes/discussions.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from .. import config
from ..db import get_session
from ..deps import get_current_user
from ..models import User
from ..schemas import CommentCreate, DiscussionCreate
from ..serializers import comment_to_dict, discussion_to_dict
from ..services import discussions as discussion_service

router = APIRouter(prefix="/discussions", tags=["discussions"])


def _preview(item: discussion_service.DiscussionPreview) -> dict:
    return discussion_to_dict(item.discussion, item.recent_comments, comment_count=item.comment_count)


@router.get("")
def list_discussions(
    department: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    result = discussion_service.list_discussions(
        session, department=department, search=search, page=page, limit=limit
    )
    return result.to_dict(_preview)


@router.post("", status_code=201)
def create_discussion(
    payload: DiscussionCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    discussion = discussion_service.create_discussion(session, payload, current_user)
    return discussion_to_dict(discussion, [])


@router.get("/{discussion_id}")
def get_discussion(
    discussion_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    # full thread, oldest comment first
    discussion = discussion_service.get_discussion(session, discussion_id)
    return discussion_to_dict(discussion, discussion.comments)


@router.post("/{discussion_id}/comments", status_code=201)
def add_comment(
    discussion_id: str,
    payload: CommentCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return comment_to_dict(discussion_service.add_comment(session, discussion_id, payload, current_user))


@router.post("/{discussion_id}/upvote")
def upvote(
    discussion_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return {"upvotes": discussion_service.upvote(session, discussion_id)}


@router.delete("/{discussion_id}")
def delete_discussion(
    discussion_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    discussion_service.delete_discussion(session, discussion_id, current_user)
    return {"message": "Discussion deleted successfully"}
