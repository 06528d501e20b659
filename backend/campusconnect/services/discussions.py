"""Discussion threads, comments and upvotes."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy import update
from sqlmodel import Session, col, func, select

from ..exceptions import NotFoundError
from ..models import Comment, Discussion, User
from ..pagination import Page, paginate
from ..schemas import CommentCreate, DiscussionCreate
from .access import ensure_owner_or_admin
from .search import contains_any

logger = logging.getLogger(__name__)

PREVIEW_COMMENTS = 3


@dataclass
class DiscussionPreview:
    discussion: Discussion
    comment_count: int
    recent_comments: List[Comment]


def list_discussions(
    session: Session,
    department: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Page:
    statement = select(Discussion)
    if department:
        statement = statement.where(Discussion.department == department)
    if search:
        statement = statement.where(
            contains_any(search, col(Discussion.title), col(Discussion.content))
        )
    statement = statement.order_by(col(Discussion.created_at).desc())
    result = paginate(session, statement, page, limit)

    ids = [d.id for d in result.items]
    counts: Dict[str, int] = {}
    if ids:
        counts = dict(
            session.exec(
                select(Comment.discussion_id, func.count())
                .where(col(Comment.discussion_id).in_(ids))
                .group_by(Comment.discussion_id)
            ).all()
        )
    result.items = [
        DiscussionPreview(d, counts.get(d.id, 0), recent_comments(session, d.id))
        for d in result.items
    ]
    return result


def recent_comments(session: Session, discussion_id: str, limit: int = PREVIEW_COMMENTS) -> List[Comment]:
    return list(
        session.exec(
            select(Comment)
            .where(Comment.discussion_id == discussion_id)
            .order_by(col(Comment.created_at).desc())
            .limit(limit)
        ).all()
    )


def get_discussion(session: Session, discussion_id: str) -> Discussion:
    discussion = session.get(Discussion, discussion_id)
    if not discussion:
        raise NotFoundError("Discussion")
    return discussion


def create_discussion(session: Session, payload: DiscussionCreate, author: User) -> Discussion:
    discussion = Discussion(
        title=payload.title,
        content=payload.content,
        department=payload.department,
        author_id=author.id,
    )
    session.add(discussion)
    session.commit()
    session.refresh(discussion)
    logger.info("User %s started discussion %s", author.id, discussion.id)
    return discussion


def add_comment(session: Session, discussion_id: str, payload: CommentCreate, author: User) -> Comment:
    get_discussion(session, discussion_id)
    comment = Comment(content=payload.content, author_id=author.id, discussion_id=discussion_id)
    session.add(comment)
    session.commit()
    session.refresh(comment)
    return comment


def upvote(session: Session, discussion_id: str) -> int:
    """Add one upvote in the database and return the new total. Repeat votes all count."""
    result = session.execute(
        update(Discussion)
        .where(col(Discussion.id) == discussion_id)
        .values(upvotes=col(Discussion.upvotes) + 1)
    )
    if result.rowcount == 0:
        session.rollback()
        raise NotFoundError("Discussion")
    upvotes = session.exec(select(Discussion.upvotes).where(Discussion.id == discussion_id)).one()
    session.commit()
    return upvotes


def delete_discussion(session: Session, discussion_id: str, user: User) -> None:
    discussion = get_discussion(session, discussion_id)
    ensure_owner_or_admin(discussion.author_id, user)
    session.delete(discussion)
    session.commit()
    logger.info("User %s deleted discussion %s", user.id, discussion_id)
