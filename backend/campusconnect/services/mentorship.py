"""
Mentorship requests.

A request moves through a small, closed set of states::

    PENDING --accept--> ACCEPTED --> COMPLETED
    PENDING ----------> DECLINED

DECLINED and COMPLETED are terminal. Accepting is the only way into ACCEPTED
because it is also what binds the mentor. Every write is conditional on the
status that was read, so two alumni racing to accept the same request cannot
both win.
"""

import logging
from typing import Dict, FrozenSet, Optional

from sqlalchemy import update
from sqlmodel import Session, and_, col, or_, select

from ..exceptions import AuthorizationError, BadRequestError, ConflictError, NotFoundError
from ..models import MentorshipRequest, MentorshipStatus, Role, User
from ..pagination import Page, paginate
from ..schemas import MentorshipCreate
from .access import is_admin, require_role

logger = logging.getLogger(__name__)

TRANSITIONS: Dict[MentorshipStatus, FrozenSet[MentorshipStatus]] = {
    MentorshipStatus.PENDING: frozenset({MentorshipStatus.ACCEPTED, MentorshipStatus.DECLINED}),
    MentorshipStatus.ACCEPTED: frozenset({MentorshipStatus.COMPLETED}),
    MentorshipStatus.COMPLETED: frozenset(),
    MentorshipStatus.DECLINED: frozenset(),
}


def can_transition(current: MentorshipStatus, new: MentorshipStatus) -> bool:
    return new in TRANSITIONS[current]


def ensure_transition(current: MentorshipStatus, new: MentorshipStatus) -> None:
    if not can_transition(current, new):
        raise BadRequestError(f"Cannot change a {current.value} request to {new.value}")


def list_requests(
    session: Session,
    user: User,
    status: Optional[MentorshipStatus] = None,
    page: int = 1,
    limit: int = 10,
) -> Page:
    """Students see their own requests, alumni see theirs plus the unclaimed pending pool."""
    statement = select(MentorshipRequest)
    if user.role == Role.STUDENT:
        statement = statement.where(MentorshipRequest.student_id == user.id)
    elif user.role == Role.ALUMNI:
        statement = statement.where(
            or_(
                MentorshipRequest.mentor_id == user.id,
                and_(
                    col(MentorshipRequest.mentor_id).is_(None),
                    MentorshipRequest.status == MentorshipStatus.PENDING,
                ),
            )
        )
    if status:
        statement = statement.where(MentorshipRequest.status == status)
    statement = statement.order_by(col(MentorshipRequest.created_at).desc())
    return paginate(session, statement, page, limit)


def get_request(session: Session, request_id: str) -> MentorshipRequest:
    request = session.get(MentorshipRequest, request_id)
    if not request:
        raise NotFoundError("Mentorship request")
    return request


def create_request(session: Session, payload: MentorshipCreate, student: User) -> MentorshipRequest:
    require_role(student, Role.STUDENT, "Only students can create mentorship requests")
    request = MentorshipRequest(
        title=payload.title,
        description=payload.description,
        student_id=student.id,
    )
    session.add(request)
    session.commit()
    session.refresh(request)
    logger.info("Student %s opened mentorship request %s", student.id, request.id)
    return request


def _conditional_update(session: Session, request_id: str, expected: MentorshipStatus, **values) -> int:
    result = session.execute(
        update(MentorshipRequest)
        .where(col(MentorshipRequest.id) == request_id, col(MentorshipRequest.status) == expected)
        .values(**values)
    )
    return result.rowcount


def accept_request(session: Session, request_id: str, alumni: User) -> MentorshipRequest:
    require_role(alumni, Role.ALUMNI, "Only alumni can accept mentorship requests")

    changed = _conditional_update(
        session,
        request_id,
        MentorshipStatus.PENDING,
        status=MentorshipStatus.ACCEPTED,
        mentor_id=alumni.id,
    )
    if not changed:
        session.rollback()
        get_request(session, request_id)
        raise BadRequestError("Request is not pending")
    session.commit()

    request = get_request(session, request_id)
    session.refresh(request)
    logger.info("Alumni %s accepted mentorship request %s", alumni.id, request_id)
    return request


def update_status(
    session: Session, request_id: str, user: User, new_status: MentorshipStatus
) -> MentorshipRequest:
    request = get_request(session, request_id)
    if user.id not in (request.student_id, request.mentor_id) and not is_admin(user):
        raise AuthorizationError()

    if new_status == MentorshipStatus.ACCEPTED:
        raise BadRequestError("Requests are accepted through the accept endpoint")
    current = request.status
    ensure_transition(current, new_status)

    if not _conditional_update(session, request_id, current, status=new_status):
        session.rollback()
        raise ConflictError("Request was modified by someone else, reload and try again")
    session.commit()
    session.refresh(request)
    logger.info(
        "User %s moved mentorship request %s from %s to %s",
        user.id, request_id, current.value, new_status.value,
    )
    return request
