"""Event listing, creation, RSVP toggling and owner/admin edits."""

import logging
import mimetypes
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, func, select

from ..exceptions import BadRequestError, ConflictError, NotFoundError, ValidationError
from ..models import Event, EventCategory, EventRSVP, User
from ..pagination import Page, paginate
from ..schemas import EventCreate, EventUpdate
from .access import ensure_owner_or_admin
from .search import contains_any

logger = logging.getLogger(__name__)

# columns that may be cleared with an explicit null on update
NULLABLE_FIELDS = {"max_attendees", "image_url"}


@dataclass
class EventView:
    event: Event
    rsvp_count: int
    is_rsvped: bool


def _rsvp_stats(session: Session, event_ids: List[str], user_id: str):
    if not event_ids:
        return {}, set()
    counts: Dict[str, int] = dict(
        session.exec(
            select(EventRSVP.event_id, func.count())
            .where(col(EventRSVP.event_id).in_(event_ids))
            .group_by(EventRSVP.event_id)
        ).all()
    )
    mine: Set[str] = set(
        session.exec(
            select(EventRSVP.event_id).where(
                EventRSVP.user_id == user_id, col(EventRSVP.event_id).in_(event_ids)
            )
        ).all()
    )
    return counts, mine


def _views(session: Session, events: List[Event], user: User) -> List[EventView]:
    counts, mine = _rsvp_stats(session, [e.id for e in events], user.id)
    return [EventView(e, counts.get(e.id, 0), e.id in mine) for e in events]


def list_events(
    session: Session,
    user: User,
    category: Optional[EventCategory] = None,
    department: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Page:
    statement = select(Event)
    if category:
        statement = statement.where(Event.category == category)
    if department:
        statement = statement.join(User, col(Event.created_by_id) == col(User.id)).where(
            User.department == department
        )
    if search:
        statement = statement.where(
            contains_any(search, col(Event.title), col(Event.description))
        )
    statement = statement.order_by(col(Event.date))

    result = paginate(session, statement, page, limit)
    result.items = _views(session, result.items, user)
    return result


def get_event(session: Session, event_id: str) -> Event:
    event = session.get(Event, event_id)
    if not event:
        raise NotFoundError("Event")
    return event


def get_event_view(session: Session, event_id: str, user: User) -> EventView:
    return _views(session, [get_event(session, event_id)], user)[0]


@dataclass
class ImageFile:
    filename: str
    content: bytes
    content_type: Optional[str] = None


def create_event(
    session: Session,
    payload: EventCreate,
    creator: User,
    storage=None,
    image: Optional[ImageFile] = None,
) -> EventView:
    """Create an event. An attached ``image`` is uploaded first and becomes ``imageUrl``."""
    values = payload.model_dump()
    if image is not None:
        content_type = image.content_type or mimetypes.guess_type(image.filename)[0] or ""
        if not content_type.startswith("image/"):
            raise BadRequestError("Event image must be an image file")
        values["image_url"] = storage.upload(image.content, image.filename, content_type, folder="events")

    event = Event(**values, created_by_id=creator.id)
    session.add(event)
    try:
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        if image is not None:
            storage.discard(values["image_url"])
        raise
    session.refresh(event)
    logger.info("User %s created event %s", creator.id, event.id)
    return EventView(event, 0, False)


def _lock_event(session: Session, event_id: str) -> Event:
    # a no-op write takes the row lock (the database write lock on SQLite)
    # before anything is read, so the capacity count cannot go stale
    locked = session.execute(
        update(Event)
        .where(col(Event.id) == event_id)
        .values(id=Event.id)
        .execution_options(synchronize_session=False)
    )
    if locked.rowcount == 0:
        session.rollback()
        raise NotFoundError("Event")
    return session.exec(select(Event).where(Event.id == event_id)).one()


def toggle_rsvp(session: Session, event_id: str, user: User) -> bool:
    """Cancel an existing RSVP or add a new one. Returns whether the user is now attending.

    The event is locked first, so the capacity check and the insert commit
    together and concurrent RSVPs cannot overbook it.
    """
    event = _lock_event(session, event_id)

    existing = session.exec(
        select(EventRSVP).where(EventRSVP.user_id == user.id, EventRSVP.event_id == event_id)
    ).first()
    if existing:
        session.delete(existing)
        session.commit()
        logger.info("User %s cancelled RSVP for event %s", user.id, event_id)
        return False

    if event.max_attendees is not None:
        attending = session.exec(
            select(func.count()).select_from(EventRSVP).where(EventRSVP.event_id == event_id)
        ).one()
        if attending >= event.max_attendees:
            session.rollback()
            raise ConflictError("Event is full")

    session.add(EventRSVP(user_id=user.id, event_id=event_id))
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError("Already RSVPed to this event")
    logger.info("User %s RSVPed to event %s", user.id, event_id)
    return True


def update_event(session: Session, event_id: str, payload: EventUpdate, user: User) -> EventView:
    event = get_event(session, event_id)
    ensure_owner_or_admin(event.created_by_id, user)

    changes = payload.model_dump(exclude_unset=True)
    errors = [
        {"field": name, "message": "Value may not be null"}
        for name, value in changes.items()
        if value is None and name not in NULLABLE_FIELDS
    ]
    if errors:
        raise ValidationError(errors=errors)

    for name, value in changes.items():
        setattr(event, name, value)
    session.add(event)
    session.commit()
    session.refresh(event)
    return get_event_view(session, event.id, user)


def delete_event(session: Session, event_id: str, user: User) -> None:
    event = get_event(session, event_id)
    ensure_owner_or_admin(event.created_by_id, user)
    # rsvps go with the event
    session.delete(event)
    session.commit()
    logger.info("User %s deleted event %s", user.id, event_id)
