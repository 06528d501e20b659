# backend/campusconnect/routes/events.py
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session
from starlette.datastructures import UploadFile as StarletteUploadFile

from .. import config
from ..db import get_session
from ..deps import get_current_user, get_storage_service
from ..models import EventCategory, User
from ..schemas import EventCreate, EventUpdate
from ..serializers import event_to_dict
from ..services import events as event_service
from ..services.storage import StorageService

router = APIRouter(prefix="/events", tags=["events"])

FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _view(view: event_service.EventView) -> dict:
    return event_to_dict(view.event, view.rsvp_count, view.is_rsvped)


@router.get("")
def list_events(
    category: Optional[EventCategory] = None,
    department: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    result = event_service.list_events(
        session, current_user,
        category=category, department=department, search=search, page=page, limit=limit,
    )
    return result.to_dict(_view)


async def read_new_event(request: Request) -> Tuple[EventCreate, Optional[event_service.ImageFile]]:
    """Take the new event from a JSON body, or from a form with an optional ``image`` file."""
    image = None
    if request.headers.get("content-type", "").startswith(FORM_TYPES):
        form = await request.form()
        data = {}
        for key, value in form.items():
            if isinstance(value, StarletteUploadFile):
                if key == "image" and value.filename:
                    image = event_service.ImageFile(value.filename, await value.read(), value.content_type)
            elif value != "":
                data[key] = value
    else:
        try:
            data = await request.json()
        except ValueError:
            raise RequestValidationError(
                [{"loc": ("body",), "msg": "Body must be JSON or multipart form data", "type": "body"}]
            )
    try:
        payload = EventCreate.model_validate(data)
    except PydanticValidationError as exc:
        raise RequestValidationError(exc.errors())
    return payload, image


@router.post("", status_code=201)
def create_event(
    current_user: User = Depends(get_current_user),
    new_event: Tuple[EventCreate, Optional[event_service.ImageFile]] = Depends(read_new_event),
    session: Session = Depends(get_session),
    storage: StorageService = Depends(get_storage_service),
):
    payload, image = new_event
    return _view(event_service.create_event(session, payload, current_user, storage=storage, image=image))


@router.get("/{event_id}")
def get_event(
    event_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return _view(event_service.get_event_view(session, event_id, current_user))


@router.post("/{event_id}/rsvp")
def rsvp(
    event_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    rsvped = event_service.toggle_rsvp(session, event_id, current_user)
    return {"message": "RSVP successful" if rsvped else "RSVP cancelled", "rsvped": rsvped}


@router.put("/{event_id}")
def update_event(
    event_id: str,
    payload: EventUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return _view(event_service.update_event(session, event_id, payload, current_user))


@router.delete("/{event_id}")
def delete_event(
    event_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    event_service.delete_event(session, event_id, current_user)
    return {"message": "Event deleted successfully"}
