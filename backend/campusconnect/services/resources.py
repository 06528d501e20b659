"""Resource library: uploads to object storage, listing, downloads, deletion."""

import logging
import mimetypes
from typing import Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from ..exceptions import BadRequestError, NotFoundError
from ..models import Resource, User
from ..pagination import Page, paginate
from ..schemas import ResourceCreate
from .access import ensure_owner_or_admin
from .search import contains, contains_any

logger = logging.getLogger(__name__)

DEFAULT_FILE_TYPE = "application/octet-stream"


def detect_file_type(filename: Optional[str], content_type: Optional[str]) -> str:
    if content_type and content_type != DEFAULT_FILE_TYPE:
        return content_type
    guessed, _ = mimetypes.guess_type(filename or "")
    return guessed or content_type or DEFAULT_FILE_TYPE


def list_resources(
    session: Session,
    subject: Optional[str] = None,
    file_type: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Page:
    statement = select(Resource)
    if subject:
        statement = statement.where(contains(col(Resource.subject), subject))
    if file_type:
        statement = statement.where(Resource.file_type == file_type)
    if search:
        statement = statement.where(
            contains_any(search, col(Resource.title), col(Resource.description))
        )
    statement = statement.order_by(col(Resource.created_at).desc())
    return paginate(session, statement, page, limit)


def get_resource(session: Session, resource_id: str) -> Resource:
    resource = session.get(Resource, resource_id)
    if not resource:
        raise NotFoundError("Resource")
    return resource


def upload_resource(
    session: Session,
    storage,
    payload: ResourceCreate,
    uploader: User,
    filename: Optional[str],
    content: Optional[bytes],
    content_type: Optional[str] = None,
) -> Resource:
    """Push the file to object storage and record where it landed."""
    if content is None or not filename:
        raise BadRequestError("File is required")

    file_type = detect_file_type(filename, content_type)
    file_url = storage.upload(content, filename, file_type, folder="resources")

    resource = Resource(
        title=payload.title,
        description=payload.description,
        subject=payload.subject,
        file_url=file_url,
        file_type=file_type,
        uploaded_by_id=uploader.id,
    )
    session.add(resource)
    try:
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        storage.discard(file_url)
        raise
    session.refresh(resource)
    logger.info("User %s uploaded resource %s (%s)", uploader.id, resource.id, file_type)
    return resource


def record_download(session: Session, resource_id: str) -> Tuple[str, int]:
    """Bump the download counter in the database and return ``(file_url, downloads)``.

    Every call counts, including repeats from the same user.
    """
    result = session.execute(
        update(Resource)
        .where(col(Resource.id) == resource_id)
        .values(downloads=col(Resource.downloads) + 1)
    )
    if result.rowcount == 0:
        session.rollback()
        raise NotFoundError("Resource")
    # read back before commit so the value is the one this call produced
    file_url, downloads = session.exec(
        select(Resource.file_url, Resource.downloads).where(Resource.id == resource_id)
    ).one()
    session.commit()
    return file_url, downloads


def delete_resource(session: Session, resource_id: str, user: User) -> None:
    resource = get_resource(session, resource_id)
    ensure_owner_or_admin(resource.uploaded_by_id, user)
    session.delete(resource)
    session.commit()
    logger.info("User %s deleted resource %s", user.id, resource_id)
