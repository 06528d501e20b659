# backend/campusconnect/routes/resources.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from .. import config
from ..db import get_session
from ..deps import get_current_user, get_storage_service
from ..models import User
from ..schemas import ResourceCreate
from ..serializers import resource_to_dict
from ..services import resources as resource_service
from ..services.storage import StorageService

router = APIRouter(prefix="/resources", tags=["resources"])


@router.get("")
def list_resources(
    subject: Optional[str] = None,
    file_type: Optional[str] = Query(None, alias="fileType"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    result = resource_service.list_resources(
        session, subject=subject, file_type=file_type, search=search, page=page, limit=limit,
    )
    return result.to_dict(resource_to_dict)


@router.post("", status_code=201)
def upload_resource(
    title: str = Form(""),
    description: str = Form(""),
    subject: str = Form(""),
    file: Optional[UploadFile] = File(None),
    session: Session = Depends(get_session),
    storage: StorageService = Depends(get_storage_service),
    current_user: User = Depends(get_current_user),
):
    try:
        payload = ResourceCreate(title=title, description=description, subject=subject)
    except PydanticValidationError as exc:
        raise RequestValidationError(exc.errors())

    content = file.file.read() if file is not None else None
    resource = resource_service.upload_resource(
        session,
        storage,
        payload,
        current_user,
        filename=file.filename if file is not None else None,
        content=content,
        content_type=file.content_type if file is not None else None,
    )
    return resource_to_dict(resource)


@router.get("/{resource_id}")
def get_resource(
    resource_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return resource_to_dict(resource_service.get_resource(session, resource_id))


@router.get("/{resource_id}/download")
def download_resource(
    resource_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    file_url, downloads = resource_service.record_download(session, resource_id)
    return {"downloadUrl": file_url, "downloads": downloads}


@router.delete("/{resource_id}")
def delete_resource(
    resource_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    resource_service.delete_resource(session, resource_id, current_user)
    return {"message": "Resource deleted successfully"}
