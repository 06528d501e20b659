# backend/campusconnect/routes/projects.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from .. import config
from ..db import get_session
from ..deps import get_current_user
from ..models import ProjectStatus, User
from ..schemas import ProjectCreate, ProjectUpdate
from ..serializers import project_to_dict
from ..services import projects as project_service

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("")
def list_projects(
    status: Optional[ProjectStatus] = None,
    skills: Optional[str] = Query(None, description="Comma separated, matches any"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    result = project_service.list_projects(
        session,
        status=status,
        skills=project_service.parse_skills(skills),
        search=search,
        page=page,
        limit=limit,
    )
    return result.to_dict(project_to_dict)


@router.post("", status_code=201)
def create_project(
    payload: ProjectCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return project_to_dict(project_service.create_project(session, payload, current_user))


@router.get("/{project_id}")
def get_project(
    project_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return project_to_dict(project_service.get_project(session, project_id))


@router.post("/{project_id}/join")
def join_project(
    project_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    project_service.join_project(session, project_id, current_user)
    return {"message": "Successfully joined project"}


@router.put("/{project_id}")
def update_project(
    project_id: str,
    payload: ProjectUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return project_to_dict(project_service.update_project(session, project_id, payload, current_user))


@router.delete("/{project_id}")
def delete_project(
    project_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    project_service.delete_project(session, project_id, current_user)
    return {"message": "Project deleted successfully"}
