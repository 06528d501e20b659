"""Project collaboration: listing, creation with a leader, joining, owner/admin edits."""

import logging
from typing import List, Optional

from sqlalchemy import String, cast
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, or_, select

from ..db import dump_json
from ..exceptions import BadRequestError, ConflictError, NotFoundError, ValidationError
from ..models import MemberRole, Project, ProjectMember, ProjectStatus, User
from ..pagination import Page, paginate
from ..schemas import ProjectCreate, ProjectUpdate
from .access import ensure_owner_or_admin
from .search import LIKE_ESCAPE, contains_any, escape_like

logger = logging.getLogger(__name__)


def parse_skills(raw: Optional[str]) -> List[str]:
    return [s.strip() for s in (raw or "").split(",") if s.strip()]


def _skill_pattern(skill: str) -> str:
    # an exact element appears in the stored array text as its own JSON string
    return f"%{escape_like(dump_json(skill))}%"


def list_projects(
    session: Session,
    status: Optional[ProjectStatus] = None,
    skills: Optional[List[str]] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Page:
    statement = select(Project)
    if status:
        statement = statement.where(Project.status == status)
    if skills:
        skills_text = cast(Project.skills, String)
        statement = statement.where(
            or_(*[skills_text.ilike(_skill_pattern(s), escape=LIKE_ESCAPE) for s in skills])
        )
    if search:
        statement = statement.where(
            contains_any(search, col(Project.title), col(Project.description))
        )
    statement = statement.order_by(col(Project.created_at).desc())
    return paginate(session, statement, page, limit)


def get_project(session: Session, project_id: str) -> Project:
    project = session.get(Project, project_id)
    if not project:
        raise NotFoundError("Project")
    return project


def create_project(session: Session, payload: ProjectCreate, creator: User) -> Project:
    """Create an OPEN project with its creator as leader, in a single commit."""
    project = Project(
        title=payload.title,
        description=payload.description,
        skills=list(payload.skills),
        created_by_id=creator.id,
    )
    project.members.append(ProjectMember(user_id=creator.id, role=MemberRole.LEADER))
    session.add(project)
    session.commit()
    session.refresh(project)
    logger.info("User %s created project %s", creator.id, project.id)
    return project


def join_project(session: Session, project_id: str, user: User) -> ProjectMember:
    project = get_project(session, project_id)
    if project.status != ProjectStatus.OPEN:
        raise BadRequestError("Project is not open for new members")

    existing = session.exec(
        select(ProjectMember).where(
            ProjectMember.user_id == user.id, ProjectMember.project_id == project_id
        )
    ).first()
    if existing:
        raise ConflictError("Already a member of this project")

    member = ProjectMember(user_id=user.id, project_id=project_id, role=MemberRole.MEMBER)
    session.add(member)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError("Already a member of this project")
    session.refresh(member)
    logger.info("User %s joined project %s", user.id, project_id)
    return member


def update_project(session: Session, project_id: str, payload: ProjectUpdate, user: User) -> Project:
    project = get_project(session, project_id)
    ensure_owner_or_admin(project.created_by_id, user)

    changes = payload.model_dump(exclude_unset=True)
    errors = [{"field": k, "message": "Value may not be null"} for k, v in changes.items() if v is None]
    if errors:
        raise ValidationError(errors=errors)

    for name, value in changes.items():
        setattr(project, name, list(value) if name == "skills" else value)
    session.add(project)
    session.commit()
    session.refresh(project)
    return project


def delete_project(session: Session, project_id: str, user: User) -> None:
    project = get_project(session, project_id)
    ensure_owner_or_admin(project.created_by_id, user)
    session.delete(project)
    session.commit()
    logger.info("User %s deleted project %s", user.id, project_id)
