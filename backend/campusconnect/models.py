from enum import Enum
from typing import List, Optional
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship


def gen_uuid():
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    STUDENT = "STUDENT"
    ALUMNI = "ALUMNI"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value: str) -> "Role":
        # the client sends lowercase roles; storage is always uppercase
        return cls(value.strip().upper())


class EventCategory(str, Enum):
    TECHNICAL = "TECHNICAL"
    CULTURAL = "CULTURAL"
    SPORTS = "SPORTS"
    ACADEMIC = "ACADEMIC"
    OTHER = "OTHER"


class ProjectStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class MemberRole(str, Enum):
    LEADER = "leader"
    MEMBER = "member"


class MentorshipStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    COMPLETED = "COMPLETED"
    DECLINED = "DECLINED"


class User(SQLModel, table=True):
    id: str = Field(default_factory=gen_uuid, primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: Role = Field(default=Role.STUDENT)
    department: str
    year: Optional[int] = None  # students only, 1-4
    bio: Optional[str] = Field(default=None, max_length=500)
    skills: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    is_verified: bool = False
    verification_token: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utcnow)


class Event(SQLModel, table=True):
    id: str = Field(default_factory=gen_uuid, primary_key=True)
    title: str
    description: str
    category: EventCategory
    date: datetime = Field(index=True)
    location: str
    max_attendees: Optional[int] = None
    image_url: Optional[str] = None
    created_by_id: str = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)

    created_by: Optional[User] = Relationship()
    rsvps: List["EventRSVP"] = Relationship(
        back_populates="event",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class EventRSVP(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_rsvp_user_event"),)

    id: str = Field(default_factory=gen_uuid, primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    event_id: str = Field(foreign_key="event.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)

    event: Optional[Event] = Relationship(back_populates="rsvps")


class Resource(SQLModel, table=True):
    id: str = Field(default_factory=gen_uuid, primary_key=True)
    title: str
    description: str
    subject: str = Field(index=True)
    file_url: str
    file_type: str
    downloads: int = Field(default=0, ge=0)
    uploaded_by_id: str = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)

    uploaded_by: Optional[User] = Relationship()


class Project(SQLModel, table=True):
    id: str = Field(default_factory=gen_uuid, primary_key=True)
    title: str
    description: str
    skills: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    status: ProjectStatus = Field(default=ProjectStatus.OPEN)
    created_by_id: str = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)

    created_by: Optional[User] = Relationship()
    members: List["ProjectMember"] = Relationship(
        back_populates="project",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "ProjectMember.joined_at"},
    )


class ProjectMember(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("user_id", "project_id", name="uq_member_user_project"),)

    id: str = Field(default_factory=gen_uuid, primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    project_id: str = Field(foreign_key="project.id", index=True)
    role: MemberRole = Field(default=MemberRole.MEMBER)
    joined_at: datetime = Field(default_factory=utcnow)

    user: Optional[User] = Relationship()
    project: Optional[Project] = Relationship(back_populates="members")


class MentorshipRequest(SQLModel, table=True):
    id: str = Field(default_factory=gen_uuid, primary_key=True)
    title: str
    description: str
    status: MentorshipStatus = Field(default=MentorshipStatus.PENDING, index=True)
    student_id: str = Field(foreign_key="user.id", index=True)
    mentor_id: Optional[str] = Field(default=None, foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)

    student: Optional[User] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "MentorshipRequest.student_id"}
    )
    mentor: Optional[User] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "MentorshipRequest.mentor_id"}
    )


class Discussion(SQLModel, table=True):
    id: str = Field(default_factory=gen_uuid, primary_key=True)
    title: str
    content: str
    department: str = Field(index=True)
    upvotes: int = Field(default=0, ge=0)
    author_id: str = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)

    author: Optional[User] = Relationship()
    comments: List["Comment"] = Relationship(
        back_populates="discussion",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "Comment.created_at"},
    )


class Comment(SQLModel, table=True):
    id: str = Field(default_factory=gen_uuid, primary_key=True)
    content: str
    author_id: str = Field(foreign_key="user.id", index=True)
    discussion_id: str = Field(foreign_key="discussion.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)

    author: Optional[User] = Relationship()
    discussion: Optional[Discussion] = Relationship(back_populates="comments")
