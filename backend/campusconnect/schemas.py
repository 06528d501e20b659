"""Request bodies. Field names are snake_case in Python and camelCase on the wire."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

from .models import EventCategory, MentorshipStatus, ProjectStatus, Role

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2)]
Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3)]
LongText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10)]
Required = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Bio = Annotated[str, StringConstraints(max_length=500)]
Year = Annotated[int, Field(ge=1, le=4)]


def as_utc(value: datetime) -> datetime:
    # timestamps without an offset are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


EventDate = Annotated[datetime, AfterValidator(as_utc)]

SIGNUP_ROLES = ("student", "alumni")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---- auth / profile ----
class SignupRequest(CamelModel):
    name: Name
    email: EmailStr
    password: str = Field(min_length=6)
    role: Role
    department: Required
    year: Optional[Year] = None

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value):
        # admins are never self-registered
        if not isinstance(value, str) or value.strip().lower() not in SIGNUP_ROLES:
            raise ValueError("Invalid role")
        return Role.parse(value)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ProfileUpdate(CamelModel):
    name: Name
    department: Required
    year: Optional[Year] = None
    bio: Optional[Bio] = None
    skills: Optional[List[str]] = None


# ---- events ----
class EventCreate(CamelModel):
    title: Title
    description: LongText
    category: EventCategory
    date: EventDate
    location: Required
    max_attendees: Optional[int] = Field(default=None, ge=1)
    image_url: Optional[str] = None


class EventUpdate(CamelModel):
    title: Optional[Title] = None
    description: Optional[LongText] = None
    category: Optional[EventCategory] = None
    date: Optional[EventDate] = None
    location: Optional[Required] = None
    max_attendees: Optional[int] = Field(default=None, ge=1)
    image_url: Optional[str] = None


# ---- resources ----
class ResourceCreate(CamelModel):
    title: Title
    description: LongText
    subject: Required


# ---- projects ----
class ProjectCreate(CamelModel):
    title: Title
    description: LongText
    skills: List[str]


class ProjectUpdate(CamelModel):
    title: Optional[Title] = None
    description: Optional[LongText] = None
    skills: Optional[List[str]] = None
    status: Optional[ProjectStatus] = None


# ---- mentorship ----
class MentorshipCreate(CamelModel):
    title: Title
    description: LongText


class MentorshipStatusUpdate(CamelModel):
    status: MentorshipStatus


# ---- discussions ----
class DiscussionCreate(CamelModel):
    title: Title
    content: LongText
    department: Required


class CommentCreate(CamelModel):
    content: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
