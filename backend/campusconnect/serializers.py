"""Response shaping. Every payload leaves the API in camelCase."""

from typing import List, Optional

from .models import (
    Comment,
    Discussion,
    Event,
    MentorshipRequest,
    Project,
    ProjectMember,
    Resource,
    User,
)


def user_summary(user: Optional[User]) -> Optional[dict]:
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "department": user.department}


def public_user(user: User) -> dict:
    # never includes password_hash or verification_token
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "department": user.department,
        "year": user.year,
        "bio": user.bio,
        "skills": list(user.skills or []),
        "isVerified": user.is_verified,
        "createdAt": user.created_at,
    }


def event_to_dict(event: Event, rsvp_count: int, is_rsvped: bool) -> dict:
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "category": event.category,
        "date": event.date,
        "location": event.location,
        "maxAttendees": event.max_attendees,
        "imageUrl": event.image_url,
        "createdById": event.created_by_id,
        "createdBy": user_summary(event.created_by),
        "createdAt": event.created_at,
        "rsvpCount": rsvp_count,
        "isRSVPed": is_rsvped,
    }


def resource_to_dict(resource: Resource) -> dict:
    return {
        "id": resource.id,
        "title": resource.title,
        "description": resource.description,
        "subject": resource.subject,
        "fileUrl": resource.file_url,
        "fileType": resource.file_type,
        "downloads": resource.downloads,
        "uploadedById": resource.uploaded_by_id,
        "uploadedBy": user_summary(resource.uploaded_by),
        "createdAt": resource.created_at,
    }


def member_to_dict(member: ProjectMember) -> dict:
    return {
        "id": member.id,
        "userId": member.user_id,
        "projectId": member.project_id,
        "role": member.role,
        "joinedAt": member.joined_at,
        "user": user_summary(member.user),
    }


def project_to_dict(project: Project) -> dict:
    return {
        "id": project.id,
        "title": project.title,
        "description": project.description,
        "skills": list(project.skills or []),
        "status": project.status,
        "createdById": project.created_by_id,
        "createdBy": user_summary(project.created_by),
        "createdAt": project.created_at,
        "members": [member_to_dict(m) for m in project.members],
    }


def mentorship_to_dict(request: MentorshipRequest) -> dict:
    student = request.student
    return {
        "id": request.id,
        "title": request.title,
        "description": request.description,
        "status": request.status,
        "studentId": request.student_id,
        "mentorId": request.mentor_id,
        "student": dict(user_summary(student), year=student.year) if student else None,
        "mentor": user_summary(request.mentor),
        "createdAt": request.created_at,
    }


def comment_to_dict(comment: Comment) -> dict:
    return {
        "id": comment.id,
        "content": comment.content,
        "authorId": comment.author_id,
        "discussionId": comment.discussion_id,
        "author": user_summary(comment.author),
        "createdAt": comment.created_at,
    }


def discussion_to_dict(discussion: Discussion, comments: List[Comment], comment_count: Optional[int] = None) -> dict:
    data = {
        "id": discussion.id,
        "title": discussion.title,
        "content": discussion.content,
        "department": discussion.department,
        "upvotes": discussion.upvotes,
        "authorId": discussion.author_id,
        "author": user_summary(discussion.author),
        "createdAt": discussion.created_at,
        "comments": [comment_to_dict(c) for c in comments],
    }
    if comment_count is not None:
        data["commentCount"] = comment_count
    return data
