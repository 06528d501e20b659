# backend/campusconnect/routes/auth.py
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlmodel import Session

from ..db import get_session
from ..deps import get_current_user, get_email_service
from ..models import User
from ..schemas import LoginRequest, ProfileUpdate, SignupRequest
from ..serializers import public_user
from ..services import auth as auth_service
from ..services.mailer import EmailService

router = APIRouter(prefix="/auth", tags=["auth"])
profile_router = APIRouter(tags=["auth"])


@router.post("/signup", status_code=201)
def signup(
    payload: SignupRequest,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    email_service: EmailService = Depends(get_email_service),
):
    user, token = auth_service.register(session, payload)
    # delivery runs after the response; failures are logged by the email service
    background_tasks.add_task(email_service.send_verification_email, user.email, token)
    return {
        "message": "User registered successfully. Please check your email for verification.",
        "userId": user.id,
    }


@router.post("/login")
def login(payload: LoginRequest, session: Session = Depends(get_session)):
    token, user = auth_service.login(session, payload.email, payload.password)
    return {"token": token, "user": public_user(user)}


@router.get("/verify-email/{token}")
def verify_email(token: str, session: Session = Depends(get_session)):
    auth_service.verify_email(session, token)
    return {"message": "Email verified successfully"}


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return {"user": public_user(current_user)}


def update_profile(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    user = auth_service.update_profile(session, current_user, payload)
    return {"message": "Profile updated successfully", "user": public_user(user)}


router.add_api_route("/profile", update_profile, methods=["PUT"])
profile_router.add_api_route("/profile", update_profile, methods=["PUT"])
