import logging
import secrets
from datetime import timedelta

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlmodel import Session, select

from storefront.config import settings
from storefront.database import get_session
from storefront.models.user import User
from storefront.schemas.user_schemas import (
    NewPasswordRequest,
    ResetRequest,
    Token,
    UserLogin,
    UserResponse,
    UserSignup,
)
from storefront.services.notification_service import (
    send_password_reset_email,
    send_signup_email,
)
from storefront.utils.hash import hash_password, verify_password
from storefront.utils.timestamps import utcnow
from storefront.utils.token import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter()


def _find_by_reset_token(session: Session, token: str, user_id: int | None = None):
    query = select(User).where(
        User.reset_token == token,
        User.reset_token_expires > utcnow(),
    )
    if user_id is not None:
        query = query.where(User.id == user_id)
    return session.exec(query).first()


@router.post("/signup", response_model=UserResponse, status_code=201)
def signup(
    payload: UserSignup,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
):
    existing_user = session.exec(select(User).where(User.email == payload.email)).first()
    if existing_user:
        raise HTTPException(400, "E-mail exists already, please pick a different one.")

    user = User(
        email=payload.email,
        password=hash_password(payload.password),
    )

    session.add(user)
    session.commit()
    session.refresh(user)

    background_tasks.add_task(send_signup_email, user.email)

    return UserResponse(
        message="Signup successful.",
        user_id=user.id,
        email=user.email,
    )


@router.post("/login", response_model=Token)
def login(payload: UserLogin, session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.email == payload.email)).first()

    # same message for both cases so callers can't tell which part was wrong
    if not user or not verify_password(payload.password, user.password):
        raise HTTPException(401, "Invalid email or password.")

    token = create_access_token(user.id)
    return Token(access_token=token, token_type="bearer")


@router.post("/logout")
def logout():
    return {"message": "Logout successful"}


@router.post("/reset")
def request_reset(
    payload: ResetRequest,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
):
    user = session.exec(select(User).where(User.email == payload.email)).first()
    if not user:
        raise HTTPException(404, "No account with that email found.")

    user.reset_token = secrets.token_hex(32)
    user.reset_token_expires = utcnow() + timedelta(
        minutes=settings.reset_token_expire_minutes
    )
    session.add(user)
    session.commit()

    background_tasks.add_task(send_password_reset_email, user.email, user.reset_token)
    logger.info(f"Password reset requested for user {user.id}")

    return {"message": "Reset link sent"}


@router.get("/reset/{token}")
def check_reset_token(token: str, session: Session = Depends(get_session)):
    user = _find_by_reset_token(session, token)
    if not user:
        raise HTTPException(400, "Reset Token invalid or expired.")

    return {"user_id": user.id, "token": token}


@router.post("/new-password")
def set_new_password(payload: NewPasswordRequest, session: Session = Depends(get_session)):
    user = _find_by_reset_token(session, payload.token, payload.user_id)
    if not user:
        raise HTTPException(
            400, "Error when trying to update. Reset Token invalid or expired."
        )

    user.password = hash_password(payload.password)
    user.reset_token = None
    user.reset_token_expires = None

    session.add(user)
    session.commit()

    return {"message": "Password updated successfully"}
