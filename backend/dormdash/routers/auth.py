import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from dormdash.core.config import get_settings
from dormdash.core.database import get_db
from dormdash.core.security import create_session, destroy_session, get_optional_user
from dormdash.models.user import User
from dormdash.schemas.base import Message
from dormdash.schemas.user import SessionStatus, SessionUser, UserCreate, UserLogin
from dormdash.services import accounts

router = APIRouter(tags=["auth"])
api_router = APIRouter(prefix="/api/user", tags=["auth"])
settings = get_settings()
logger = logging.getLogger("dormdash.auth")


@router.post("/signup", response_model=Message, status_code=status.HTTP_201_CREATED)
def signup(user_in: UserCreate, db: Session = Depends(get_db)):
    accounts.signup(db, user_in)
    return Message(message="User signed up successfully!")


@router.post("/login", response_model=Message)
def login(user_in: UserLogin, response: Response, db: Session = Depends(get_db)):
    user = accounts.authenticate(db, user_in.email, user_in.password)
    token = create_session(db, user)

    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    logger.info("login: user %s started a session", user.id)
    return Message(message="Login successful!")


@router.get("/logout", response_model=Message)
def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    destroy_session(db, request.cookies.get(settings.session_cookie_name))
    response.delete_cookie(settings.session_cookie_name)
    logger.info("logout: session closed")
    return Message(message="Logged out")


@api_router.get("", response_model=SessionStatus, response_model_exclude_none=True)
def session_status(current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is None:
        return SessionStatus(logged_in=False)
    return SessionStatus(logged_in=True, user=SessionUser(email=current_user.email))
