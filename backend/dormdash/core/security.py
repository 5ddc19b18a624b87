import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Request
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from dormdash.core.config import get_settings
from dormdash.core.database import get_db
from dormdash.core.errors import NotAuthenticatedError
from dormdash.models.user import User
from dormdash.models.user_session import UserSession

settings = get_settings()
logger = logging.getLogger("dormdash.auth")

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_session(db: Session, user: User) -> str:
    """Persist a new server-side session for ``user`` and return its cookie value."""
    now = datetime.utcnow()
    # abandoned sessions are never presented again; sweep them here
    db.query(UserSession).filter(UserSession.expires_at < now).delete()

    token = secrets.token_urlsafe(32)
    db.add(
        UserSession(
            token=token,
            user_id=user.id,
            expires_at=now + timedelta(minutes=settings.session_expire_minutes),
        )
    )
    db.commit()
    return token


def destroy_session(db: Session, token: Optional[str]) -> None:
    if not token:
        return
    db.query(UserSession).filter(UserSession.token == token).delete()
    db.commit()


def _load_session_user(db: Session, token: Optional[str]) -> Optional[User]:
    if not token:
        return None

    session_row = db.query(UserSession).filter(UserSession.token == token).first()
    if not session_row:
        return None

    if session_row.expires_at < datetime.utcnow():
        logger.info("session for user %s expired", session_row.user_id)
        db.delete(session_row)
        db.commit()
        return None

    return session_row.user


def get_optional_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    return _load_session_user(db, request.cookies.get(settings.session_cookie_name))


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise NotAuthenticatedError("Unauthorized")
    return user
