# services/accounts.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from dormdash.core.config import get_settings
from dormdash.core.constants import CASHAPP_PREFIX, VENMO_PREFIX
from dormdash.core.errors import BadRequestError, NotAuthenticatedError, NotFoundError
from dormdash.core.security import get_password_hash, verify_password
from dormdash.models.user import User
from dormdash.schemas.user import ProfileUpdate, UserCreate

settings = get_settings()
logger = logging.getLogger("dormdash.accounts")


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def get_user_by_email(db: Session, email: Optional[str]) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_email_or_404(db: Session, email: Optional[str], detail: str = "User not found") -> User:
    user = get_user_by_email(db, email)
    if not user:
        raise NotFoundError(detail)
    return user


def _check_institutional_email(email: str) -> None:
    if not email.endswith(settings.email_domain):
        raise BadRequestError("Invalid email. Must be a TU email.")


def _check_payment_handles(cash_app: Optional[str], venmo: Optional[str]) -> None:
    if cash_app and not cash_app.startswith(CASHAPP_PREFIX):
        raise BadRequestError('Invalid CashApp username. It must start with "$".')
    if venmo and not venmo.startswith(VENMO_PREFIX):
        raise BadRequestError('Invalid Venmo username. It must start with "@".')


def _check_email_unused(db: Session, email: str) -> None:
    if get_user_by_email(db, email):
        raise BadRequestError("Email already registered.")


def signup(db: Session, user_in: UserCreate) -> User:
    email = normalize_email(user_in.email)

    _check_institutional_email(email)
    _check_payment_handles(user_in.cash_app, user_in.venmo)

    if not user_in.full_name or not user_in.full_name.strip():
        raise BadRequestError("Full name is required.")
    if not user_in.password:
        raise BadRequestError("Password is required.")

    _check_email_unused(db, email)

    user = User(
        name=user_in.full_name.strip(),
        email=email,
        hashed_password=get_password_hash(user_in.password),
        cash_app=user_in.cash_app or None,
        venmo=user_in.venmo or None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("signup: user %s registered as %s", user.id, user.email)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        logger.info("login: rejected credentials for %s", normalize_email(email))
        raise NotAuthenticatedError("Invalid credentials")
    return user


def update_profile(db: Session, user: User, profile_in: ProfileUpdate) -> User:
    """
    Blank or missing fields keep their stored value. Every check runs before
    the first assignment so a rejected update leaves the row untouched.
    """
    _check_payment_handles(profile_in.cash_app, profile_in.venmo)

    new_email = normalize_email(profile_in.new_email)
    if new_email and new_email != user.email:
        _check_institutional_email(new_email)
        _check_email_unused(db, new_email)

    if profile_in.full_name and profile_in.full_name.strip():
        user.name = profile_in.full_name.strip()
    if new_email:
        user.email = new_email
    if profile_in.cash_app:
        user.cash_app = profile_in.cash_app
    if profile_in.venmo:
        user.venmo = profile_in.venmo
    if profile_in.new_password:
        user.hashed_password = get_password_hash(profile_in.new_password)

    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("profile: user %s updated", user.id)
    return user
