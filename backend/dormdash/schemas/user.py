from typing import Optional

from dormdash.schemas.base import CamelModel


class UserCreate(CamelModel):
    full_name: str
    email: str
    password: str
    cash_app: Optional[str] = None
    venmo: Optional[str] = None


class UserLogin(CamelModel):
    email: str
    password: str


class ProfileRead(CamelModel):
    name: str
    email: str
    cash_app: Optional[str] = None
    venmo: Optional[str] = None


class ProfileUpdate(CamelModel):
    full_name: Optional[str] = None
    new_email: Optional[str] = None
    new_password: Optional[str] = None
    cash_app: Optional[str] = None
    venmo: Optional[str] = None


class SessionUser(CamelModel):
    email: str


class SessionStatus(CamelModel):
    logged_in: bool
    user: Optional[SessionUser] = None
