from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from dormdash.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(255), nullable=False)
    # login handle; every foreign key points at ``id`` so this may change
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # optional payment handles, e.g. "$JohnDoe" / "@JohnDoe"
    cash_app = Column(String(100), nullable=True)
    venmo = Column(String(100), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    listings = relationship(
        "Listing",
        back_populates="owner",
        foreign_keys="Listing.owner_id",
    )
    sessions = relationship(
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
    )
