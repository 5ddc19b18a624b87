import enum
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from dormdash.core.database import Base


class ListingStatus(str, enum.Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    PAID = "paid"
    COMPLETED = "completed"


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    COMPLETED = "completed"


class Listing(Base):
    __tablename__ = "listings"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)

    image = Column(LargeBinary, nullable=True)
    image_type = Column(String(100), nullable=True)

    contact_info = Column(String(255), nullable=False)
    price = Column(Float, nullable=False)
    condition = Column(String(20), nullable=False)  # New, Like New, Used
    location = Column(String(255), nullable=False)

    # available -> reserved -> paid -> completed
    status = Column(
        String(20),
        nullable=False,
        default=ListingStatus.AVAILABLE.value,
        index=True,
    )
    # set iff status != available
    buyer_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    transaction_id = Column(String(255), nullable=True)

    reserved_at = Column(DateTime, nullable=True)
    paid_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    owner = relationship("User", back_populates="listings", foreign_keys=[owner_id])
    buyer = relationship("User", foreign_keys=[buyer_id])

    @property
    def lifecycle(self) -> ListingStatus:
        return ListingStatus(self.status)

    @property
    def reserved(self) -> bool:
        return self.lifecycle is not ListingStatus.AVAILABLE

    @property
    def reserved_by(self):
        return self.buyer.email if self.buyer is not None else None

    @property
    def payment_status(self) -> PaymentStatus:
        if self.lifecycle is ListingStatus.COMPLETED:
            return PaymentStatus.COMPLETED
        if self.lifecycle is ListingStatus.PAID:
            return PaymentStatus.PAID
        return PaymentStatus.UNPAID

    @property
    def completed(self) -> bool:
        return self.lifecycle is ListingStatus.COMPLETED

    @property
    def seller_email(self):
        return self.owner.email if self.owner is not None else None
