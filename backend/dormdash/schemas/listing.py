from datetime import datetime
from typing import Optional

from dormdash.schemas.base import CamelModel


class ListingUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    condition: Optional[str] = None
    location: Optional[str] = None


class ListingIdRequest(CamelModel):
    listing_id: int


class MarkPaidRequest(CamelModel):
    listing_id: int
    transaction_id: Optional[str] = None


class ListingFields(CamelModel):
    id: int
    title: str
    description: str
    price: float
    condition: str
    location: str
    contact_info: str
    # data:<mime>;base64,... or None
    image: Optional[str] = None


class ListingRead(ListingFields):
    seller_email: Optional[str] = None
    reserved: bool
    reserved_by: Optional[str] = None
    transaction_id: Optional[str] = None
    payment_status: str
    completed: bool
    created_at: datetime
    updated_at: datetime


class BrowseListing(ListingFields):
    seller_name: str
    seller_email: str
    average_rating: Optional[float] = None
    review_count: int = 0


class SellerPaymentInfo(CamelModel):
    name: str
    cash_app: str
    venmo: str


class CartItem(ListingFields):
    payment_status: str
    transaction_id: Optional[str] = None
    seller: SellerPaymentInfo


class ReservationRead(CamelModel):
    listing_id: int
    listing: ListingRead
    buyer_email: Optional[str] = None
    buyer_name: str
    reserved_at: Optional[datetime] = None


class OrderHistoryEntry(CamelModel):
    listing_id: int
    listing_title: str
    buyer_email: str
    transaction_id: Optional[str] = None
    completion_date: Optional[datetime] = None


class PaymentHistoryEntry(CamelModel):
    listing_id: int
    listing_title: str
    seller_email: str
    transaction_id: Optional[str] = None
    completion_date: Optional[datetime] = None
