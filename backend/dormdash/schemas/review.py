from datetime import datetime
from typing import Optional

from dormdash.schemas.base import CamelModel


class ReviewCreate(CamelModel):
    # presence and range are checked by the review service so that every
    # malformed submission gets the same message
    transaction_id: Optional[str] = None
    seller_email: Optional[str] = None
    rating: Optional[int] = None
    comment: Optional[str] = None


class ReviewRead(CamelModel):
    id: int
    seller_email: str
    reviewer_email: str
    rating: int
    comment: str
    date: datetime
    transaction_id: str


class AggregateRating(CamelModel):
    seller_email: str
    average_rating: Optional[float] = None
    review_count: int = 0
