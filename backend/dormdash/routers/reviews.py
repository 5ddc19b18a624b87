from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from dormdash.core.database import get_db
from dormdash.core.security import get_current_user
from dormdash.models.user import User
from dormdash.schemas.base import Message
from dormdash.schemas.review import AggregateRating, ReviewCreate, ReviewRead
from dormdash.services import reviews
from dormdash.services.accounts import get_user_by_email_or_404

router = APIRouter(prefix="/api/reviews", tags=["reviews"])
user_router = APIRouter(prefix="/api/user/reviews", tags=["reviews"])


@user_router.post("", response_model=Message, status_code=status.HTTP_201_CREATED)
def submit_review(
    review_in: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    reviews.submit_review(db, current_user, review_in)
    return Message(message="Review added successfully.")


@user_router.get("/{seller_email}", response_model=List[ReviewRead])
def reviews_for_seller(seller_email: str, db: Session = Depends(get_db)):
    seller = get_user_by_email_or_404(db, seller_email, "Seller not found.")
    return reviews.reviews_for_seller(db, seller)


@router.get("/seller", response_model=List[ReviewRead])
def my_reviews(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return reviews.reviews_for_seller(db, current_user)


@router.get("/aggregate-ratings", response_model=List[AggregateRating])
def aggregate_ratings(db: Session = Depends(get_db)):
    return reviews.aggregate_ratings(db)


@router.get("/aggregate-ratings/{seller_email}", response_model=AggregateRating)
def aggregate_rating_for(seller_email: str, db: Session = Depends(get_db)):
    seller = get_user_by_email_or_404(db, seller_email, "Seller not found.")
    return reviews.aggregate_rating_for(db, seller)
