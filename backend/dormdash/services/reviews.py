# services/reviews.py
import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dormdash.core.errors import BadRequestError, ConflictError
from dormdash.models.review import Review
from dormdash.models.user import User
from dormdash.schemas.review import AggregateRating, ReviewCreate, ReviewRead
from dormdash.services.accounts import get_user_by_email_or_404

logger = logging.getLogger("dormdash.reviews")

MIN_RATING = 1
MAX_RATING = 5


def _to_read(review: Review) -> ReviewRead:
    return ReviewRead(
        id=review.id,
        seller_email=review.seller.email,
        reviewer_email=review.reviewer.email,
        rating=review.rating,
        comment=review.comment or "",
        date=review.created_at,
        transaction_id=review.transaction_id,
    )


def submit_review(db: Session, reviewer: User, review_in: ReviewCreate) -> Review:
    rating = review_in.rating
    if (
        not review_in.transaction_id
        or not review_in.seller_email
        or rating is None
        or not MIN_RATING <= rating <= MAX_RATING
    ):
        raise BadRequestError(
            "Invalid review data. Ensure all fields are provided and rating is between 1 and 5."
        )

    seller = get_user_by_email_or_404(db, review_in.seller_email, "Seller not found.")

    existing = db.query(Review).filter(Review.transaction_id == review_in.transaction_id).first()
    if existing:
        raise ConflictError("Review already exists for this transaction.")

    review = Review(
        transaction_id=review_in.transaction_id,
        seller_id=seller.id,
        reviewer_id=reviewer.id,
        rating=rating,
        comment=review_in.comment or "",
    )
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent submission won the unique index
        db.rollback()
        raise ConflictError("Review already exists for this transaction.")
    db.refresh(review)

    logger.info(
        "review %s: user %s rated seller %s %s/5 (tx %s)",
        review.id, reviewer.id, seller.id, rating, review.transaction_id,
    )
    return review


def reviews_for_seller(db: Session, seller: User) -> List[ReviewRead]:
    reviews = (
        db.query(Review)
        .filter(Review.seller_id == seller.id)
        .order_by(Review.created_at.desc(), Review.id.asc())
        .all()
    )
    return [_to_read(r) for r in reviews]


def _aggregate_query(db: Session, seller_id: Optional[int] = None):
    query = (
        db.query(
            User.email,
            func.avg(Review.rating),
            func.count(Review.id),
        )
        .select_from(Review)
        .join(User, User.id == Review.seller_id)
    )

    if seller_id is not None:
        query = query.filter(Review.seller_id == seller_id)

    return query.group_by(Review.seller_id, User.email)


def _round_average(value) -> Optional[float]:
    if value is None:
        return None
    return round(float(value), 1)


def aggregate_ratings(db: Session) -> List[AggregateRating]:
    return [
        AggregateRating(
            seller_email=email,
            average_rating=_round_average(avg),
            review_count=count,
        )
        for email, avg, count in _aggregate_query(db).order_by(func.min(Review.id)).all()
    ]


def aggregate_rating_for(db: Session, seller: User) -> AggregateRating:
    row = _aggregate_query(db, seller.id).first()
    if row is None:
        return AggregateRating(seller_email=seller.email, average_rating=None, review_count=0)

    _, avg, count = row
    return AggregateRating(seller_email=seller.email, average_rating=_round_average(avg), review_count=count)


def rating_map(db: Session) -> Dict[str, AggregateRating]:
    """Aggregate ratings keyed by seller email, for the browse join."""
    return {r.seller_email: r for r in aggregate_ratings(db)}
