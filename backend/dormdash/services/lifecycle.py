"""
Listing lifecycle transitions.

A listing moves available -> reserved -> paid -> completed, with cart removal
returning a reserved listing to available. Each function validates every
precondition before touching the row and commits exactly once, so a
rejected request never leaves a partial write behind.
"""
import logging
import math
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from dormdash.core.constants import LISTING_CONDITIONS
from dormdash.core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from dormdash.models.listing import Listing, ListingStatus
from dormdash.models.user import User
from dormdash.schemas.listing import ListingUpdate

logger = logging.getLogger("dormdash.listings")


def get_listing_or_404(db: Session, listing_id: int) -> Listing:
    listing = db.query(Listing).filter(Listing.id == listing_id).first()
    if not listing:
        raise NotFoundError("Listing not found")
    return listing


def _get_owned_listing(db: Session, listing_id: int, user: User) -> Listing:
    listing = get_listing_or_404(db, listing_id)
    if listing.owner_id != user.id:
        raise ForbiddenError("Unauthorized action")
    return listing


def _parse_price(raw) -> float:
    try:
        price = float(raw)
    except (TypeError, ValueError):
        raise BadRequestError("Invalid price. It must be a positive number.")
    if not math.isfinite(price) or price <= 0:
        raise BadRequestError("Invalid price. It must be a positive number.")
    return price


def _check_condition(condition: Optional[str]) -> str:
    if condition not in LISTING_CONDITIONS:
        raise BadRequestError("Invalid condition. It must be one of: New, Like New, Used.")
    return condition


def _check_location(location: Optional[str]) -> str:
    if not location or not location.strip():
        raise BadRequestError("Location details are required.")
    return location.strip()


def _check_required(value: Optional[str], label: str) -> str:
    if not value or not value.strip():
        raise BadRequestError(f"{label} is required.")
    return value


def create_listing(
    db: Session,
    owner: User,
    *,
    title: Optional[str],
    description: Optional[str],
    contact_info: Optional[str],
    price,
    condition: Optional[str],
    location: Optional[str],
    image: Optional[bytes] = None,
    image_type: Optional[str] = None,
) -> Listing:
    price = _parse_price(price)
    condition = _check_condition(condition)
    location = _check_location(location)
    title = _check_required(title, "Title")
    description = _check_required(description, "Description")
    contact_info = _check_required(contact_info, "Contact info")

    if image and not (image_type or "").startswith("image/"):
        raise BadRequestError(f"Unsupported file type: {image_type}")

    listing = Listing(
        owner_id=owner.id,
        title=title,
        description=description,
        contact_info=contact_info,
        price=price,
        condition=condition,
        location=location,
        image=image or None,
        image_type=image_type if image else None,
        status=ListingStatus.AVAILABLE.value,
    )
    db.add(listing)
    db.commit()
    db.refresh(listing)

    logger.info("listing %s created by user %s", listing.id, owner.id)
    return listing


def update_listing(db: Session, listing_id: int, user: User, listing_in: ListingUpdate) -> Listing:
    listing = _get_owned_listing(db, listing_id, user)

    # exclude_unset: fields the client did not send stay as they are
    data = listing_in.model_dump(exclude_unset=True)

    if "price" in data:
        data["price"] = _parse_price(data["price"])
    if "condition" in data:
        data["condition"] = _check_condition(data["condition"])
    if "location" in data:
        data["location"] = _check_location(data["location"])
    if "title" in data:
        data["title"] = _check_required(data["title"], "Title")
    if "description" in data:
        data["description"] = _check_required(data["description"], "Description")

    for field, value in data.items():
        setattr(listing, field, value)

    db.add(listing)
    db.commit()
    db.refresh(listing)

    logger.info("listing %s updated by user %s: %s", listing.id, user.id, sorted(data))
    return listing


def reserve_listing(db: Session, listing_id: int, buyer: User) -> Listing:
    listing = get_listing_or_404(db, listing_id)

    if listing.lifecycle is not ListingStatus.AVAILABLE:
        raise ConflictError("Listing is already reserved")
    if listing.owner_id == buyer.id:
        raise ForbiddenError("You cannot reserve your own listing")

    listing.status = ListingStatus.RESERVED.value
    listing.buyer_id = buyer.id
    listing.reserved_at = datetime.utcnow()

    db.add(listing)
    db.commit()
    db.refresh(listing)

    logger.info("listing %s reserved by user %s", listing.id, buyer.id)
    return listing


def remove_from_cart(db: Session, listing_id: int, buyer: User) -> Listing:
    listing = get_listing_or_404(db, listing_id)

    # only an unpaid reservation sits in the buyer's cart
    if listing.lifecycle is not ListingStatus.RESERVED or listing.buyer_id != buyer.id:
        raise NotFoundError("Item not found in cart")

    listing.status = ListingStatus.AVAILABLE.value
    listing.buyer_id = None
    listing.reserved_at = None

    db.add(listing)
    db.commit()
    db.refresh(listing)

    logger.info("listing %s released from cart of user %s", listing.id, buyer.id)
    return listing


def mark_as_paid(db: Session, listing_id: int, buyer: User, transaction_id: Optional[str]) -> Listing:
    if not transaction_id or not transaction_id.strip():
        raise BadRequestError("Transaction ID is required")

    listing = get_listing_or_404(db, listing_id)

    if listing.buyer_id is None or listing.buyer_id != buyer.id:
        raise ForbiddenError("Unauthorized action")
    if listing.lifecycle is not ListingStatus.RESERVED:
        raise ConflictError("Payment has already been recorded for this listing")

    listing.transaction_id = transaction_id.strip()
    listing.status = ListingStatus.PAID.value
    listing.paid_at = datetime.utcnow()

    db.add(listing)
    db.commit()
    db.refresh(listing)

    logger.info("listing %s marked paid by user %s (tx %s)", listing.id, buyer.id, listing.transaction_id)
    return listing


def mark_as_received(db: Session, listing_id: int, seller: User) -> Listing:
    listing = get_listing_or_404(db, listing_id)

    if listing.owner_id != seller.id:
        raise ForbiddenError("Unauthorized action")
    if listing.lifecycle is ListingStatus.AVAILABLE:
        raise ConflictError("Listing is not reserved")
    if listing.lifecycle is ListingStatus.COMPLETED:
        raise ConflictError("Order is already completed")

    listing.status = ListingStatus.COMPLETED.value
    listing.completed_at = datetime.utcnow()

    db.add(listing)
    db.commit()
    db.refresh(listing)

    logger.info("listing %s received by seller %s from buyer %s", listing.id, seller.id, listing.buyer_id)
    return listing


def delete_listing(db: Session, listing_id: int, user: User) -> None:
    listing = get_listing_or_404(db, listing_id)

    # most advanced stage first so the message names it
    if listing.completed:
        raise ConflictError("Listing cannot be deleted because the transaction is completed.")
    if listing.lifecycle is ListingStatus.PAID:
        raise ConflictError("Listing cannot be deleted because it has been paid for.")
    if listing.reserved:
        raise ConflictError("Listing cannot be deleted because it is reserved.")
    if listing.owner_id != user.id:
        raise ForbiddenError("Unauthorized action")

    db.delete(listing)
    db.commit()

    logger.info("listing %s deleted by user %s", listing_id, user.id)
