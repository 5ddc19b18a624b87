"""
Read-side joins.

Carts, reservations and both histories are not stored anywhere; they are
projections of listing state joined with user rows at request time.
"""
import base64
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from dormdash.core.constants import NOT_PROVIDED, UNKNOWN
from dormdash.models.listing import Listing, ListingStatus
from dormdash.models.user import User
from dormdash.schemas.listing import (
    BrowseListing,
    CartItem,
    ListingRead,
    OrderHistoryEntry,
    PaymentHistoryEntry,
    ReservationRead,
    SellerPaymentInfo,
)
from dormdash.services.reviews import rating_map


def image_data_uri(listing: Listing) -> Optional[str]:
    if not listing.image:
        return None
    encoded = base64.b64encode(listing.image).decode("ascii")
    return f"data:{listing.image_type};base64,{encoded}"


def _listing_fields(listing: Listing) -> dict:
    return {
        "id": listing.id,
        "title": listing.title,
        "description": listing.description,
        "price": listing.price,
        "condition": listing.condition,
        "location": listing.location,
        "contact_info": listing.contact_info,
        "image": image_data_uri(listing),
    }


def to_listing_read(listing: Listing) -> ListingRead:
    return ListingRead(
        **_listing_fields(listing),
        seller_email=listing.seller_email,
        reserved=listing.reserved,
        reserved_by=listing.reserved_by,
        transaction_id=listing.transaction_id,
        payment_status=listing.payment_status.value,
        completed=listing.completed,
        created_at=listing.created_at,
        updated_at=listing.updated_at,
    )


def _with_people(query):
    return query.options(selectinload(Listing.owner), selectinload(Listing.buyer))


def browse_listings(db: Session, search: str = "") -> List[BrowseListing]:
    query = _with_people(db.query(Listing)).filter(Listing.status == ListingStatus.AVAILABLE.value)

    if search:
        query = query.filter(
            or_(
                Listing.title.icontains(search, autoescape=True),
                Listing.description.icontains(search, autoescape=True),
            )
        )

    ratings = rating_map(db)
    results = []
    for listing in query.order_by(Listing.id.asc()).all():
        seller_email = listing.seller_email or UNKNOWN
        seller_name = listing.owner.name if listing.owner is not None else UNKNOWN
        rating = ratings.get(seller_email)

        results.append(
            BrowseListing(
                **_listing_fields(listing),
                seller_name=seller_name,
                seller_email=seller_email,
                average_rating=rating.average_rating if rating else None,
                review_count=rating.review_count if rating else 0,
            )
        )
    return results


def listings_for_owner(db: Session, owner: User) -> List[ListingRead]:
    listings = (
        _with_people(db.query(Listing))
        .filter(Listing.owner_id == owner.id)
        .order_by(Listing.created_at.desc(), Listing.id.desc())
        .all()
    )
    return [to_listing_read(l) for l in listings]


def cart_for(db: Session, buyer: User) -> List[CartItem]:
    listings = (
        _with_people(db.query(Listing))
        .filter(
            Listing.buyer_id == buyer.id,
            Listing.status == ListingStatus.RESERVED.value,
        )
        .order_by(Listing.reserved_at.asc(), Listing.id.asc())
        .all()
    )

    items = []
    for listing in listings:
        seller = listing.owner
        items.append(
            CartItem(
                **_listing_fields(listing),
                payment_status=listing.payment_status.value,
                transaction_id=listing.transaction_id,
                seller=SellerPaymentInfo(
                    name=seller.name if seller else UNKNOWN,
                    cash_app=(seller.cash_app if seller else None) or NOT_PROVIDED,
                    venmo=(seller.venmo if seller else None) or NOT_PROVIDED,
                ),
            )
        )
    return items


def reservations_for(db: Session, seller: User) -> List[ReservationRead]:
    listings = (
        _with_people(db.query(Listing))
        .filter(
            Listing.owner_id == seller.id,
            Listing.status.in_([ListingStatus.RESERVED.value, ListingStatus.PAID.value]),
        )
        .order_by(Listing.reserved_at.asc(), Listing.id.asc())
        .all()
    )

    return [
        ReservationRead(
            listing_id=listing.id,
            listing=to_listing_read(listing),
            buyer_email=listing.reserved_by,
            buyer_name=listing.buyer.name if listing.buyer else "Unknown Buyer",
            reserved_at=listing.reserved_at,
        )
        for listing in listings
    ]


def order_history_for(db: Session, seller: User) -> List[OrderHistoryEntry]:
    listings = (
        _with_people(db.query(Listing))
        .filter(
            Listing.owner_id == seller.id,
            Listing.status == ListingStatus.COMPLETED.value,
        )
        .order_by(Listing.completed_at.asc(), Listing.id.asc())
        .all()
    )

    return [
        OrderHistoryEntry(
            listing_id=listing.id,
            listing_title=listing.title or "Unknown Listing",
            buyer_email=listing.reserved_by or "Unknown Buyer",
            transaction_id=listing.transaction_id,
            completion_date=listing.completed_at,
        )
        for listing in listings
    ]


def payment_history_for(db: Session, buyer: User) -> List[PaymentHistoryEntry]:
    listings = (
        _with_people(db.query(Listing))
        .filter(
            Listing.buyer_id == buyer.id,
            Listing.status.in_([ListingStatus.PAID.value, ListingStatus.COMPLETED.value]),
            # received without a recorded payment never entered the history
            Listing.paid_at.isnot(None),
        )
        .order_by(Listing.paid_at.asc(), Listing.id.asc())
        .all()
    )

    return [
        PaymentHistoryEntry(
            listing_id=listing.id,
            listing_title=listing.title or "Unknown Listing",
            seller_email=listing.seller_email or "Unknown Seller",
            transaction_id=listing.transaction_id,
            completion_date=listing.paid_at,
        )
        for listing in listings
    ]
