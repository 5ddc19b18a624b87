from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dormdash.core.database import get_db
from dormdash.core.security import get_current_user
from dormdash.models.user import User
from dormdash.schemas.base import Message
from dormdash.schemas.listing import (
    CartItem,
    ListingIdRequest,
    ListingRead,
    OrderHistoryEntry,
    PaymentHistoryEntry,
    ReservationRead,
)
from dormdash.schemas.user import ProfileRead, ProfileUpdate
from dormdash.services import accounts, lifecycle, queries

router = APIRouter(prefix="/api/user", tags=["profile"])


@router.get("/profile", response_model=ProfileRead)
def read_profile(current_user: User = Depends(get_current_user)):
    return ProfileRead(
        name=current_user.name,
        email=current_user.email,
        cash_app=current_user.cash_app,
        venmo=current_user.venmo,
    )


@router.post("/profile/update", response_model=Message)
def update_profile(
    profile_in: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    accounts.update_profile(db, current_user, profile_in)
    return Message(message="Profile updated successfully")


@router.get("/listings", response_model=List[ListingRead])
def my_listings(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return queries.listings_for_owner(db, current_user)


@router.get("/reservations", response_model=List[ReservationRead])
def my_reservations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return queries.reservations_for(db, current_user)


@router.get("/cart", response_model=List[CartItem])
def my_cart(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return queries.cart_for(db, current_user)


@router.post("/cart/remove", response_model=Message)
def remove_from_cart(
    body: ListingIdRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lifecycle.remove_from_cart(db, body.listing_id, current_user)
    return Message(message="Item removed from cart and unmarked as reserved")


@router.get("/orderHistory", response_model=List[OrderHistoryEntry])
def order_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return queries.order_history_for(db, current_user)


@router.get("/paymentHistory", response_model=List[PaymentHistoryEntry])
def payment_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return queries.payment_history_for(db, current_user)
