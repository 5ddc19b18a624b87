from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from dormdash.core.database import get_db
from dormdash.core.security import get_current_user
from dormdash.models.user import User
from dormdash.schemas.base import Message
from dormdash.schemas.listing import (
    BrowseListing,
    ListingIdRequest,
    ListingRead,
    ListingUpdate,
    MarkPaidRequest,
)
from dormdash.services import lifecycle, queries

router = APIRouter(prefix="/api/listings", tags=["listings"])
form_router = APIRouter(tags=["listings"])


@router.get("", response_model=List[BrowseListing])
def browse_listings(
    search: str = Query(default=""),
    db: Session = Depends(get_db),
):
    return queries.browse_listings(db, search)


@form_router.post("/createListing", response_model=Message, status_code=status.HTTP_201_CREATED)
async def create_listing(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    contact_info: Optional[str] = Form(None, alias="contactInfo"),
    price: Optional[str] = Form(None),
    condition: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    image_bytes = None
    image_type = None
    if image is not None and image.filename:
        image_bytes = await image.read()
        image_type = image.content_type

    lifecycle.create_listing(
        db,
        current_user,
        title=title,
        description=description,
        contact_info=contact_info,
        price=price,
        condition=condition,
        location=location,
        image=image_bytes,
        image_type=image_type,
    )
    return Message(message="Listing created successfully!")


@router.post("/reserve", response_model=Message)
def reserve_listing(
    body: ListingIdRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lifecycle.reserve_listing(db, body.listing_id, current_user)
    return Message(message="Item reserved successfully")


@router.post("/markAsPaid", response_model=Message)
def mark_as_paid(
    body: MarkPaidRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lifecycle.mark_as_paid(db, body.listing_id, current_user, body.transaction_id)
    return Message(message="Payment marked as paid")


@router.post("/markAsReceived", response_model=Message)
def mark_as_received(
    body: ListingIdRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lifecycle.mark_as_received(db, body.listing_id, current_user)
    return Message(message="Order marked as received and completed")


@router.put("/{listing_id}", response_model=ListingRead)
def update_listing(
    listing_id: int,
    listing_in: ListingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    listing = lifecycle.update_listing(db, listing_id, current_user, listing_in)
    return queries.to_listing_read(listing)


@router.delete("/{listing_id}", response_model=Message)
def delete_listing(
    listing_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lifecycle.delete_listing(db, listing_id, current_user)
    return Message(message="Listing deleted successfully")
