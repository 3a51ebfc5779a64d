from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_actor_context
from app.models.actor_context import ActorContext
from app.models.booking import BookingStatus
from app.services.booking_service import BookingService
from app.schemas.booking_schemas import (
    BookingQuoteRequest,
    BookingQuoteResponse,
    BookingCreate,
    BookingCancelRequest,
    BookingResponse,
    BookingListResponse,
    ContactLinksResponse,
    ReviewEligibilityResponse,
)

router = APIRouter()


@router.post("/quote", response_model=BookingQuoteResponse)
def quote_booking(data: BookingQuoteRequest, db: Session = Depends(get_db)):
    """
    Price a stay without booking it.

    - Whole calendar months, minimum one
    - Includes the platform service fee at the current commission rate
    """
    service = BookingService(db)
    return service.quote(data)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """
    Request a booking.

    - Price is computed by the server
    - A supplied `total_amount` that differs from the server price returns 400
    """
    service = BookingService(db)
    return service.create_booking(data, context)


@router.get("", response_model=BookingListResponse)
def list_bookings(
    view: Literal["guest", "host"] = Query("guest", description="Bookings you made, or bookings on your listings"),
    status_filter: Optional[BookingStatus] = Query(None, alias="status", description="Filter by status"),
    property_id: Optional[int] = Query(None, description="Filter by property"),
    from_date: Optional[date] = Query(None, description="Check-in on or after"),
    to_date: Optional[date] = Query(None, description="Check-out on or before"),
    limit: int = Query(100, ge=1, le=1000, description="Max results"),
    offset: int = Query(0, ge=0, description="Pagination offset"),
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    service = BookingService(db)
    bookings, total = service.list_bookings(
        context,
        as_host=view == "host",
        status=status_filter,
        property_id=property_id,
        from_date=from_date,
        to_date=to_date,
        limit=limit,
        offset=offset,
    )
    return BookingListResponse(bookings=bookings, total=total)


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    service = BookingService(db)
    return service.get_booking(booking_id, context)


@router.post("/{booking_id}/confirm", response_model=BookingResponse)
def confirm_booking(
    booking_id: int,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """Host accepts a pending booking"""
    service = BookingService(db)
    return service.confirm_booking(booking_id, context)


@router.post("/{booking_id}/complete", response_model=BookingResponse)
def complete_booking(
    booking_id: int,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """Host marks a confirmed stay as completed"""
    service = BookingService(db)
    return service.complete_booking(booking_id, context)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(
    booking_id: int,
    data: BookingCancelRequest,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """
    Cancel a booking as guest or host.

    - Only pending or confirmed bookings (409 otherwise)
    - Check-in must be more than the notice period away (400 otherwise)
    """
    service = BookingService(db)
    return service.cancel_booking(booking_id, data.reason, context)


@router.get("/{booking_id}/contact", response_model=ContactLinksResponse)
def get_contact_links(
    booking_id: int,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """Phone, email and WhatsApp links for the other party"""
    service = BookingService(db)
    return service.get_contact_links(booking_id, context)


@router.get("/{booking_id}/review-eligibility", response_model=ReviewEligibilityResponse)
def get_review_eligibility(
    booking_id: int,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    service = BookingService(db)
    return service.get_review_eligibility(booking_id, context)
