from datetime import date, datetime
from pydantic import BaseModel, Field, model_validator
from typing import Optional

from app.models.booking import BookingStatus


class BookingQuoteRequest(BaseModel):
    """Price a stay without creating a booking"""

    property_id: int = Field(..., gt=0)
    check_in: date
    check_out: date

    @model_validator(mode="after")
    def check_dates(self) -> "BookingQuoteRequest":
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class BookingQuoteResponse(BaseModel):
    months: int
    monthly_rent: float
    subtotal: float
    commission_rate: float
    service_fee: float
    total_amount: float
    currency: str


class BookingCreate(BookingQuoteRequest):
    """
    Schema for creating a booking.

    `total_amount` is optional; when supplied it must match the server's
    own computation or the booking is rejected.
    """

    special_requests: Optional[str] = Field(None, max_length=2000)
    total_amount: Optional[float] = Field(None, ge=0)


class BookingCancelRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=2000)


class BookingResponse(BaseModel):
    """Schema for booking response"""

    model_config = {"from_attributes": True}

    id: int
    property_id: int
    guest_id: int
    host_id: int
    check_in: date
    check_out: date
    total_months: int
    monthly_rent: float
    commission_rate: float
    subtotal: float
    service_fee: float
    total_amount: float
    status: BookingStatus
    special_requests: Optional[str]
    cancellation_reason: Optional[str]
    cancellation_date: Optional[datetime]
    cancelled_by: Optional[int]
    created_at: datetime
    updated_at: datetime


class BookingListResponse(BaseModel):
    bookings: list[BookingResponse]
    total: int


class ContactLinksResponse(BaseModel):
    """Ways to reach the other party of a booking"""

    name: Optional[str]
    phone_link: Optional[str]
    email_link: Optional[str]
    whatsapp_link: Optional[str]


class ReviewEligibilityResponse(BaseModel):
    booking_id: int
    can_review: bool
