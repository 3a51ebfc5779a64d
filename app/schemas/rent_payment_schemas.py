from datetime import date, datetime
from pydantic import BaseModel, Field
from typing import Optional

from app.models.rent_payment import PaymentMethod, RentPaymentStatus


class RecordPaymentRequest(BaseModel):
    """
    Record money received for a billing period.

    `amount_paid` is the amount received now; it is added to what was
    already paid for that month.
    """

    tenant_id: int = Field(..., gt=0)
    payment_month: date = Field(..., description="Any day of the billing month")
    amount_paid: float = Field(..., gt=0)
    late_fee: Optional[float] = Field(None, ge=0)
    payment_method: Optional[PaymentMethod] = None
    transaction_id: Optional[str] = Field(None, max_length=255)
    payment_date: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=2000)


class WaivePaymentRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=2000)


class LateFeeRequest(BaseModel):
    late_fee: float = Field(..., ge=0)


class RentPaymentResponse(BaseModel):
    """Schema for rent payment response"""

    model_config = {"from_attributes": True}

    id: int
    tenant_id: int
    property_id: int
    landlord_id: int
    payment_month: date
    due_date: date
    amount_due: float
    amount_paid: float
    late_fee: float
    payment_method: Optional[PaymentMethod]
    transaction_id: Optional[str]
    payment_date: Optional[datetime]
    status: RentPaymentStatus
    is_late: bool
    notes: Optional[str]
    receipt_url: Optional[str]
    created_at: datetime
    updated_at: datetime


class RentPaymentListResponse(BaseModel):
    payments: list[RentPaymentResponse]
    total: int


class RentPaymentStatsResponse(BaseModel):
    """Collection totals across a landlord's payment rows"""

    total_collected: float
    total_pending: float
    total_overdue: float
    total_late_fees: float
    paid_count: int
    pending_count: int
    late_count: int
    partial_count: int
    waived_count: int
    current_month_collected: float
    current_month_expected: float


class MarkLateResponse(BaseModel):
    updated: int
