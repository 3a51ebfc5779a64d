from datetime import date, datetime
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field, model_validator

from app.models.tenant import TenantStatus


class TenantCreate(BaseModel):
    """
    Create a tenant for one of the landlord's properties.

    Provide either `user_id` (tenant has a platform account) or
    `tenant_name` (independent tenant), never both.
    """

    property_id: int = Field(..., gt=0)
    user_id: Optional[int] = Field(None, gt=0)
    tenant_name: Optional[str] = Field(None, min_length=1, max_length=255)
    tenant_phone: Optional[str] = Field(None, max_length=50)
    tenant_email: Optional[str] = Field(None, max_length=255)

    emergency_contact_name: Optional[str] = Field(None, max_length=255)
    emergency_contact_phone: Optional[str] = Field(None, max_length=50)
    emergency_contact_relationship: Optional[str] = Field(None, max_length=100)

    lease_start_date: date
    lease_end_date: date
    monthly_rent: float = Field(..., ge=0)
    security_deposit: float = Field(default=0, ge=0)
    rent_due_day: Optional[int] = Field(None, ge=1, le=31)
    late_fee_amount: float = Field(default=0, ge=0)
    late_fee_grace_period: Optional[int] = Field(None, ge=0)

    move_in_date: Optional[date] = None
    move_in_condition_notes: Optional[str] = Field(None, max_length=5000)
    move_in_photos: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_identity_and_dates(self) -> "TenantCreate":
        if (self.user_id is None) == (self.tenant_name is None):
            raise ValueError("Provide exactly one of user_id or tenant_name")
        if self.lease_end_date <= self.lease_start_date:
            raise ValueError("lease_end_date must be after lease_start_date")
        return self


class TenantUpdate(BaseModel):
    """Partial update of a tenant's contact and occupancy details"""

    tenant_name: Optional[str] = Field(None, min_length=1, max_length=255)
    tenant_phone: Optional[str] = Field(None, max_length=50)
    tenant_email: Optional[str] = Field(None, max_length=255)
    emergency_contact_name: Optional[str] = Field(None, max_length=255)
    emergency_contact_phone: Optional[str] = Field(None, max_length=50)
    emergency_contact_relationship: Optional[str] = Field(None, max_length=100)
    monthly_rent: Optional[float] = Field(None, ge=0)
    security_deposit: Optional[float] = Field(None, ge=0)
    move_in_date: Optional[date] = None
    move_in_condition_notes: Optional[str] = Field(None, max_length=5000)
    move_in_photos: Optional[list[str]] = None


class EndTenancyRequest(BaseModel):
    """Move-out details recorded when a tenancy ends"""

    move_out_date: date
    move_out_condition_notes: Optional[str] = Field(None, max_length=5000)
    move_out_photos: list[str] = Field(default_factory=list)


class LinkedTenantIdentity(BaseModel):
    kind: Literal["linked"] = "linked"
    user_id: int
    full_name: Optional[str]
    email: Optional[str]
    phone: Optional[str]


class IndependentTenantIdentity(BaseModel):
    kind: Literal["independent"] = "independent"
    name: str
    phone: Optional[str]
    email: Optional[str]


TenantIdentity = Annotated[
    Union[LinkedTenantIdentity, IndependentTenantIdentity], Field(discriminator="kind")
]


class TenantResponse(BaseModel):
    """Tenant details with derived late-rent flag"""

    id: int
    property_id: int
    landlord_id: int
    identity: TenantIdentity
    emergency_contact_name: Optional[str]
    emergency_contact_phone: Optional[str]
    emergency_contact_relationship: Optional[str]
    lease_start_date: date
    lease_end_date: date
    monthly_rent: float
    security_deposit: float
    status: TenantStatus
    is_late_on_rent: bool
    move_in_date: Optional[date]
    move_out_date: Optional[date]
    move_in_condition_notes: Optional[str]
    move_out_condition_notes: Optional[str]
    move_in_photos: list[str]
    move_out_photos: list[str]
    created_at: datetime
    updated_at: datetime


class TenantCreateResponse(BaseModel):
    """Result of the create-tenant cascade"""

    tenant: TenantResponse
    lease_id: int
    payment_schedule_created: bool
    payments_created: int


class TenantListResponse(BaseModel):
    tenants: list[TenantResponse]
    total: int


class TenantStatsResponse(BaseModel):
    """Landlord-wide tenancy statistics"""

    total_tenants: int
    active_tenants: int
    total_monthly_rent: float
    on_time_payment_rate: float
    late_payments_count: int


class PaymentScheduleResponse(BaseModel):
    tenant_id: int
    payments_created: int
