from datetime import date, datetime
from pydantic import BaseModel, Field, model_validator
from typing import Optional

from app.models.lease import AgreementType, LeaseStatus, SignatoryRole


class LeaseCreate(BaseModel):
    """Schema for creating a standalone draft lease for an existing tenant"""

    tenant_id: int = Field(..., gt=0)
    agreement_type: AgreementType = AgreementType.STANDARD
    start_date: date
    end_date: date
    monthly_rent: float = Field(..., ge=0)
    security_deposit: float = Field(default=0, ge=0)
    terms_and_conditions: Optional[str] = None
    special_clauses: Optional[str] = None
    utilities_included: list[str] = Field(default_factory=list)
    tenant_responsibilities: Optional[str] = None
    landlord_responsibilities: Optional[str] = None
    rent_due_day: Optional[int] = Field(None, ge=1, le=31)
    late_fee_amount: float = Field(default=0, ge=0)
    late_fee_grace_period: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def check_dates(self) -> "LeaseCreate":
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class LeaseUpdate(BaseModel):
    """Schema for updating lease terms (status is not writable)"""

    agreement_type: Optional[AgreementType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    monthly_rent: Optional[float] = Field(None, ge=0)
    security_deposit: Optional[float] = Field(None, ge=0)
    terms_and_conditions: Optional[str] = None
    special_clauses: Optional[str] = None
    utilities_included: Optional[list[str]] = None
    tenant_responsibilities: Optional[str] = None
    landlord_responsibilities: Optional[str] = None
    rent_due_day: Optional[int] = Field(None, ge=1, le=31)
    late_fee_amount: Optional[float] = Field(None, ge=0)
    late_fee_grace_period: Optional[int] = Field(None, ge=0)
    document_url: Optional[str] = Field(None, max_length=500)


class LeaseSignRequest(BaseModel):
    """Which party is signing"""

    role: SignatoryRole


class LeaseResponse(BaseModel):
    """Schema for lease response"""

    model_config = {"from_attributes": True}

    id: int
    tenant_id: int
    property_id: int
    landlord_id: int
    agreement_type: AgreementType
    start_date: date
    end_date: date
    monthly_rent: float
    security_deposit: float
    terms_and_conditions: Optional[str]
    special_clauses: Optional[str]
    utilities_included: list[str]
    tenant_responsibilities: Optional[str]
    landlord_responsibilities: Optional[str]
    rent_due_day: int
    late_fee_amount: float
    late_fee_grace_period: int
    landlord_signed: bool
    landlord_signature_date: Optional[datetime]
    tenant_signed: bool
    tenant_signature_date: Optional[datetime]
    document_url: Optional[str]
    status: LeaseStatus
    created_at: datetime
    updated_at: datetime


class LeaseListResponse(BaseModel):
    leases: list[LeaseResponse]
    total: int


class LeaseStatsResponse(BaseModel):
    total: int
    active: int
    draft: int
    pending_signature: int
    expiring_soon: int
    expired: int


class LeaseExpiryResponse(BaseModel):
    expired: int
