from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional

from app.models.property import PropertyStatus, RejectionCategory


class PropertyCreate(BaseModel):
    """Schema for submitting a listing (enters moderation as pending)"""

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=10000)
    location: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., gt=0, description="Monthly rent")
    property_type: str = Field(default="apartment", min_length=1, max_length=50)
    bedrooms: int = Field(default=1, ge=0)
    bathrooms: int = Field(default=1, ge=0)
    is_available: bool = True


class PropertyUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=10000)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[float] = Field(None, gt=0)
    property_type: Optional[str] = Field(None, min_length=1, max_length=50)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    is_available: Optional[bool] = None


class PropertyResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    host_id: int
    title: str
    description: Optional[str]
    location: str
    price: float
    property_type: str
    bedrooms: int
    bathrooms: int
    is_available: bool
    status: PropertyStatus
    rejection_reason: Optional[str]
    approved_at: Optional[datetime]
    approved_by: Optional[int]
    created_at: datetime
    updated_at: datetime


class PropertyListResponse(BaseModel):
    properties: list[PropertyResponse]
    total: int


class PropertyCountsResponse(BaseModel):
    all: int
    pending: int
    approved: int
    rejected: int


class RejectPropertyRequest(BaseModel):
    """A rejection needs a category; notes are optional free text"""

    category: RejectionCategory
    notes: Optional[str] = Field(None, max_length=2000)


class BulkApproveRequest(BaseModel):
    property_ids: list[int] = Field(..., min_length=1, max_length=100)


class BulkRejectRequest(RejectPropertyRequest):
    property_ids: list[int] = Field(..., min_length=1, max_length=100)


class BulkOutcome(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


class BulkFailure(BaseModel):
    property_id: int
    error: str


class BulkActionResponse(BaseModel):
    """Per-item result of a bulk moderation action"""

    status: BulkOutcome
    succeeded: list[int]
    failed: list[BulkFailure]
