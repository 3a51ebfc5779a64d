from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional


class ReviewCreate(BaseModel):
    booking_id: int = Field(..., gt=0)
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=5000)


class ReviewResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    booking_id: int
    property_id: int
    user_id: int
    rating: int
    comment: Optional[str]
    created_at: datetime


class ReviewListResponse(BaseModel):
    reviews: list[ReviewResponse]
    total: int
    average_rating: Optional[float]
