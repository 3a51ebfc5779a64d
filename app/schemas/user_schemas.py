from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional

from app.models.role import UserRole


class UserProfileResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    auth_user_id: str
    full_name: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    role: UserRole
    created_at: datetime


class UserProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
