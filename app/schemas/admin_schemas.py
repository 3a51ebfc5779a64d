from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, Optional

from app.models.admin_action import AdminActionStatus
from app.models.role import UserRole


class DashboardStatsResponse(BaseModel):
    """Platform-wide counters for the admin dashboard"""

    total_users: int
    total_properties: int
    pending_properties: int
    approved_properties: int
    rejected_properties: int
    total_bookings: int
    pending_bookings: int
    confirmed_bookings: int
    completed_bookings: int
    cancelled_bookings: int
    total_revenue: float
    active_tenants: int


class AdminUserResponse(BaseModel):
    """User with account data and activity counts"""

    id: int
    auth_user_id: str
    full_name: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    role: UserRole
    properties_count: int
    bookings_count: int
    created_at: datetime


class AdminUserListResponse(BaseModel):
    users: list[AdminUserResponse]
    total: int


class UserRoleUpdate(BaseModel):
    role: UserRole = Field(..., description="New role to assign")


class AdminActionResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    admin_id: int
    action_type: str
    target_type: Optional[str]
    target_id: Optional[int]
    details: dict[str, Any]
    status: AdminActionStatus
    created_at: datetime


class AdminActionListResponse(BaseModel):
    actions: list[AdminActionResponse]
    total: int


class UserDeleteResponse(BaseModel):
    message: str
    removed_user_id: int
