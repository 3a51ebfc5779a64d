from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin
from app.models.actor_context import ActorContext
from app.models.property import PropertyStatus
from app.services.admin_service import AdminService
from app.services.moderation_service import ModerationService
from app.schemas.admin_schemas import (
    DashboardStatsResponse,
    AdminUserResponse,
    AdminUserListResponse,
    UserRoleUpdate,
    UserDeleteResponse,
    AdminActionListResponse,
)
from app.schemas.property_schemas import (
    PropertyResponse,
    PropertyListResponse,
    PropertyCountsResponse,
    RejectPropertyRequest,
    BulkApproveRequest,
    BulkRejectRequest,
    BulkActionResponse,
)

router = APIRouter()


@router.get("/stats", response_model=DashboardStatsResponse)
def get_dashboard_stats(
    context: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Users, listings, bookings, revenue and active tenants"""
    service = AdminService(db)
    return service.get_dashboard_stats(context)


# Property moderation


@router.get("/properties", response_model=PropertyListResponse)
def list_properties(
    status_filter: Optional[PropertyStatus] = Query(
        None, alias="status", description="Filter by moderation status"
    ),
    search: Optional[str] = Query(None, description="Match on title or location"),
    limit: int = Query(100, ge=1, le=1000, description="Max results"),
    offset: int = Query(0, ge=0, description="Pagination offset"),
    context: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    service = ModerationService(db)
    properties, total = service.list_properties(
        context, status=status_filter, search=search, limit=limit, offset=offset
    )
    return PropertyListResponse(properties=properties, total=total)


@router.get("/properties/counts", response_model=PropertyCountsResponse)
def get_property_counts(
    context: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    service = ModerationService(db)
    return service.get_property_counts(context)


@router.post("/properties/bulk-approve", response_model=BulkActionResponse)
def bulk_approve_properties(
    data: BulkApproveRequest,
    context: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Approve several listings.

    - Each listing is processed and committed on its own
    - Failures are reported per listing; `status` is success, partial or failed
    """
    service = ModerationService(db)
    return service.bulk_approve(data.property_ids, context)


@router.post("/properties/bulk-reject", response_model=BulkActionResponse)
def bulk_reject_properties(
    data: BulkRejectRequest,
    context: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    service = ModerationService(db)
    return service.bulk_reject(data.property_ids, data.category, data.notes, context)


@router.post("/properties/{property_id}/approve", response_model=PropertyResponse)
def approve_property(
    property_id: int,
    context: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Approve a pending listing (409 if it is not pending)"""
    service = ModerationService(db)
    return service.approve_property(property_id, context)


@router.post("/properties/{property_id}/reject", response_model=PropertyResponse)
def reject_property(
    property_id: int,
    data: RejectPropertyRequest,
    context: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Reject a pending listing with a reason category and optional notes"""
    service = ModerationService(db)
    return service.reject_property(property_id, data.category, data.notes, context)


# Users


@router.get("/users", response_model=AdminUserListResponse)
def list_users(
    search: Optional[str] = Query(None, description="Match on name, email or phone"),
    limit: int = Query(100, ge=1, le=1000, description="Max results"),
    offset: int = Query(0, ge=0, description="Pagination offset"),
    context: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    service = AdminService(db)
    users, total = service.list_users(context, search=search, limit=limit, offset=offset)
    return AdminUserListResponse(users=users, total=total)


@router.get("/users/{user_id}", response_model=AdminUserResponse)
def get_user(
    user_id: int,
    context: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    service = AdminService(db)
    return service.get_user(user_id, context)


@router.patch("/users/{user_id}/role", response_model=AdminUserResponse)
def update_user_role(
    user_id: int,
    data: UserRoleUpdate,
    context: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    service = AdminService(db)
    return service.update_user_role(user_id, data.role, context)


@router.delete("/users/{user_id}", response_model=UserDeleteResponse)
def delete_user(
    user_id: int,
    context: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Permanently delete a user with their listings and bookings.

    - Administrators cannot delete themselves
    """
    service = AdminService(db)
    return service.delete_user(user_id, context)


# Activity log


@router.get("/activity", response_model=AdminActionListResponse)
def get_activity_log(
    action_type: Optional[str] = Query(None, description="Filter by action type"),
    admin_id: Optional[int] = Query(None, description="Filter by admin"),
    target_type: Optional[str] = Query(None, description="Filter by target type"),
    start: Optional[datetime] = Query(None, description="From (inclusive)"),
    end: Optional[datetime] = Query(None, description="To (inclusive)"),
    context: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Latest 100 admin actions, newest first"""
    service = AdminService(db)
    actions = service.get_activity_log(
        context,
        action_type=action_type,
        admin_id=admin_id,
        target_type=target_type,
        start=start,
        end=end,
    )
    return AdminActionListResponse(actions=actions, total=len(actions))
