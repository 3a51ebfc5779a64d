from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_actor_context
from app.models.actor_context import ActorContext
from app.models.lease import LeaseStatus
from app.services.lease_service import LeaseService
from app.schemas.lease_schemas import (
    LeaseCreate,
    LeaseUpdate,
    LeaseSignRequest,
    LeaseResponse,
    LeaseListResponse,
    LeaseStatsResponse,
    LeaseExpiryResponse,
)

router = APIRouter()


@router.post("", response_model=LeaseResponse, status_code=status.HTTP_201_CREATED)
def create_lease(
    data: LeaseCreate,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """Create a draft lease for one of your tenants"""
    service = LeaseService(db)
    return service.create_lease(data, context)


@router.get("", response_model=LeaseListResponse)
def list_leases(
    status_filter: Optional[LeaseStatus] = Query(None, alias="status", description="Filter by status"),
    property_id: Optional[int] = Query(None, description="Filter by property"),
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    service = LeaseService(db)
    leases = service.list_leases(context, status=status_filter, property_id=property_id)
    return LeaseListResponse(leases=leases, total=len(leases))


@router.get("/stats", response_model=LeaseStatsResponse)
def get_lease_stats(
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """Lease counts by status, including leases expiring soon"""
    service = LeaseService(db)
    return service.get_lease_stats(context)


@router.post("/expire", response_model=LeaseExpiryResponse)
def expire_leases(
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """Mark your active leases whose end date has passed as expired"""
    service = LeaseService(db)
    return LeaseExpiryResponse(expired=service.expire_leases(context))


@router.get("/{lease_id}", response_model=LeaseResponse)
def get_lease(
    lease_id: int,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """
    Get a lease.

    - Visible to the landlord and to the tenant linked to it
    """
    service = LeaseService(db)
    return service.get_lease(lease_id, context)


@router.patch("/{lease_id}", response_model=LeaseResponse)
def update_lease(
    lease_id: int,
    data: LeaseUpdate,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """
    Update lease terms.

    - Only draft and pending-signature leases can be edited (409 otherwise)
    """
    service = LeaseService(db)
    return service.update_lease(lease_id, data, context)


@router.post("/{lease_id}/sign", response_model=LeaseResponse)
def sign_lease(
    lease_id: int,
    data: LeaseSignRequest,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """
    Sign a lease as landlord or tenant.

    - Becomes active once both parties have signed
    """
    service = LeaseService(db)
    return service.sign_lease(lease_id, data.role, context)


@router.post("/{lease_id}/terminate", response_model=LeaseResponse)
def terminate_lease(
    lease_id: int,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    service = LeaseService(db)
    return service.terminate_lease(lease_id, context)
