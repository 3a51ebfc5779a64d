from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_actor_context
from app.models.actor_context import ActorContext
from app.models.tenant import TenantStatus
from app.services.tenancy_service import TenancyService
from app.services.rent_payment_service import RentPaymentService
from app.schemas.tenant_schemas import (
    TenantCreate,
    TenantUpdate,
    EndTenancyRequest,
    TenantResponse,
    TenantCreateResponse,
    TenantListResponse,
    TenantStatsResponse,
    PaymentScheduleResponse,
)
from app.schemas.rent_payment_schemas import RentPaymentListResponse

router = APIRouter()


@router.post("", response_model=TenantCreateResponse, status_code=status.HTTP_201_CREATED)
def create_tenant(
    data: TenantCreate,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """
    Add a tenant to one of your approved properties.

    - Creates the tenant and a draft lease together
    - Generates the monthly rent schedule; if that step fails the tenant
      is still created and `payment_schedule_created` is false
    """
    service = TenancyService(db)
    return service.create_tenant(data, context)


@router.get("", response_model=TenantListResponse)
def list_tenants(
    status_filter: Optional[TenantStatus] = Query(None, alias="status", description="Filter by status"),
    property_id: Optional[int] = Query(None, description="Filter by property"),
    payment_status: Optional[str] = Query(
        None, description="'overdue' keeps only tenants late on rent"
    ),
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """List your tenants, newest first"""
    service = TenancyService(db)
    tenants = service.list_tenants(
        context,
        status=status_filter,
        property_id=property_id,
        payment_status=payment_status,
    )
    return TenantListResponse(tenants=tenants, total=len(tenants))


@router.get("/stats", response_model=TenantStatsResponse)
def get_tenant_stats(
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """Tenant counts, monthly rent roll and on-time payment rate"""
    service = TenancyService(db)
    return service.get_landlord_stats(context)


@router.get("/{tenant_id}", response_model=TenantResponse)
def get_tenant(
    tenant_id: int,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    service = TenancyService(db)
    return service.get_tenant(tenant_id, context)


@router.patch("/{tenant_id}", response_model=TenantResponse)
def update_tenant(
    tenant_id: int,
    data: TenantUpdate,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """
    Update tenant details.

    - Only provided fields are updated (partial update)
    - Contact fields are rejected for tenants linked to an account
    """
    service = TenancyService(db)
    return service.update_tenant(tenant_id, data, context)


@router.post("/{tenant_id}/end", response_model=TenantResponse)
def end_tenancy(
    tenant_id: int,
    data: EndTenancyRequest,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """
    End an active tenancy.

    - Records move-out date, notes and photos
    - Terminates the tenant's active leases
    - Returns 409 if the tenancy has already ended
    """
    service = TenancyService(db)
    return service.end_tenancy(tenant_id, data, context)


@router.post("/{tenant_id}/payment-schedule", response_model=PaymentScheduleResponse)
def regenerate_payment_schedule(
    tenant_id: int,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """Create any missing monthly rent rows (existing months are kept)"""
    service = TenancyService(db)
    return service.regenerate_payment_schedule(tenant_id, context)


@router.get("/{tenant_id}/payments", response_model=RentPaymentListResponse)
def list_tenant_payments(
    tenant_id: int,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """A tenant's rent payments, newest month first"""
    service = RentPaymentService(db)
    payments = service.list_tenant_payments(tenant_id, context)
    return RentPaymentListResponse(payments=payments, total=len(payments))
