from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_actor_context
from app.models.actor_context import ActorContext
from app.models.rent_payment import RentPaymentStatus
from app.services.rent_payment_service import RentPaymentService
from app.schemas.rent_payment_schemas import (
    RecordPaymentRequest,
    WaivePaymentRequest,
    LateFeeRequest,
    RentPaymentResponse,
    RentPaymentListResponse,
    RentPaymentStatsResponse,
    MarkLateResponse,
)

router = APIRouter()


@router.get("", response_model=RentPaymentListResponse)
def list_payments(
    status_filter: Optional[RentPaymentStatus] = Query(
        None, alias="status", description="Filter by status"
    ),
    property_id: Optional[int] = Query(None, description="Filter by property"),
    tenant_id: Optional[int] = Query(None, description="Filter by tenant"),
    payment_month: Optional[date] = Query(None, description="Any day of the billing month"),
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """List your tenants' rent payments, newest month first"""
    service = RentPaymentService(db)
    payments = service.list_payments(
        context,
        status=status_filter,
        property_id=property_id,
        tenant_id=tenant_id,
        payment_month=payment_month,
    )
    return RentPaymentListResponse(payments=payments, total=len(payments))


@router.get("/stats", response_model=RentPaymentStatsResponse)
def get_payment_stats(
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    service = RentPaymentService(db)
    return service.get_payment_stats(context)


@router.post("/record", response_model=RentPaymentResponse)
def record_payment(
    data: RecordPaymentRequest,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """
    Record money received for a billing month.

    - `amount_paid` is added to what was already paid for that month
    - Status becomes paid once the month is covered, partial before that
    - Returns 404 if no row exists for that month, 409 if it was waived
    """
    service = RentPaymentService(db)
    return service.record_payment(data, context)


@router.post("/mark-late", response_model=MarkLateResponse)
def mark_late_payments(
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """Flag pending payments past their due date as late"""
    service = RentPaymentService(db)
    return MarkLateResponse(updated=service.mark_late_payments(context))


@router.post("/{payment_id}/waive", response_model=RentPaymentResponse)
def waive_payment(
    payment_id: int,
    data: WaivePaymentRequest,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    """Waive a billing month (cannot be undone)"""
    service = RentPaymentService(db)
    return service.waive_payment(payment_id, data, context)


@router.post("/{payment_id}/late-fee", response_model=RentPaymentResponse)
def add_late_fee(
    payment_id: int,
    data: LateFeeRequest,
    context: ActorContext = Depends(get_actor_context),
    db: Session = Depends(get_db),
):
    service = RentPaymentService(db)
    return service.add_late_fee(payment_id, data, context)
