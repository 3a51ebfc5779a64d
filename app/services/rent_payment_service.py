import calendar
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.models.actor_context import ActorContext
from app.models.rent_payment import RentPayment, RentPaymentStatus
from app.models.tenant import Tenant
from app.repositories.rent_payment_repository import RentPaymentRepository
from app.repositories.tenant_repository import TenantRepository
from app.schemas.rent_payment_schemas import (
    LateFeeRequest,
    RecordPaymentRequest,
    WaivePaymentRequest,
)
from app.core.exceptions import InvalidTransitionException, NotFoundException

logger = logging.getLogger(__name__)

DEFAULT_WAIVE_NOTE = "Payment waived"


def month_start(value: date) -> date:
    """First day of the month containing `value`"""
    return value.replace(day=1)


def iter_months(start: date, end: date):
    """Yield the first day of every month from month(start) to month(end) inclusive"""
    current = month_start(start)
    last = month_start(end)
    while current <= last:
        yield current
        if current.month == 12:
            current = current.replace(year=current.year + 1, month=1)
        else:
            current = current.replace(month=current.month + 1)


def due_date_for(payment_month: date, rent_due_day: int) -> date:
    """
    Due date inside a billing month.

    A due day past the end of the month is clamped to the month's last day,
    so day 31 falls on Feb 28/29 and Apr 30.
    """
    days_in_month = calendar.monthrange(payment_month.year, payment_month.month)[1]
    return payment_month + timedelta(days=min(rent_due_day, days_in_month) - 1)


class RentPaymentService:
    """Service layer for monthly rent bookkeeping"""

    def __init__(self, db: Session):
        self.db = db
        self.payment_repo = RentPaymentRepository(db)
        self.tenant_repo = TenantRepository(db)

    def build_schedule(
        self,
        tenant: Tenant,
        rent_due_day: int,
        skip_months: Optional[set[date]] = None,
    ) -> list[RentPayment]:
        """
        Build (without persisting) one pending row per lease month.

        Args:
            tenant: Tenant whose lease dates and rent are used
            rent_due_day: Day of month the rent is due
            skip_months: Months that already have a row

        Returns:
            Unsaved RentPayment rows
        """
        skip_months = skip_months or set()
        return [
            RentPayment(
                tenant_id=tenant.id,
                property_id=tenant.property_id,
                landlord_id=tenant.landlord_id,
                payment_month=month,
                due_date=due_date_for(month, rent_due_day),
                amount_due=tenant.monthly_rent,
                amount_paid=0,
                late_fee=0,
                status=RentPaymentStatus.PENDING,
                is_late=False,
            )
            for month in iter_months(tenant.lease_start_date, tenant.lease_end_date)
            if month not in skip_months
        ]

    def create_payment_schedule(self, tenant: Tenant, rent_due_day: int) -> int:
        """
        Generate the missing monthly rows for a tenant and commit them.

        Months that already have a row are skipped, so the call can be
        repeated safely.

        Returns:
            Number of rows created
        """
        existing = self.payment_repo.get_months_for_tenant(tenant.id)
        payments = self.build_schedule(tenant, rent_due_day, skip_months=existing)
        if payments:
            self.payment_repo.create_bulk(payments)
        self.db.commit()

        logger.info(
            "Created %d rent payment rows for tenant %s (%d already present)",
            len(payments),
            tenant.id,
            len(existing),
        )
        return len(payments)

    def _get_payment(self, payment_id: int, context: ActorContext) -> RentPayment:
        payment = self.payment_repo.get_by_id_and_landlord(payment_id, context.user_id)
        if not payment:
            raise NotFoundException(f"Rent payment {payment_id} not found")
        return payment

    def record_payment(self, data: RecordPaymentRequest, context: ActorContext) -> RentPayment:
        """
        Record money received for a tenant's billing month.

        The amount is added to what was already paid. The row becomes PAID
        once the running total covers amount_due, PARTIAL before that.

        Raises:
            NotFoundException: Tenant or billing month not found for this landlord
            InvalidTransitionException: The month was waived
        """
        tenant = self.tenant_repo.get_by_id_and_landlord(data.tenant_id, context.user_id)
        if not tenant:
            raise NotFoundException(f"Tenant {data.tenant_id} not found")

        payment_month = month_start(data.payment_month)
        payment = self.payment_repo.get_by_tenant_and_month(tenant.id, payment_month)
        if not payment:
            raise NotFoundException(
                f"No rent payment scheduled for tenant {tenant.id} in {payment_month:%Y-%m}"
            )

        if payment.status == RentPaymentStatus.WAIVED:
            raise InvalidTransitionException("Cannot record a payment against a waived month")

        new_paid = round(float(payment.amount_paid or 0) + data.amount_paid, 2)
        payment.amount_paid = new_paid
        payment.status = payment.settlement_status(new_paid)
        if data.late_fee is not None:
            payment.late_fee = data.late_fee
        if data.payment_method is not None:
            payment.payment_method = data.payment_method
        if data.transaction_id is not None:
            payment.transaction_id = data.transaction_id
        if data.notes is not None:
            payment.notes = data.notes
        payment.payment_date = data.payment_date or datetime.now(timezone.utc)

        payment = self.payment_repo.update(payment)
        logger.info(
            "Recorded %.2f for tenant %s month %s, status now %s",
            data.amount_paid,
            tenant.id,
            payment_month,
            payment.status.value,
        )
        return payment

    def waive_payment(
        self, payment_id: int, data: WaivePaymentRequest, context: ActorContext
    ) -> RentPayment:
        """Waive a billing month. amount_due is kept and the row is final."""
        payment = self._get_payment(payment_id, context)

        reason = data.notes or DEFAULT_WAIVE_NOTE
        payment.notes = f"{payment.notes}\n{reason}" if payment.notes else reason
        payment.status = RentPaymentStatus.WAIVED

        payment = self.payment_repo.update(payment)
        logger.info("Waived rent payment %s", payment.id)
        return payment

    def add_late_fee(
        self, payment_id: int, data: LateFeeRequest, context: ActorContext
    ) -> RentPayment:
        payment = self._get_payment(payment_id, context)

        if payment.status == RentPaymentStatus.WAIVED:
            raise InvalidTransitionException("Cannot add a late fee to a waived month")

        payment.late_fee = data.late_fee
        payment.is_late = True

        payment = self.payment_repo.update(payment)
        logger.info("Late fee %.2f set on rent payment %s", data.late_fee, payment.id)
        return payment

    def mark_late_payments(self, context: ActorContext, today: Optional[date] = None) -> int:
        """Flag the landlord's PENDING rows past their due date as LATE"""
        today = today or date.today()
        updated = self.payment_repo.mark_late(today, landlord_id=context.user_id)
        logger.info("Marked %d rent payments late for landlord %s", updated, context.user_id)
        return updated

    def list_payments(
        self,
        context: ActorContext,
        status: Optional[RentPaymentStatus] = None,
        property_id: Optional[int] = None,
        tenant_id: Optional[int] = None,
        payment_month: Optional[date] = None,
    ) -> list[RentPayment]:
        return self.payment_repo.get_with_filters(
            landlord_id=context.user_id,
            status=status,
            property_id=property_id,
            tenant_id=tenant_id,
            payment_month=month_start(payment_month) if payment_month else None,
        )

    def list_tenant_payments(self, tenant_id: int, context: ActorContext) -> list[RentPayment]:
        """One tenant's payments, newest month first"""
        tenant = self.tenant_repo.get_by_id_and_landlord(tenant_id, context.user_id)
        if not tenant:
            raise NotFoundException(f"Tenant {tenant_id} not found")
        return self.payment_repo.get_by_tenant(tenant.id)

    def get_payment_stats(self, context: ActorContext, today: Optional[date] = None) -> dict:
        """
        Collection totals across the landlord's payment rows.

        Returns:
            Dict matching RentPaymentStatsResponse
        """
        today = today or date.today()
        current_month = month_start(today)
        payments = self.payment_repo.get_with_filters(landlord_id=context.user_id)

        counts = {status: 0 for status in RentPaymentStatus}
        total_collected = 0.0
        total_pending = 0.0
        total_overdue = 0.0
        total_late_fees = 0.0
        current_month_collected = 0.0
        current_month_expected = 0.0

        for payment in payments:
            amount_due = float(payment.amount_due)
            amount_paid = float(payment.amount_paid or 0)
            counts[payment.status] += 1
            total_late_fees += float(payment.late_fee or 0)

            if payment.status == RentPaymentStatus.PAID:
                total_collected += amount_paid
            elif payment.status == RentPaymentStatus.PENDING:
                total_pending += amount_due
            elif payment.status == RentPaymentStatus.LATE:
                total_overdue += amount_due - amount_paid

            if payment.payment_month == current_month:
                current_month_expected += amount_due
                current_month_collected += amount_paid

        return {
            "total_collected": round(total_collected, 2),
            "total_pending": round(total_pending, 2),
            "total_overdue": round(total_overdue, 2),
            "total_late_fees": round(total_late_fees, 2),
            "paid_count": counts[RentPaymentStatus.PAID],
            "pending_count": counts[RentPaymentStatus.PENDING],
            "late_count": counts[RentPaymentStatus.LATE],
            "partial_count": counts[RentPaymentStatus.PARTIAL],
            "waived_count": counts[RentPaymentStatus.WAIVED],
            "current_month_collected": round(current_month_collected, 2),
            "current_month_expected": round(current_month_expected, 2),
        }


