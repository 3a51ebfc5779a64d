from datetime import date
from typing import Optional
from sqlalchemy import update
from sqlalchemy.orm import Session

from app.models.rent_payment import RentPayment, RentPaymentStatus, SETTLED_PAYMENT_STATUSES


class RentPaymentRepository:
    """Repository for RentPayment data access"""

    def __init__(self, db: Session):
        self.db = db

    def create_bulk(self, payments: list[RentPayment]) -> list[RentPayment]:
        """
        Create multiple payment rows without committing.
        Caller responsible for commit. Enables atomic schedule generation.
        """
        self.db.add_all(payments)
        self.db.flush()  # Assign IDs without committing
        return payments

    def get_by_id_and_landlord(self, payment_id: int, landlord_id: int) -> Optional[RentPayment]:
        """
        Get payment by ID, ensuring it belongs to the landlord.

        Returns:
            RentPayment or None if not found or belongs to another landlord
        """
        return (
            self.db.query(RentPayment)
            .filter(RentPayment.id == payment_id, RentPayment.landlord_id == landlord_id)
            .first()
        )

    def get_by_tenant_and_month(self, tenant_id: int, payment_month: date) -> Optional[RentPayment]:
        """Get the billing-period row for (tenant, month)"""
        return (
            self.db.query(RentPayment)
            .filter(
                RentPayment.tenant_id == tenant_id,
                RentPayment.payment_month == payment_month,
            )
            .first()
        )

    def get_by_tenant(self, tenant_id: int) -> list[RentPayment]:
        """All payments of a tenant, newest month first"""
        return (
            self.db.query(RentPayment)
            .filter(RentPayment.tenant_id == tenant_id)
            .order_by(RentPayment.payment_month.desc())
            .all()
        )

    def get_months_for_tenant(self, tenant_id: int) -> set[date]:
        rows = (
            self.db.query(RentPayment.payment_month)
            .filter(RentPayment.tenant_id == tenant_id)
            .all()
        )
        return {month for (month,) in rows}

    def get_with_filters(
        self,
        landlord_id: int,
        status: Optional[RentPaymentStatus] = None,
        property_id: Optional[int] = None,
        tenant_id: Optional[int] = None,
        payment_month: Optional[date] = None,
    ) -> list[RentPayment]:
        """
        Get a landlord's payments with filters, newest month first.

        Args:
            landlord_id: Landlord ID for isolation
            status: Optional status filter
            property_id: Optional property filter
            tenant_id: Optional tenant filter
            payment_month: Optional billing period filter (first of month)

        Returns:
            List of RentPayment rows
        """
        query = self.db.query(RentPayment).filter(RentPayment.landlord_id == landlord_id)

        if status is not None:
            query = query.filter(RentPayment.status == status)

        if property_id is not None:
            query = query.filter(RentPayment.property_id == property_id)

        if tenant_id is not None:
            query = query.filter(RentPayment.tenant_id == tenant_id)

        if payment_month is not None:
            query = query.filter(RentPayment.payment_month == payment_month)

        return query.order_by(RentPayment.payment_month.desc(), RentPayment.id.desc()).all()

    def get_late_tenant_ids(self, tenant_ids: list[int], today: date) -> set[int]:
        """
        Tenants that are late on rent as of `today`.

        A tenant is late when any of their rows is unsettled (not PAID or
        WAIVED), past its due date and not fully paid.
        """
        if not tenant_ids:
            return set()

        rows = (
            self.db.query(RentPayment.tenant_id)
            .filter(
                RentPayment.tenant_id.in_(tenant_ids),
                RentPayment.status.not_in(list(SETTLED_PAYMENT_STATUSES)),
                RentPayment.due_date < today,
                RentPayment.amount_paid < RentPayment.amount_due,
            )
            .distinct()
            .all()
        )
        return {tenant_id for (tenant_id,) in rows}

    def mark_late(self, today: date, landlord_id: Optional[int] = None) -> int:
        """
        Flag PENDING rows past their due date as LATE.

        Returns:
            Number of rows updated
        """
        stmt = update(RentPayment).where(
            RentPayment.status == RentPaymentStatus.PENDING,
            RentPayment.due_date < today,
        )
        if landlord_id is not None:
            stmt = stmt.where(RentPayment.landlord_id == landlord_id)

        result = self.db.execute(
            stmt.values(status=RentPaymentStatus.LATE, is_late=True).execution_options(
                synchronize_session="fetch"
            )
        )
        self.db.commit()
        return result.rowcount

    def update(self, payment: RentPayment) -> RentPayment:
        """Update a payment row"""
        self.db.commit()
        self.db.refresh(payment)
        return payment
