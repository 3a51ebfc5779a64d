from datetime import date, datetime
from enum import Enum as PyEnum
from sqlalchemy import (
    String, Integer, Numeric, ForeignKey, Enum, Date, DateTime, Text, Boolean,
    UniqueConstraint, Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.tenant import Tenant


class RentPaymentStatus(str, PyEnum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    LATE = "late"
    WAIVED = "waived"


# Rows in these statuses no longer count towards a tenant being late
SETTLED_PAYMENT_STATUSES = frozenset({RentPaymentStatus.PAID, RentPaymentStatus.WAIVED})


class PaymentMethod(str, PyEnum):
    MPESA = "mpesa"
    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"
    CARD = "card"


class RentPayment(Base, TimestampMixin):
    """
    One billing period of rent for a tenant.

    payment_month is always the first day of the month and, together with
    tenant_id, identifies the row. amount_paid only ever grows.
    """

    __tablename__ = "rent_payments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True
    )
    landlord_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    payment_month: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount_due: Mapped[float] = mapped_column(Numeric(precision=15, scale=2), nullable=False)
    amount_paid: Mapped[float] = mapped_column(
        Numeric(precision=15, scale=2), nullable=False, default=0
    )
    late_fee: Mapped[float] = mapped_column(
        Numeric(precision=15, scale=2), nullable=False, default=0
    )

    payment_method: Mapped[PaymentMethod | None] = mapped_column(
        Enum(PaymentMethod, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=True,
    )
    transaction_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    payment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    status: Mapped[RentPaymentStatus] = mapped_column(
        Enum(RentPaymentStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=RentPaymentStatus.PENDING,
        index=True,
    )
    is_late: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    receipt_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="rent_payments")

    __table_args__ = (
        UniqueConstraint("tenant_id", "payment_month", name="uq_rent_payment_tenant_month"),
        Index("ix_rent_payments_landlord_month", "landlord_id", "payment_month"),
    )

    @property
    def outstanding(self) -> float:
        return max(0.0, float(self.amount_due) - float(self.amount_paid or 0))

    def settlement_status(self, amount_paid: float) -> RentPaymentStatus:
        """PAID once the running total covers amount_due, PARTIAL before that."""
        if amount_paid >= float(self.amount_due):
            return RentPaymentStatus.PAID
        return RentPaymentStatus.PARTIAL

    def __repr__(self) -> str:
        return (
            f"<RentPayment(id={self.id}, tenant_id={self.tenant_id}, "
            f"month={self.payment_month}, status={self.status.value})>"
        )
