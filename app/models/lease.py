from datetime import date, datetime
from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Numeric, ForeignKey, Enum, Date, DateTime, Text, JSON, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.tenant import Tenant


class LeaseStatus(str, PyEnum):
    """Lease lifecycle status"""

    DRAFT = "draft"
    PENDING_SIGNATURE = "pending_signature"
    ACTIVE = "active"
    TERMINATED = "terminated"
    EXPIRED = "expired"


TERMINAL_LEASE_STATUSES = frozenset({LeaseStatus.TERMINATED, LeaseStatus.EXPIRED})
EDITABLE_LEASE_STATUSES = frozenset({LeaseStatus.DRAFT, LeaseStatus.PENDING_SIGNATURE})


class AgreementType(str, PyEnum):
    STANDARD = "standard"
    MONTH_TO_MONTH = "month-to-month"
    FIXED_TERM = "fixed-term"


class SignatoryRole(str, PyEnum):
    LANDLORD = "landlord"
    TENANT = "tenant"


class LeaseAgreement(Base, TimestampMixin):
    """
    Contract between a landlord and a tenant.

    Status is driven by signatures: ACTIVE only with both signatures,
    PENDING_SIGNATURE with exactly one. TERMINATED and EXPIRED are final.
    """

    __tablename__ = "lease_agreements"

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

    agreement_type: Mapped[AgreementType] = mapped_column(
        Enum(AgreementType, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=AgreementType.STANDARD,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    monthly_rent: Mapped[float] = mapped_column(Numeric(precision=15, scale=2), nullable=False)
    security_deposit: Mapped[float] = mapped_column(
        Numeric(precision=15, scale=2), nullable=False, default=0
    )

    # Terms
    terms_and_conditions: Mapped[str | None] = mapped_column(Text, nullable=True)
    special_clauses: Mapped[str | None] = mapped_column(Text, nullable=True)
    utilities_included: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    tenant_responsibilities: Mapped[str | None] = mapped_column(Text, nullable=True)
    landlord_responsibilities: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Payment terms
    rent_due_day: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    late_fee_amount: Mapped[float] = mapped_column(
        Numeric(precision=15, scale=2), nullable=False, default=0
    )
    late_fee_grace_period: Mapped[int] = mapped_column(Integer, nullable=False, default=5)

    # Signatures
    landlord_signed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    landlord_signature_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    tenant_signed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tenant_signature_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    document_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    status: Mapped[LeaseStatus] = mapped_column(
        Enum(LeaseStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=LeaseStatus.DRAFT,
        index=True,
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="leases")

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_LEASE_STATUSES

    def signature_status(self) -> LeaseStatus:
        """Status implied by the current signatures (recomputed on every signature)."""
        if self.landlord_signed and self.tenant_signed:
            return LeaseStatus.ACTIVE
        if self.landlord_signed or self.tenant_signed:
            return LeaseStatus.PENDING_SIGNATURE
        return LeaseStatus.DRAFT

    def __repr__(self) -> str:
        return f"<LeaseAgreement(id={self.id}, tenant_id={self.tenant_id}, status={self.status.value})>"
