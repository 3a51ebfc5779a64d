"""Tenant (occupant) model and its identity variants."""

from dataclasses import dataclass
from datetime import date
from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Numeric, ForeignKey, Enum, Date, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING, Union

from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.property import Property
    from app.models.lease import LeaseAgreement
    from app.models.rent_payment import RentPayment


class TenantStatus(str, PyEnum):
    """Occupancy status"""

    ACTIVE = "active"
    ENDED = "ended"


@dataclass(frozen=True)
class LinkedTenant:
    """Tenant backed by a platform account; contact fields come from the user."""

    user_id: int
    full_name: str | None
    email: str | None
    phone: str | None
    kind: str = "linked"


@dataclass(frozen=True)
class IndependentTenant:
    """Tenant without a platform account, identified by inline contact fields."""

    name: str
    phone: str | None
    email: str | None
    kind: str = "independent"


TenantIdentity = Union[LinkedTenant, IndependentTenant]


class Tenant(Base, TimestampMixin):
    """
    An occupant assigned to a landlord's property.

    A tenant is either linked to a platform user (user_id set) or
    independent (tenant_name set). Use `identity` instead of reading the
    nullable columns directly.

    `is_late_on_rent` is intentionally not a column: it is derived from the
    tenant's rent payment rows at read time (see RentPaymentRepository).
    """

    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True
    )
    landlord_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )

    # Independent tenant contact
    tenant_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tenant_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    tenant_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Emergency contact
    emergency_contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    emergency_contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    emergency_contact_relationship: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Lease information
    lease_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    lease_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    monthly_rent: Mapped[float] = mapped_column(Numeric(precision=15, scale=2), nullable=False)
    security_deposit: Mapped[float] = mapped_column(
        Numeric(precision=15, scale=2), nullable=False, default=0
    )

    status: Mapped[TenantStatus] = mapped_column(
        Enum(TenantStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=TenantStatus.ACTIVE,
        index=True,
    )

    # Move-in / move-out
    move_in_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    move_out_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    move_in_condition_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    move_out_condition_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    move_in_photos: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    move_out_photos: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Relationships
    user: Mapped["User | None"] = relationship("User", foreign_keys=[user_id])
    rented_property: Mapped["Property"] = relationship("Property")
    leases: Mapped[list["LeaseAgreement"]] = relationship(
        "LeaseAgreement", back_populates="tenant", cascade="all, delete-orphan"
    )
    rent_payments: Mapped[list["RentPayment"]] = relationship(
        "RentPayment", back_populates="tenant", cascade="all, delete-orphan"
    )

    @property
    def identity(self) -> TenantIdentity:
        if self.user_id is not None:
            return LinkedTenant(
                user_id=self.user_id,
                full_name=self.user.full_name if self.user else None,
                email=self.user.email if self.user else None,
                phone=self.user.phone if self.user else None,
            )
        return IndependentTenant(
            name=self.tenant_name or "",
            phone=self.tenant_phone,
            email=self.tenant_email,
        )

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, property_id={self.property_id}, status={self.status.value})>"
