from datetime import date, datetime
from enum import Enum as PyEnum
from sqlalchemy import Integer, Numeric, ForeignKey, Enum, Date, DateTime, Text, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.property import Property


class BookingStatus(str, PyEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


CANCELLABLE_BOOKING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


class Booking(Base, TimestampMixin):
    """
    A guest's reservation request against a listing.

    Pricing columns are always written by the server from the property's
    monthly rent and the platform commission rate at booking time.
    """

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True
    )
    guest_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    host_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)

    # Pricing snapshot
    total_months: Mapped[int] = mapped_column(Integer, nullable=False)
    monthly_rent: Mapped[float] = mapped_column(Numeric(precision=15, scale=2), nullable=False)
    commission_rate: Mapped[float] = mapped_column(Numeric(precision=5, scale=2), nullable=False)
    subtotal: Mapped[float] = mapped_column(Numeric(precision=15, scale=2), nullable=False)
    service_fee: Mapped[float] = mapped_column(Numeric(precision=15, scale=2), nullable=False)
    total_amount: Mapped[float] = mapped_column(Numeric(precision=15, scale=2), nullable=False)

    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    cancellation_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelled_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    # Relationships
    guest: Mapped["User"] = relationship("User", back_populates="bookings", foreign_keys=[guest_id])
    host: Mapped["User"] = relationship("User", foreign_keys=[host_id])
    listing: Mapped["Property"] = relationship("Property")

    __table_args__ = (
        Index("ix_bookings_property_check_in", "property_id", "check_in"),
    )

    def days_until_check_in(self, today: date) -> int:
        return (self.check_in - today).days

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, property_id={self.property_id}, status={self.status.value})>"
