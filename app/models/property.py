from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Numeric, ForeignKey, Enum, Text, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.user import User


class PropertyStatus(str, PyEnum):
    """Moderation status of a listing"""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RejectionCategory(str, PyEnum):
    """Closed set of reasons an admin may pick when rejecting a listing"""

    INCOMPLETE_INFORMATION = "incomplete_information"
    POOR_QUALITY_IMAGES = "poor_quality_images"
    POLICY_VIOLATION = "policy_violation"
    MISLEADING_INFORMATION = "misleading_information"
    DUPLICATE_LISTING = "duplicate_listing"
    INAPPROPRIATE_CONTENT = "inappropriate_content"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()


class Property(Base, TimestampMixin):
    """
    A host-submitted rental listing.

    `price` is the monthly rent. New listings start in PENDING and only an
    administrator moves them to APPROVED or REJECTED.
    """

    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    host_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[float] = mapped_column(Numeric(precision=15, scale=2), nullable=False)
    property_type: Mapped[str] = mapped_column(String(50), nullable=False, default="apartment")
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Moderation
    status: Mapped[PropertyStatus] = mapped_column(
        Enum(PropertyStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=PropertyStatus.PENDING,
        index=True,
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    # Relationships
    host: Mapped["User"] = relationship(
        "User", back_populates="properties", foreign_keys=[host_id]
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title='{self.title}', status={self.status.value})>"
