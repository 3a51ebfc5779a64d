from sqlalchemy import String, Integer, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from app.models.base import Base, TimestampMixin
from app.models.role import UserRole

if TYPE_CHECKING:
    from app.models.property import Property
    from app.models.booking import Booking


class User(Base, TimestampMixin):
    """
    Tracks users from the external identity service.

    Only stores the JWT 'sub' plus profile fields needed for contact links;
    no auth credentials. Auto-created on first API request with valid JWT.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    auth_user_id: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=UserRole.USER,
    )

    # Relationships (deleting a user removes everything they host or booked)
    properties: Mapped[list["Property"]] = relationship(
        "Property",
        back_populates="host",
        cascade="all, delete-orphan",
        foreign_keys="Property.host_id",
    )
    bookings: Mapped[list["Booking"]] = relationship(
        "Booking",
        back_populates="guest",
        cascade="all, delete-orphan",
        foreign_keys="Booking.guest_id",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, auth_user_id='{self.auth_user_id}', role={self.role.value})>"
