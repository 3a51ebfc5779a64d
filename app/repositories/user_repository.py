from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.user import User
from app.models.property import Property
from app.models.booking import Booking


class UserRepository:
    """Repository for User model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_or_create_by_auth_id(self, auth_user_id: str) -> User:
        """
        Get user by auth_user_id or create if doesn't exist.

        This is called automatically when a user makes their first API
        request with a valid JWT from the identity service.

        Args:
            auth_user_id: User ID from the JWT 'sub' claim

        Returns:
            User object (either existing or newly created)
        """
        user = self.get_by_auth_id(auth_user_id)

        if not user:
            user = User(auth_user_id=auth_user_id)
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)

        return user

    def get_by_auth_id(self, auth_user_id: str) -> User | None:
        """Get user by auth_user_id"""
        return self.db.query(User).filter(User.auth_user_id == auth_user_id).first()

    def get_by_id(self, user_id: int) -> User | None:
        """Get user by internal ID"""
        return self.db.query(User).filter(User.id == user_id).first()

    def list_with_activity(
        self, search: str | None = None, limit: int = 100, offset: int = 0
    ) -> tuple[list[tuple[User, int, int]], int]:
        """
        List users with their property and booking counts.

        Returns:
            Tuple of ([(user, properties_count, bookings_count)], total)
        """
        property_counts = (
            self.db.query(Property.host_id.label("user_id"), func.count(Property.id).label("n"))
            .group_by(Property.host_id)
            .subquery()
        )
        booking_counts = (
            self.db.query(Booking.guest_id.label("user_id"), func.count(Booking.id).label("n"))
            .group_by(Booking.guest_id)
            .subquery()
        )

        query = (
            self.db.query(
                User,
                func.coalesce(property_counts.c.n, 0),
                func.coalesce(booking_counts.c.n, 0),
            )
            .outerjoin(property_counts, property_counts.c.user_id == User.id)
            .outerjoin(booking_counts, booking_counts.c.user_id == User.id)
        )

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                User.full_name.ilike(pattern) | User.email.ilike(pattern) | User.phone.ilike(pattern)
            )

        total = query.count()
        rows = query.order_by(User.created_at.desc(), User.id.desc()).limit(limit).offset(offset).all()
        return [(user, int(p), int(b)) for user, p, b in rows], total

    def count(self) -> int:
        return self.db.query(func.count(User.id)).scalar() or 0

    def update(self, user: User) -> User:
        """Update user profile or role"""
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        """Delete user (cascades to listings and bookings)"""
        self.db.delete(user)
        self.db.commit()
