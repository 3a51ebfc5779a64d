import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.models.actor_context import ActorContext
from app.models.admin_action import AdminAction
from app.models.booking import BookingStatus
from app.models.property import PropertyStatus
from app.models.role import UserRole
from app.models.user import User
from app.repositories.admin_action_repository import AdminActionRepository
from app.repositories.booking_repository import BookingRepository
from app.repositories.property_repository import PropertyRepository
from app.repositories.tenant_repository import TenantRepository
from app.repositories.user_repository import UserRepository
from app.core.exceptions import ForbiddenException, NotFoundException, ValidationException

logger = logging.getLogger(__name__)

# Bookings whose service fee counts as platform revenue
REVENUE_BOOKING_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.COMPLETED})

ACTIVITY_LOG_LIMIT = 100


def user_to_dict(user: User, properties_count: int, bookings_count: int) -> dict:
    return {
        "id": user.id,
        "auth_user_id": user.auth_user_id,
        "full_name": user.full_name,
        "email": user.email,
        "phone": user.phone,
        "role": user.role,
        "properties_count": properties_count,
        "bookings_count": bookings_count,
        "created_at": user.created_at,
    }


class AdminService:
    """Administrator-only platform management"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.property_repo = PropertyRepository(db)
        self.booking_repo = BookingRepository(db)
        self.tenant_repo = TenantRepository(db)
        self.action_repo = AdminActionRepository(db)

    def _require_admin(self, context: ActorContext) -> None:
        if not context.is_admin():
            raise ForbiddenException("Administrator access required")

    def log_action(
        self,
        context: ActorContext,
        action_type: str,
        target_type: Optional[str] = None,
        target_id: Optional[int] = None,
        details: Optional[dict] = None,
    ) -> AdminAction:
        return self.action_repo.log(
            admin_id=context.user_id,
            action_type=action_type,
            target_type=target_type,
            target_id=target_id,
            details=details,
        )

    def get_dashboard_stats(self, context: ActorContext) -> dict:
        """Platform-wide counters; revenue is the service fees of confirmed and completed bookings"""
        self._require_admin(context)
        properties = self.property_repo.count_by_status()
        bookings = self.booking_repo.count_by_status()

        return {
            "total_users": self.user_repo.count(),
            "total_properties": sum(properties.values()),
            "pending_properties": properties[PropertyStatus.PENDING],
            "approved_properties": properties[PropertyStatus.APPROVED],
            "rejected_properties": properties[PropertyStatus.REJECTED],
            "total_bookings": sum(bookings.values()),
            "pending_bookings": bookings[BookingStatus.PENDING],
            "confirmed_bookings": bookings[BookingStatus.CONFIRMED],
            "completed_bookings": bookings[BookingStatus.COMPLETED],
            "cancelled_bookings": bookings[BookingStatus.CANCELLED],
            "total_revenue": round(self.booking_repo.total_service_fees(REVENUE_BOOKING_STATUSES), 2),
            "active_tenants": self.tenant_repo.count_active(),
        }

    def list_users(
        self,
        context: ActorContext,
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[dict], int]:
        self._require_admin(context)
        rows, total = self.user_repo.list_with_activity(search=search, limit=limit, offset=offset)
        return [user_to_dict(user, p, b) for user, p, b in rows], total

    def _get_user(self, user_id: int) -> User:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundException(f"User {user_id} not found")
        return user

    def get_user(self, user_id: int, context: ActorContext) -> dict:
        self._require_admin(context)
        user = self._get_user(user_id)
        return user_to_dict(user, len(user.properties), len(user.bookings))

    def update_user_role(self, user_id: int, role: UserRole, context: ActorContext) -> dict:
        """
        Change a user's role.

        Raises:
            ValidationException: Admin tries to demote themselves
        """
        self._require_admin(context)
        user = self._get_user(user_id)
        if user.id == context.user_id and role != UserRole.ADMIN:
            raise ValidationException("Administrators cannot remove their own admin role")

        previous = user.role
        user.role = role
        user = self.user_repo.update(user)

        self.log_action(
            context,
            "update_user_role",
            target_type="user",
            target_id=user.id,
            details={"old_role": previous.value, "new_role": role.value},
        )
        logger.info(
            "Admin %s changed role of user %s: %s -> %s",
            context.user_id,
            user.id,
            previous.value,
            role.value,
        )
        return user_to_dict(user, len(user.properties), len(user.bookings))

    def delete_user(self, user_id: int, context: ActorContext) -> dict:
        """
        Permanently delete a user together with their listings and bookings.

        Raises:
            ValidationException: Admin tries to delete themselves
        """
        self._require_admin(context)
        if user_id == context.user_id:
            raise ValidationException("Administrators cannot delete their own account")

        user = self._get_user(user_id)
        details = {"auth_user_id": user.auth_user_id, "email": user.email}
        self.user_repo.delete(user)

        self.log_action(context, "delete_user", target_type="user", target_id=user_id, details=details)
        logger.warning("Admin %s deleted user %s", context.user_id, user_id)
        return {"message": "User deleted", "removed_user_id": user_id}

    def get_activity_log(
        self,
        context: ActorContext,
        action_type: Optional[str] = None,
        admin_id: Optional[int] = None,
        target_type: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[AdminAction]:
        """Newest-first admin actions, at most ACTIVITY_LOG_LIMIT"""
        self._require_admin(context)
        return self.action_repo.get_with_filters(
            action_type=action_type,
            admin_id=admin_id,
            target_type=target_type,
            start=start,
            end=end,
            limit=ACTIVITY_LOG_LIMIT,
        )
