import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.models.actor_context import ActorContext
from app.repositories.admin_action_repository import AdminActionRepository
from app.repositories.platform_setting_repository import PlatformSettingRepository
from app.schemas.settings_schemas import PlatformSettingsUpdate
from app.core.exceptions import ForbiddenException

logger = logging.getLogger(__name__)

COMMISSION_RATE_KEY = "commission_rate"


class PlatformSettingsService:
    """Platform-wide configuration backed by the platform_settings table"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PlatformSettingRepository(db)
        self.action_repo = AdminActionRepository(db)

    def get_commission_rate(self) -> float:
        """Configured commission percent, falling back to DEFAULT_COMMISSION_RATE"""
        setting = self.repo.get(COMMISSION_RATE_KEY)
        if setting is None:
            return settings.DEFAULT_COMMISSION_RATE
        try:
            return float(setting.value)
        except ValueError:
            logger.warning(
                "Invalid commission_rate setting %r, using default %s",
                setting.value,
                settings.DEFAULT_COMMISSION_RATE,
            )
            return settings.DEFAULT_COMMISSION_RATE

    def get_settings(self) -> dict:
        return {
            "commission_rate": self.get_commission_rate(),
            "currency": settings.CURRENCY,
            "cancellation_notice_days": settings.CANCELLATION_NOTICE_DAYS,
        }

    def update_settings(self, data: PlatformSettingsUpdate, context: ActorContext) -> dict:
        """Update settings (ADMIN only) and record the change in the activity log"""
        if not context.is_admin():
            raise ForbiddenException("Only administrators can change platform settings")

        previous = self.get_commission_rate()
        self.repo.upsert(COMMISSION_RATE_KEY, str(data.commission_rate))
        self.action_repo.log(
            admin_id=context.user_id,
            action_type="update_settings",
            target_type="settings",
            details={"commission_rate": {"old": previous, "new": data.commission_rate}},
        )
        logger.info(
            "Admin %s changed commission rate from %s to %s",
            context.user_id,
            previous,
            data.commission_rate,
        )
        return self.get_settings()
