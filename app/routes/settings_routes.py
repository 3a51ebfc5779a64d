from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_admin
from app.models.actor_context import ActorContext
from app.services.platform_settings_service import PlatformSettingsService
from app.schemas.settings_schemas import PlatformSettingsResponse, PlatformSettingsUpdate

router = APIRouter()


@router.get("", response_model=PlatformSettingsResponse)
def get_settings(db: Session = Depends(get_db)):
    """Public platform settings (commission rate, currency, cancellation notice)"""
    service = PlatformSettingsService(db)
    return service.get_settings()


@router.patch("", response_model=PlatformSettingsResponse)
def update_settings(
    data: PlatformSettingsUpdate,
    context: ActorContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Change the commission rate (admin only)"""
    service = PlatformSettingsService(db)
    return service.update_settings(data, context)
