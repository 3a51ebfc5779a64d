from pydantic import BaseModel, Field


class PlatformSettingsResponse(BaseModel):
    commission_rate: float
    currency: str
    cancellation_notice_days: int


class PlatformSettingsUpdate(BaseModel):
    commission_rate: float = Field(..., ge=0, le=100, description="Percent applied to booking subtotals")
