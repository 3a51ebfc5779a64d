from typing import Optional
from sqlalchemy.orm import Session
from app.models.platform_setting import PlatformSetting


class PlatformSettingRepository:
    """Repository for key/value platform settings"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[PlatformSetting]:
        return self.db.query(PlatformSetting).filter(PlatformSetting.key == key).first()

    def get_all(self) -> dict[str, str]:
        return {row.key: row.value for row in self.db.query(PlatformSetting).all()}

    def upsert(self, key: str, value: str) -> PlatformSetting:
        """Create or overwrite a setting"""
        setting = self.get(key)
        if setting is None:
            setting = PlatformSetting(key=key, value=value)
            self.db.add(setting)
        else:
            setting.value = value
        self.db.commit()
        self.db.refresh(setting)
        return setting
