from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # JWT Authentication (shared with the identity service)
    SECRET_KEY: str

    # Application
    APP_NAME: str = "NyumbaLink Rental API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = ""
    CORS_ALLOW_CREDENTIALS: bool = True

    # Marketplace rules
    CURRENCY: str = "TZS"
    DEFAULT_COMMISSION_RATE: float = 10.0  # percent, overridable via platform settings
    CANCELLATION_NOTICE_DAYS: int = 7
    DEFAULT_RENT_DUE_DAY: int = 1
    DEFAULT_LATE_FEE_GRACE_PERIOD: int = 5
    LEASE_EXPIRY_WARNING_DAYS: int = 30

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS from comma-separated string"""
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
