"""Application configuration via environment variables."""

from pydantic import field_validator
from pydantic_settings import BaseSettings

from journal.utils.constants import INITIAL_STATUSES


class Settings(BaseSettings):
    database_url: str = "sqlite:///./journal.db"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]  # Vite dev server

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440  # 24 hours

    # Journal
    default_trade_status: str = "running"  # status given to a freshly added position
    default_risk_percent: float = 1.0
    timezone: str = "UTC"  # day boundaries for period filters

    model_config = {"env_prefix": "TJ_", "env_file": ".env"}

    @field_validator("default_trade_status")
    @classmethod
    def _validate_initial_status(cls, value: str) -> str:
        if value not in INITIAL_STATUSES:
            allowed = ", ".join(INITIAL_STATUSES)
            raise ValueError(f"must be one of: {allowed}")
        return value


settings = Settings()
