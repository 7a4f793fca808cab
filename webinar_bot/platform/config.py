from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from fastapi import Request
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "Webinar Referral Bot"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = True
    API_V1_PREFIX: str = "/api/v1"

    # ── Storage ─────────────────────────────────
    STORAGE_BACKEND: Literal["memory", "sql", "redis"] = "memory"
    DATABASE_URL: str = "sqlite+aiosqlite:///./webinar_bot.db"
    REDIS_URL: str = "redis://localhost:6379/0"
    USERS_STORAGE_KEY: str = "webinar-users"
    SETTINGS_STORAGE_KEY: str = "webinar-settings"

    # ── Links ───────────────────────────────────
    # Empty means "use the origin of the incoming request"
    PUBLIC_ORIGIN: Optional[str] = None
    CHANNEL_INVITE_BASE: str = "https://t.me/photoshop_school"
    DEFAULT_SOURCE_LABEL: str = "مستقیم"

    # ── Chat flow ───────────────────────────────
    MESSAGE_DELAY_SCALE: float = 1.0
    NOTIFICATION_TTL_MS: int = 3000
    # Sessions with no request and no open event stream for this long are dropped
    SESSION_IDLE_TTL_SECONDS: int = 1800

    # ── Rate limiting ───────────────────────────
    REGISTRATION_RATE_LIMIT: int = 10
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # ── Logging ─────────────────────────────────
    LOG_DIR: str = "logs"
    LOG_FILE: str = "webinar_bot.log"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings
