from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List
import os


class Settings(BaseSettings):
    """Global app settings loaded from environment.
    - Keep defaults light for dev.
    - Override via .env or real env vars.
    """

    APP_NAME: str = "bloodlink_api"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True

    # Database name is taken from the URI path; falls back to DEFAULT_DB_NAME
    MONGODB_URI: str = "mongodb://localhost:27017/bloodlink"
    DEFAULT_DB_NAME: str = "bloodlink"

    # Raw CORS string from env (comma-separated); parsed via cors_origins property
    CORS_ORIGINS: str | None = None

    # Firebase Admin SDK service account. Push delivery is skipped when unset.
    FIREBASE_CREDENTIALS_FILE: str | None = None
    # VAPID keys for browser PushSubscription objects. Web Push is skipped when unset.
    VAPID_PRIVATE_KEY: str | None = None
    VAPID_CLAIMS_SUB: str = "mailto:admin@bloodlink.local"
    # Opened by the browser when a donor clicks the notification
    PUSH_CLICK_URL: str = "/"

    # Rotating log files are written here
    LOG_DIR: str = "logs"

    # slowapi limit for request submissions, per client IP
    REQUEST_RATE_LIMIT: str = "30/minute"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def cors_origins(self) -> List[str]:
        """Return CORS origins as a list, parsing comma-separated env string."""
        raw = self.CORS_ORIGINS or os.getenv("CORS_ORIGINS", "") or ""
        return [o.strip() for o in raw.split(",") if o.strip()]

    @property
    def mongodb_db_name(self) -> str:
        """Database name from the URI path, without query params."""
        name = self.MONGODB_URI.rsplit("/", 1)[-1].split("?")[0]
        return name or self.DEFAULT_DB_NAME


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
