"""
Application configuration.

Settings are read from the environment once and cached. Call
``load_dotenv()`` before the first ``get_app_settings()`` to pick up a
local ``.env`` file.
"""

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass
class AppSettings:
    """Application settings loaded from environment."""

    # Storage
    database_url: str = "sqlite:///:memory:"
    database_echo: bool = False
    storage_key_prefix: str = "sports_"

    # Identity
    admin_code: str = "SPORTS-ADMIN"

    # Access tokens
    secret_key: str = "kitcheckout-dev-secret-change-me"
    access_token_expire_minutes: int = 60

    # Undo window for destructive admin actions
    undo_window_seconds: float = 5.0

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Load settings from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            database_echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
            storage_key_prefix=os.getenv("STORAGE_KEY_PREFIX", cls.storage_key_prefix),
            admin_code=os.getenv("ADMIN_CODE", cls.admin_code),
            secret_key=os.getenv("SECRET_KEY", cls.secret_key),
            access_token_expire_minutes=int(
                os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", cls.access_token_expire_minutes)
            ),
            undo_window_seconds=float(os.getenv("UNDO_WINDOW_SECONDS", cls.undo_window_seconds)),
            environment=os.getenv("KITCHECKOUT_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )


@lru_cache()
def get_app_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings.from_env()
