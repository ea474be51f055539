"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "placement_portal"
    mongodb_timeout_ms: int = 5000

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 30  # 30 days

    # Roles allowed to moderate (admin always included)
    staff_roles: List[str] = ["admin", "coordinator", "teacher"]

    # Notifications inbox page size
    notification_list_limit: int = 50

    # Bootstrap admin (leave empty to disable)
    bootstrap_admin_email: str = ""
    bootstrap_admin_password: str = ""
    bootstrap_admin_name: str = "Administrator"

    # App
    debug: bool = True
    log_level: str = "INFO"
    log_json: bool = False
    cors_origins: List[str] = ["*"]

    @property
    def bootstrap_admin_enabled(self) -> bool:
        """True when both bootstrap admin credentials are configured"""
        return bool(self.bootstrap_admin_email and self.bootstrap_admin_password)

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
