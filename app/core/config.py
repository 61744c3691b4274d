"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (.env file).
"""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "ClubHub Membership & Attendance Engine"
    VERSION: str = "0.1.0"
    AUTHORS: List[str] = ["ClubHub maintainers"]
    PROJECT_URL: str = "https://github.com/clubhub/clubhub-core"

    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    # A full DATABASE_URL wins over the individual parts below.
    DATABASE_URL_OVERRIDE: Optional[str] = None
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = ""
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_DBNAME: str = "clubhub"

    # Identity tokens (issued by the external auth provider)
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Business rules
    TIMEZONE: str = "UTC"
    SESSION_CANCEL_LEAD_HOURS: float = 2.0
    LEAVE_NOTICE_HOURS: float = 2.0
    MAX_DOCUMENT_SIZE: int = 5 * 1024 * 1024

    # Replayed responses for Idempotency-Key retries
    IDEMPOTENCY_TTL_HOURS: int = 24

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}"
                f":{self.DATABASE_PORT}/{self.DATABASE_DBNAME}")


# Global settings instance
settings = Settings()
