"""Configuration settings for the Ape Gym API."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_JWT_SECRET = "change-me"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 4000
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    # Database
    db_path: Path = Path("data.sqlite")

    # Auth
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 7
    bcrypt_rounds: int = 10

    # Password reset
    app_base_url: str = "http://localhost:5173"
    password_reset_expire_minutes: int = 60

    # SMTP (email falls back to the log when host/port/from are missing)
    smtp_host: str = ""
    smtp_port: int | None = None
    smtp_user: str = ""
    smtp_pass: str = ""
    smtp_from: str = ""
    smtp_secure: bool = False

    # Seeding
    seed_admin: bool = False
    seed_admin_email: str = "admin@apegym.local"
    seed_admin_password: str = "admin123"
    seed_templates: bool = True

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_login: str = "10/minute"
    rate_limit_register: str = "5/minute"
    rate_limit_password_reset: str = "5/minute"

    # Leaderboard
    leaderboard_window_days: int = 7
    leaderboard_limit: int = 50

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_port and self.smtp_from)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
