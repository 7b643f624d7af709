"""Service settings for the testing maturity assessment.

All configuration is read from the environment using the
TESTING_MATURITY_ prefix (or a local .env file).
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from testing_maturity.core.tokens import MAX_TOKEN_BYTES, MIN_TOKEN_BYTES


class Settings(BaseSettings):
    """Settings for testing-maturity-assessment.

    Environment variable prefix: TESTING_MATURITY_
    """

    service_name: str = "testing-maturity-assessment"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://localhost:5432/testing_maturity"
    database_echo: bool = False
    create_tables_on_startup: bool = False

    # Maturity model document. None means the packaged reference model.
    model_path: Path | None = None

    # Report links
    public_base_url: str = "http://localhost:5000"
    report_token_bytes: int = Field(32, ge=MIN_TOKEN_BYTES, le=MAX_TOKEN_BYTES)

    # Result e-mail (Resend HTTP API). Empty key logs e-mails instead.
    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com/emails"
    email_from: str = "AI Testing <onboarding@resend.dev>"
    notify_timeout_seconds: float = 10.0

    # Admin listing. Empty credentials reject every admin request.
    admin_username: str = ""
    admin_password: str = ""

    model_config = SettingsConfigDict(
        env_prefix="TESTING_MATURITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        protected_namespaces=(),
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
