"""Application configuration using Pydantic BaseSettings."""

import logging

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Constructed once at startup and passed explicitly into clients and services.
    """

    model_config = SettingsConfigDict(
        env_file="../.env", env_file_encoding="utf-8", extra="ignore", frozen=True
    )

    # Application Environment
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Server Configuration
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")

    # Publicly reachable base URL, used to build the provider callback URL
    public_base_url: str = Field(default="", alias="PUBLIC_BASE_URL")

    # Wavespeed (job provider)
    wavespeed_api_key: str = Field(default="", alias="WAVESPEED_API_KEY")
    wavespeed_api_url: str = Field(default="https://api.wavespeed.ai", alias="WAVESPEED_API_URL")
    wavespeed_create_job_path: str = Field(
        default="/v1/seedream4/generate", alias="WAVESPEED_CREATE_JOB_PATH"
    )

    # Airtable (record store)
    airtable_token: str = Field(default="", alias="AIRTABLE_TOKEN")
    airtable_base_id: str = Field(default="", alias="AIRTABLE_BASE_ID")
    airtable_api_url: str = Field(default="https://api.airtable.com/v0", alias="AIRTABLE_API_URL")
    airtable_table_recreator: str = Field(
        default="Pinterest Recreator", alias="AIRTABLE_TABLE_RECREATOR"
    )
    airtable_table_poses: str = Field(default="Pose Variations", alias="AIRTABLE_TABLE_POSES")

    # Transport-level timeout for every outbound HTTP call
    http_timeout_seconds: float = Field(default=30.0, alias="HTTP_TIMEOUT_SECONDS")

    @property
    def callback_url(self) -> str:
        """Webhook URL embedded in every job payload."""
        return f"{self.public_base_url.rstrip('/')}/wavespeed/callback"

    def missing_required(self) -> list[str]:
        """Return env var names of required values that are unset.

        Missing values never block startup. Requests depending on them fail at call time.
        """
        required = {
            "PUBLIC_BASE_URL": self.public_base_url,
            "WAVESPEED_API_KEY": self.wavespeed_api_key,
            "AIRTABLE_TOKEN": self.airtable_token,
            "AIRTABLE_BASE_ID": self.airtable_base_id,
        }
        return [name for name, value in required.items() if not value]


def configure_logging(settings: Settings) -> None:
    """Configure structlog based on application environment.

    - Production: JSON output for log aggregation
    - Development: Console output for human readability
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    if settings.app_env == "production":
        # JSON output for production (log aggregation)
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=True,
        )
    else:
        # Console output for development (human-readable)
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.dev.ConsoleRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=True,
        )


def warn_missing_config(settings: Settings) -> list[str]:
    """Log a warning for each unset required variable and return their names."""
    missing = settings.missing_required()
    logger = structlog.get_logger()
    for name in missing:
        logger.warning("config.missing", variable=name)
    return missing
