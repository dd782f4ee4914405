"""Application configuration management."""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "forms-manager"
    app_version: str = "0.1.0"
    environment: str = "development"  # development, staging, production

    # Server
    host: str = "0.0.0.0"
    port: int = 3001

    # Database (empty URL selects the in-memory store)
    database_url: str = ""
    database_pool_size: int = 10
    database_max_overflow: int = 20

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    # AWS
    aws_region: str = "eu-west-2"
    aws_endpoint_url: Optional[str] = None

    # Audit events
    sns_topic_arn: Optional[str] = None
    publish_audit_events: bool = False

    # Legacy file-based definitions
    form_definition_bucket_name: Optional[str] = None
    form_directory: str = "forms"

    # Secrets
    public_key_for_secrets: Optional[str] = None

    # Versions
    max_versions: int = 100

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.publish_audit_events and not self.sns_topic_arn:
            raise ValueError("SNS_TOPIC_ARN is required when PUBLISH_AUDIT_EVENTS is enabled")
        if self.environment == "production" and not self.database_url:
            raise ValueError("DATABASE_URL is required in production")

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def async_database_url(self) -> str:
        """DATABASE_URL rewritten for the asyncpg driver."""
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return self.database_url


def load_settings_from_env() -> Settings:
    """Load settings from environment variables."""

    def get_bool(key: str, default: bool = False) -> bool:
        value = os.getenv(key, str(default)).lower()
        return value in ("true", "1", "yes")

    def get_int(key: str, default: int) -> int:
        return int(os.getenv(key, str(default)))

    return Settings(
        # App
        app_name=os.getenv("APP_NAME", "forms-manager"),
        app_version=os.getenv("APP_VERSION", "0.1.0"),
        environment=os.getenv("ENVIRONMENT", "development"),

        # Server
        host=os.getenv("HOST", "0.0.0.0"),
        port=get_int("PORT", 3001),

        # Database
        database_url=os.getenv("DATABASE_URL", ""),
        database_pool_size=get_int("DATABASE_POOL_SIZE", 10),
        database_max_overflow=get_int("DATABASE_MAX_OVERFLOW", 20),

        # Logging
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_format=os.getenv("LOG_FORMAT", "json"),

        # AWS
        aws_region=os.getenv("AWS_REGION", "eu-west-2"),
        aws_endpoint_url=os.getenv("AWS_ENDPOINT_URL") or None,

        # Audit events
        sns_topic_arn=os.getenv("SNS_TOPIC_ARN") or None,
        publish_audit_events=get_bool("PUBLISH_AUDIT_EVENTS", False),

        # Legacy file-based definitions
        form_definition_bucket_name=os.getenv("FORM_DEFINITION_BUCKET_NAME") or None,
        form_directory=os.getenv("FORM_DIRECTORY", "forms"),

        # Secrets
        public_key_for_secrets=os.getenv("PUBLIC_KEY_FOR_SECRETS") or None,

        # Versions
        max_versions=get_int("MAX_VERSIONS", 100),
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings_from_env()


def clear_settings_cache() -> None:
    """Clear settings cache (for testing)."""
    get_settings.cache_clear()
