"""Environment-driven configuration for the booking engine and API."""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from environment variables or a local .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: str = Field(default="dev", description="Deployment environment (dev/prod)")
    dynamodb_table_prefix: str = Field(
        default="",
        description="Prefix for DynamoDB table names. Defaults to roomrate-{environment}.",
    )
    aws_region: str = Field(default="eu-west-1", description="AWS region for DynamoDB")
    aws_max_attempts: int = Field(default=3, ge=1, description="botocore retry attempts")

    tax_rate: Decimal = Field(default=Decimal("0.12"), ge=0, description="Tax on the subtotal")
    service_fee: int = Field(default=25, ge=0, description="Fixed service fee per booking")
    cancellation_cutoff_hours: int = Field(
        default=24, ge=0, description="Hours before check-in after which cancelling is refused"
    )
    pricing_policy_file: str | None = Field(
        default=None, description="JSON file overriding the default rate modifiers"
    )

    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Allowed CORS origins",
    )
    payment_webhook_secret: str | None = Field(
        default=None,
        description="Shared secret the payment processor sends when confirming a payment",
    )
    log_level: str = Field(default="INFO", description="Root log level")

    @model_validator(mode="after")
    def _default_prefix(self) -> "Settings":
        if not self.dynamodb_table_prefix:
            self.dynamodb_table_prefix = f"roomrate-{self.environment}"
        return self


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the Settings object."""
    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached Settings instance (useful for tests)."""
    get_settings.cache_clear()
