"""Application configuration via Pydantic Settings v2."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "TallySalesGateway"
    app_env: Literal["development", "testing", "staging", "production"] = "development"
    debug: bool = False

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # API
    api_host: str = "0.0.0.0"  # noqa: S104
    api_port: int = Field(default=3000, validation_alias="PORT")
    api_key: str = ""
    cors_origins: list[str] = []

    # Firestore
    google_application_credentials: str = "firebase-service-account.json"
    firestore_project_id: str | None = None
    firestore_database: str = "(default)"
    firestore_emulator_host: str | None = None

    # Collections
    sales_collection: str = "sales"
    item_details_collection: str = "itemDetails"
    ledger_details_collection: str = "ledgerDetails"

    @field_validator("sales_collection", "item_details_collection", "ledger_details_collection")
    @classmethod
    def validate_collection_name(cls, v: str) -> str:
        """Validate a Firestore collection id.

        Args:
            v: Collection name.

        Returns:
            Validated collection name.

        Raises:
            ValueError: If the name is empty or contains a path separator.
        """
        if not v or "/" in v:
            raise ValueError(
                f"Invalid collection name '{v}'. Collection ids must be non-empty "
                "and must not contain '/'"
            )
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.app_env == "testing"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def uses_emulator(self) -> bool:
        """Check if Firestore calls go to a local emulator."""
        return bool(self.firestore_emulator_host)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
