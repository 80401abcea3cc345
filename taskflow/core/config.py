"""Configuration management for taskflow."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend selection
    backend: Literal["local", "remote"] = Field(
        default="local", description="Persistence strategy used by the task and category stores"
    )

    # Local storage configuration
    local_db_path: str = Field(default="./taskflow_data/storage.db", description="SQLite file backing local storage")
    tasks_storage_key: str = Field(default="taskflow_tasks", description="Key holding the serialized task list")
    categories_storage_key: str = Field(
        default="taskflow_categories", description="Key holding the serialized category list"
    )

    # PocketBase Configuration
    pocketbase_url: str = Field(default="http://127.0.0.1:8090", description="PocketBase server URL")
    pocketbase_admin_email: str | None = Field(default=None, description="PocketBase admin email for schema sync")
    pocketbase_admin_password: str | None = Field(
        default=None, description="PocketBase admin password for schema sync"
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment name reported to Logfire")

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # API Configuration
    API_TIMEOUT_SECONDS: int = 30

    # Entity defaults
    DEFAULT_CATEGORY: str = "general"
    DEFAULT_CATEGORY_COLOR: str = "#6B7280"  # neutral gray
    ALL_CATEGORIES: str = "all"

    # PocketBase collections
    TASK_COLLECTION: str = "task"
    CATEGORY_COLLECTION: str = "category"
    FULL_LIST_BATCH_SIZE: int = 200

    # Paths
    PACKAGE_ROOT: Path = Path(__file__).parent.parent
    SEED_DATA_DIR: Path = PACKAGE_ROOT / "data"
    TASK_SEED_FILE: Path = SEED_DATA_DIR / "tasks.json"
    CATEGORY_SEED_FILE: Path = SEED_DATA_DIR / "categories.json"


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
