from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RegistrySettings(BaseSettings):
    """Configuration for the registry service and CLI.

    Resolution order: programmatic, environment vars, .env files, defaults.
    """

    model_config = SettingsConfigDict(env_prefix="BLACKLIST_", env_file=".env", extra="ignore")

    store_backend: Literal["mongo", "memory"] = Field(
        default="mongo", description="Registry store backend: mongo | memory"
    )
    mongo_uri: str = Field(
        default="mongodb://localhost:27017", description="MongoDB connection URI"
    )
    mongo_db: str = Field(default="blacklist", description="MongoDB database name")
    mongo_collection: str = Field(
        default="blacklist", description="MongoDB collection holding the registry"
    )
    dataset_path: str | None = Field(
        default=None, description="JSON dataset used to seed the memory backend"
    )
    store_timeout_seconds: float | None = Field(
        default=10.0, description="Upper bound on a single registry read"
    )
    min_position: int = Field(default=0, description="Lowest position served publicly")
    max_position: int = Field(default=200, description="Highest position served publicly")
    status_limit: int = Field(
        default=5, description="Default number of entries returned by a status filter"
    )
    default_protocol: str = Field(
        default="current", description="Protocol version used when a client names none"
    )
    allowed_origins: str = Field(
        default="http://localhost:3006", description="Comma-separated CORS origins"
    )


_settings: Optional[RegistrySettings] = None


def get_settings() -> RegistrySettings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = RegistrySettings()
    return _settings


def set_settings(settings: RegistrySettings | None) -> None:
    """Replace the global settings instance (None resets to environment)."""
    global _settings
    _settings = settings
