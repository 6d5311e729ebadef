"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from enum import StrEnum
from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class UpdatePolicy(StrEnum):
    """How repository updates treat a record's current group.

    REASSIGN matches the record by primary id only and stamps the caller's
    group onto it, which lets a group admin move a device, user or place
    between groups. SCOPED additionally requires the record to already
    belong to the caller's group.
    """

    REASSIGN = "reassign"
    SCOPED = "scoped"


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        GEOTRACE_DB_HOST: Database host (default: localhost)
        GEOTRACE_DB_PORT: Database port (default: 5432)
        GEOTRACE_DB_DATABASE: Database name (default: geotrace)
        GEOTRACE_DB_USERNAME: Database user (default: geotrace)
        GEOTRACE_DB_PASSWORD: Database password (required in production)
        GEOTRACE_DB_POOL_SIZE: Connections kept in the pool (default: 5)
        GEOTRACE_DB_MAX_OVERFLOW: Extra connections allowed under load (default: 0)
        GEOTRACE_DB_POOL_TIMEOUT: Seconds to wait for a free connection (default: 30)
        GEOTRACE_DB_ECHO: Log every SQL statement (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="GEOTRACE_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="geotrace", description="Database name")
    username: str = Field(default="geotrace", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_size: int = Field(
        default=5,
        description="Connections kept in the pool",
        ge=1,
        le=100,
    )
    max_overflow: int = Field(
        default=0,
        description="Connections allowed beyond pool_size",
        ge=0,
        le=100,
    )
    pool_timeout: float = Field(
        default=30.0,
        description="Seconds to wait for a pooled connection",
        gt=0,
    )
    echo: bool = Field(default=False, description="Log SQL statements")

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class StoreSettings(BaseSettings):
    """Tracking store layout and behaviour.

    Environment variables:
        GEOTRACE_STORE_USERS_COLLECTION: Users table name (default: users)
        GEOTRACE_STORE_DEVICES_COLLECTION: Devices table name (default: devices)
        GEOTRACE_STORE_EVENTS_COLLECTION: Events table name (default: events)
        GEOTRACE_STORE_PLACES_COLLECTION: Places table name (default: places)
        GEOTRACE_STORE_UPDATE_POLICY: reassign or scoped (default: reassign)
        GEOTRACE_STORE_CIRCLE_SEGMENTS: Vertices used to index a circle (default: 32)
    """

    model_config = SettingsConfigDict(
        env_prefix="GEOTRACE_STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    users_collection: str = Field(default="users", min_length=1)
    devices_collection: str = Field(default="devices", min_length=1)
    events_collection: str = Field(default="events", min_length=1)
    places_collection: str = Field(default="places", min_length=1)
    update_policy: UpdatePolicy = Field(
        default=UpdatePolicy.REASSIGN,
        description="Whether update may move a record between groups",
    )
    circle_segments: int = Field(
        default=32,
        description="Number of polygon vertices approximating a circle",
        ge=3,
        le=360,
    )

    @model_validator(mode="after")
    def validate_distinct_collections(self) -> "StoreSettings":
        """Validate that every entity gets its own table."""
        names = [
            self.users_collection,
            self.devices_collection,
            self.events_collection,
            self.places_collection,
        ]
        if len(set(names)) != len(names):
            raise ValueError(f"collection names must be distinct, got {names}")
        return self


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_store_settings() -> StoreSettings:
    """Get cached store settings."""
    return StoreSettings()
