"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

import re
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Unquoted PostgreSQL identifiers: letters, digits, underscores; no leading digit.
_IDENTIFIER_PREFIX = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DatabaseSettings(BaseSettings):
    """Database cluster connection settings.

    The same cluster hosts the control-plane database (user profiles) and one
    database per tenant. Tenant connection URIs are derived from these values
    by replacing the database component.

    Environment variables:
        AI_FARM_DB_HOST: Database host (default: localhost)
        AI_FARM_DB_PORT: Database port (default: 5432)
        AI_FARM_DB_DATABASE: Control-plane database name (default: ai_farm)
        AI_FARM_DB_USERNAME: Database user (default: ai_farm)
        AI_FARM_DB_PASSWORD: Database password (required in production)
        AI_FARM_DB_POOL_SIZE: Connections kept open per engine (default: 5)
        AI_FARM_DB_POOL_MAX_OVERFLOW: Extra connections per engine (default: 5)
        AI_FARM_DB_CONNECT_TIMEOUT: Connection handshake timeout in seconds (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="AI_FARM_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="ai_farm", description="Control-plane database")
    username: str = Field(default="ai_farm", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_size: int = Field(
        default=5,
        description="Connections kept open per engine",
        ge=1,
        le=100,
    )
    pool_max_overflow: int = Field(
        default=5,
        description="Connections allowed beyond pool_size per engine",
        ge=0,
        le=100,
    )
    connect_timeout: float = Field(
        default=10.0,
        description="Seconds to wait for a connection handshake",
        gt=0,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Keep a single engine below the PostgreSQL default connection cap."""
        total = self.pool_size + self.pool_max_overflow
        if total > 100:
            raise ValueError(
                f"pool_size + pool_max_overflow ({total}) must be <= 100"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class TenancySettings(BaseSettings):
    """Per-tenant database naming and provisioning settings.

    Environment variables:
        AI_FARM_TENANCY_DATABASE_PREFIX: Prefix of every tenant database name
            (default: AI_FARM_user_)
        AI_FARM_TENANCY_PROVISION_DATABASES: Create missing tenant databases on
            first use (default: true)
    """

    model_config = SettingsConfigDict(
        env_prefix="AI_FARM_TENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_prefix: str = Field(
        default="AI_FARM_user_",
        description="Prefix of every tenant database name",
        min_length=1,
        max_length=32,
    )
    provision_databases: bool = Field(
        default=True,
        description="Create missing tenant databases on first use",
    )

    @field_validator("database_prefix")
    @classmethod
    def validate_database_prefix(cls, value: str) -> str:
        """Reject prefixes that would need quoting as an identifier."""
        if not _IDENTIFIER_PREFIX.match(value):
            raise ValueError(
                f"database_prefix must be a valid identifier prefix, got {value!r}"
            )
        return value


class AuthSettings(BaseSettings):
    """Bearer token validation settings.

    Environment variables:
        AI_FARM_AUTH_JWT_SECRET: Shared secret used to sign tokens
        AI_FARM_AUTH_JWT_ALGORITHM: Signing algorithm (default: HS256)
        AI_FARM_AUTH_USER_ID_CLAIM: Claim carrying the user id (default: id)
    """

    model_config = SettingsConfigDict(
        env_prefix="AI_FARM_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Shared secret used to sign tokens",
    )
    jwt_algorithm: str = Field(default="HS256", description="Signing algorithm")
    user_id_claim: str = Field(default="id", description="Claim carrying the user id")


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="AI_FARM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="AI Farm API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Minimum log level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        description="Origins allowed to call the API from a browser",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard level names in any case."""
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def tenancy(self) -> TenancySettings:
        """Get tenancy settings."""
        return get_tenancy_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy settings."""
    return TenancySettings()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached authentication settings."""
    return AuthSettings()
