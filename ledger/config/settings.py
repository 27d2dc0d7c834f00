"""
Configuration Management for Personal Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SECRET_KEY = "change-me-development-only-secret"


class AuthSettings(BaseSettings):
    """Token signing and password hashing configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    secret_key: str = Field(
        default=DEFAULT_SECRET_KEY,
        min_length=16,
        description="Server secret used to sign identity tokens"
    )
    algorithm: str = Field(
        default="HS256",
        pattern="^HS(256|384|512)$",
        description="JWT signing algorithm"
    )
    token_expire_minutes: int = Field(
        default=60 * 24,
        ge=1,
        description="How long an identity token stays valid"
    )
    password_schemes: str = Field(
        default="pbkdf2_sha256",
        description="Comma-separated passlib schemes, first one is used for new hashes"
    )

    @property
    def password_schemes_list(self) -> list[str]:
        """Get password schemes as a list."""
        return [s.strip() for s in self.password_schemes.split(",") if s.strip()]


class MongoSettings(BaseSettings):
    """MongoDB storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MONGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    url: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string"
    )
    database_name: str = Field(
        default="personal_ledger",
        description="Database holding principals and ledger entries"
    )
    entries_collection: str = Field(
        default="transactions",
        description="Collection for ledger entries"
    )
    principals_collection: str = Field(
        default="users",
        description="Collection for registered principals"
    )
    server_selection_timeout_ms: int = Field(
        default=5000,
        ge=100,
        description="How long to wait for a reachable server"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )

    # Storage
    storage_backend: str = Field(
        default="memory",
        pattern="^(memory|mongo)$",
        description="Which storage backend to wire at startup"
    )

    # Summaries
    uncategorized_label: str = Field(
        default="Uncategorized",
        min_length=1,
        description="Category used for entries without one"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def is_production(self) -> bool:
        return self.app_environment.lower() == "production"


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def auth(self) -> AuthSettings:
        return AuthSettings()

    @property
    def mongo(self) -> MongoSettings:
        return MongoSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def check_secret_key(auth: AuthSettings, app: AppSettings) -> bool:
    """
    Log a warning when production runs on the development secret.

    Returns True when the secret is acceptable for the environment.
    """
    if auth.secret_key == DEFAULT_SECRET_KEY and app.is_production:
        structlog.get_logger("ledger.config").warning(
            "development_secret_key",
            environment=app.app_environment,
            detail="AUTH_SECRET_KEY is not set; identity tokens are signed with the development secret",
        )
        return False
    return True


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("auth", "mongo", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
