"""Configuration package."""

from ledger.config.settings import (
    AppSettings,
    AuthSettings,
    MongoSettings,
    Settings,
    check_secret_key,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "AuthSettings",
    "MongoSettings",
    "Settings",
    "check_secret_key",
    "get_settings",
    "validate_all_settings",
]
