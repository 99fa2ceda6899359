"""
Configuration Module
====================

Centralized configuration management using Pydantic Settings.
Loads from environment variables with type validation and defaults.

Usage:
    from shieldpool.config import settings

    print(settings.environment)
    print(settings.pool.levels)
"""

from shieldpool.config.settings import (
    DEFAULT_ZERO_VALUE,
    DisclosureSettings,
    Environment,
    LedgerSettings,
    LogLevel,
    PoolSettings,
    Settings,
    VerifierMode,
    VerifierSettings,
    JWTSettings,
    get_settings,
)


# Global settings instance (singleton)
settings = get_settings()

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "Environment",
    "LogLevel",
    "VerifierMode",
    "PoolSettings",
    "LedgerSettings",
    "VerifierSettings",
    "DisclosureSettings",
    "JWTSettings",
    "DEFAULT_ZERO_VALUE",
]
