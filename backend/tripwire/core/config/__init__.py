"""Configuration module for Tripwire.

Provides centralized configuration management.

Usage:
    from tripwire.core.config import settings

    # Access settings
    if interval < settings.MIN_TIMER_INTERVAL_SECONDS:
        ...
"""

from tripwire.core.config.settings import Settings

__all__ = [
    "Settings",
    "settings",
]

# Singleton settings instance
settings = Settings()
