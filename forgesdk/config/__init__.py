"""
Configuration access.

A single Settings instance is cached per process. Tests swap it with
init_settings() and clear it with reset_settings().
"""

from .settings import DEFAULT_TIMEOUT_MS, Settings

_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def init_settings(settings: Settings) -> Settings:
    """Install an explicit settings instance."""
    global _settings
    _settings = settings
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None


__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "Settings",
    "get_settings",
    "init_settings",
    "reset_settings",
]
