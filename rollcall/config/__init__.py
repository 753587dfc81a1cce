"""Configuration loading for Rollcall.

This module provides the central configuration system for Rollcall.
Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from rollcall.config import get_settings

    settings = get_settings()
    years = settings.onboarding.child_safety_years
    engine = OnboardingEngine.from_settings(settings)
"""

from functools import lru_cache

from rollcall.config.loader import load_config
from rollcall.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{ROLLCALL_ENV}.toml (environment overrides)
    4. config/local.toml (per-site overrides)
    5. ROLLCALL_* environment variables (runtime overrides)

    The result is cached for the lifetime of the process.
    Call `get_settings.cache_clear()` to reload configuration.

    Returns:
        Settings instance with all configuration loaded and validated
    """
    # TOML layers feed the custom settings source; env vars still win
    set_toml_config(load_config())
    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration.

    Useful after editing the team matrix path, links or aliases on disk.

    Returns:
        Fresh Settings instance
    """
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
