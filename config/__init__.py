"""Application configuration utilities."""

from .settings import (
    DEFAULT_AI_TIMEOUT_SECONDS,
    DEFAULT_CURRENCY,
    DEFAULT_OPENAI_MODEL,
    AppSettings,
    Settings,
    configure_logging,
    get_app_settings,
    get_settings,
)

__all__ = [
    "DEFAULT_AI_TIMEOUT_SECONDS",
    "DEFAULT_CURRENCY",
    "DEFAULT_OPENAI_MODEL",
    "AppSettings",
    "Settings",
    "configure_logging",
    "get_app_settings",
    "get_settings",
]
