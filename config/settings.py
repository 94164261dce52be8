"""Centralised configuration handling for Spendio."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Mapping

import streamlit as st
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_AI_TIMEOUT_SECONDS = 45.0
DEFAULT_CURRENCY = "EUR"


def _streamlit_section(name: str) -> Mapping[str, Any] | None:
    """Return a mapping from Streamlit secrets for the given section."""

    try:
        if hasattr(st, "secrets") and name in st.secrets:
            section = st.secrets[name]
            if isinstance(section, Mapping):
                return section
            return dict(section)
    except Exception:  # pragma: no cover - accessing secrets may fail in tests
        return None
    return None


class Settings(BaseSettings):
    """AI service settings sourced from env vars and Streamlit secrets."""

    openai_api_key: str | None = None
    openai_base_url: str | None = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_timeout_seconds: float = DEFAULT_AI_TIMEOUT_SECONDS
    openai_max_tokens: int = 2000

    # Field names already carry the OPENAI_ prefix of their environment variables.
    model_config = SettingsConfigDict(extra="ignore")

    @property
    def ai_enabled(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def openai_client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"timeout": self.openai_timeout_seconds}
        if self.openai_api_key:
            kwargs["api_key"] = self.openai_api_key
        if self.openai_base_url:
            kwargs["base_url"] = self.openai_base_url
        return kwargs


class AppSettings(BaseSettings):
    """Application-wide preferences (display currency, log level)."""

    currency: str = DEFAULT_CURRENCY
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="SPENDIO_", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Load and cache AI service settings."""

    overrides: dict[str, Any] = {}
    secrets_section = _streamlit_section("openai")
    if secrets_section:
        overrides = {
            "openai_api_key": secrets_section.get("api_key")
            or secrets_section.get("OPENAI_API_KEY"),
            "openai_base_url": secrets_section.get("api_base"),
            "openai_model": secrets_section.get("model"),
            "openai_timeout_seconds": secrets_section.get("timeout"),
        }

    return Settings(**{k: v for k, v in overrides.items() if v is not None})


@lru_cache
def get_app_settings() -> AppSettings:
    """Load and cache application preferences."""

    overrides: dict[str, Any] = {}
    secrets_section = _streamlit_section("spendio")
    if secrets_section:
        overrides = {
            "currency": secrets_section.get("currency"),
            "log_level": secrets_section.get("log_level"),
        }

    return AppSettings(**{k: v for k, v in overrides.items() if v is not None})


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the root logger."""

    resolved = (level or get_app_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, resolved, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
