"""Runtime settings for fireupdown.

Configuration is environment-driven and validated by pydantic-settings.
Only ambient concerns live here (logging); the orchestration engine itself
takes no configuration.

Fields
──────
log_level : Structlog log level (``FIREUPDOWN_LOG_LEVEL``)
log_json  : JSON output; unset means auto-detect by TTY (``FIREUPDOWN_LOG_JSON``)
service   : Service name stamped on every log record (``FIREUPDOWN_SERVICE``)

Examples:
    >>> from fireupdown.core.settings import get_settings
    >>> settings = get_settings()
    >>> settings.log_level
    'INFO'
"""

from __future__ import annotations

import logging

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fireupdown.core.errors import ConfigError


class FireupdownSettings(BaseSettings):
    """Settings read from ``FIREUPDOWN_*`` environment variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="FIREUPDOWN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None
    service: str = "fireupdown"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value}")
        return level


_settings_cache: dict[str, FireupdownSettings] = {}


def get_settings(*, _force_reload: bool = False) -> FireupdownSettings:
    """Load, validate, and cache a :class:`FireupdownSettings` instance.

    Raises:
        ConfigError: when the environment holds invalid values.
    """
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    try:
        settings = FireupdownSettings()
    except ValidationError as exc:
        raise ConfigError("Invalid fireupdown settings", cause=exc).with_context(
            fields=[".".join(str(p) for p in err["loc"]) for err in exc.errors()]
        ) from exc

    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Drop the cached settings (tests, or after changing the environment)."""
    _settings_cache.clear()


__all__ = ["FireupdownSettings", "get_settings", "clear_settings_cache"]
