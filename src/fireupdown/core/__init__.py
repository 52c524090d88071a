"""Core primitives: errors, structured logging, and settings."""

from fireupdown.core.errors import (
    ConfigError,
    ErrorCategory,
    FireupdownError,
    InvalidSystemError,
    TargetNotFoundError,
)
from fireupdown.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)
from fireupdown.core.settings import FireupdownSettings, clear_settings_cache, get_settings

__all__ = [
    # Errors
    "ErrorCategory",
    "FireupdownError",
    "ConfigError",
    "InvalidSystemError",
    "TargetNotFoundError",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
    # Settings
    "FireupdownSettings",
    "get_settings",
    "clear_settings_cache",
]
