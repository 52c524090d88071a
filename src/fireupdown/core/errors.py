"""
Structured error types for fireupdown.

The library raises its own errors only for its own faults: malformed
descriptors, bad configuration, and CLI targets that cannot be resolved.
Errors raised by caller-supplied actions are never wrapped; they reach the
caller of ``up``/``down`` as the very same exception object.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                     FireupdownError                          │
        │              (category, context, cause)                      │
        ├─────────────────────────────────────────────────────────────┤
        │                                                              │
        │  ConfigError       InvalidSystemError    TargetNotFoundError │
        │  (CONFIG)          (VALIDATION)          (LOADER)            │
        │                                                              │
        └─────────────────────────────────────────────────────────────┘

Examples:
    >>> error = InvalidSystemError("rc must be an int").with_context(rc="2")
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error.to_dict()["context"]
    {'rc': '2'}

Guardrails:
    ❌ DON'T: Wrap an action's exception in a FireupdownError
    ✅ DO: Let the original exception propagate to the caller

    ❌ DON'T: Swallow the original exception when translating
    ✅ DO: Pass it as cause= for error chaining
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories for classification and log routing."""

    CONFIG = "CONFIG"
    VALIDATION = "VALIDATION"
    LOADER = "LOADER"
    INTERNAL = "INTERNAL"


class FireupdownError(Exception):
    """
    Base exception for all errors raised by fireupdown itself.

    Subclasses set ``default_category``. Every instance carries:

    - **category:** ErrorCategory for classification
    - **context:** free-form metadata dict for logging
    - **cause:** optional underlying exception, chained as ``__cause__``
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = dict(context or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> FireupdownError:
        """
        Add context to this error (fluent API).

        Usage:
            raise InvalidSystemError("bad rc").with_context(rc=rc)
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class ConfigError(FireupdownError):
    """Settings could not be loaded or failed validation."""

    default_category = ErrorCategory.CONFIG


class InvalidSystemError(FireupdownError):
    """A system descriptor (or collection of them) is malformed."""

    default_category = ErrorCategory.VALIDATION


class TargetNotFoundError(FireupdownError):
    """A ``module:attribute`` target could not be imported or resolved."""

    default_category = ErrorCategory.LOADER

    def __init__(self, target: str, message: str | None = None, **kwargs: Any):
        self.target = target
        super().__init__(message or f"Systems target not found: {target}", **kwargs)


__all__ = [
    "ErrorCategory",
    "FireupdownError",
    "ConfigError",
    "InvalidSystemError",
    "TargetNotFoundError",
]
