"""
Core Module - Exceptions.

============================================================
RESPONSIBILITY
============================================================
Defines the exception hierarchy for the aggregation engine.

- Separates fatal configuration errors from source failures
- Source failures never leave a collector; they select a fallback
- Includes context for debugging

============================================================
EXCEPTION HIERARCHY
============================================================
EcosystemException (base)
├── ConfigurationError
└── SourceError
    ├── SourceUnavailableError
    ├── MalformedPayloadError
    └── ConfigurationMissingError

============================================================
"""

from enum import Enum
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# ============================================================
# SEVERITY LEVELS
# ============================================================

class Severity(Enum):
    """Exception severity levels for logging."""

    LOW = "low"
    """Minor issue, informational."""

    MEDIUM = "medium"
    """Moderate issue, requires attention."""

    HIGH = "high"
    """Serious issue, the engine cannot run as configured."""


# ============================================================
# BASE EXCEPTION
# ============================================================

class EcosystemException(Exception):
    """
    Base exception for all engine errors.

    All exceptions carry:
    - severity: for log level selection
    - context: for debugging
    - recoverable: whether the cycle can continue
    - timestamp: when the error occurred
    """

    default_severity: Severity = Severity.MEDIUM
    default_recoverable: bool = True

    def __init__(
        self,
        message: str,
        severity: Optional[Severity] = None,
        context: Optional[Dict[str, Any]] = None,
        recoverable: Optional[bool] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)

        self.message = message
        self.severity = severity or self.default_severity
        self.context = context or {}
        self.recoverable = recoverable if recoverable is not None else self.default_recoverable
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

        if cause:
            self.context["cause_type"] = type(cause).__name__
            self.context["cause_message"] = str(cause)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for logging."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "severity": self.severity.value,
            "recoverable": self.recoverable,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def to_log_format(self) -> str:
        """Format exception for structured logging."""
        line = (
            f"[{self.severity.value.upper()}] {type(self).__name__}: {self.message}"
            f" | recoverable={self.recoverable}"
        )
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            line = f"{line} | {ctx_str}"
        return line


# ============================================================
# CONFIGURATION ERRORS
# ============================================================

class ConfigurationError(EcosystemException):
    """Invalid engine configuration. Raised at startup only."""

    default_severity = Severity.HIGH
    default_recoverable = False

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        actual_value: Optional[Any] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if config_key:
            context["config_key"] = config_key
        if actual_value is not None:
            context["actual_value"] = str(actual_value)[:100]

        super().__init__(message, context=context, **kwargs)


# ============================================================
# SOURCE ERRORS
# ============================================================

class SourceError(EcosystemException):
    """
    Base class for a collector's external source failures.

    Collectors catch every SourceError and substitute a fallback
    record; these exceptions are for internal logging only.
    """

    default_severity = Severity.MEDIUM
    default_recoverable = True

    def __init__(
        self,
        message: str,
        source: str = "",
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        context["source"] = source
        super().__init__(message, context=context, **kwargs)
        self.source = source


class SourceUnavailableError(SourceError):
    """Network failure, timeout or non-success response."""

    def __init__(
        self,
        message: str,
        source: str = "",
        status_code: Optional[int] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        if status_code is not None:
            context["status_code"] = status_code
        super().__init__(message, source=source, context=context, **kwargs)
        self.status_code = status_code


class MalformedPayloadError(SourceError):
    """Response body did not match the expected shape."""


class ConfigurationMissingError(SourceError):
    """A credential the source requires is not configured."""

    default_severity = Severity.LOW

    def __init__(
        self,
        message: str,
        source: str = "",
        setting: str = "",
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        if setting:
            context["setting"] = setting
        super().__init__(message, source=source, context=context, **kwargs)
        self.setting = setting


__all__ = [
    "Severity",
    "EcosystemException",
    "ConfigurationError",
    "SourceError",
    "SourceUnavailableError",
    "MalformedPayloadError",
    "ConfigurationMissingError",
]
