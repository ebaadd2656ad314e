"""
Core Module Package.

This package contains the infrastructure components
that all other modules depend on.

Components:
- clock: Unified time abstraction
- exceptions: Custom exception hierarchy
- constants: Engine-wide constants
"""

from core.clock import ClockFactory, ClockProtocol, MockClock, SystemClock
from core.exceptions import (
    ConfigurationError,
    ConfigurationMissingError,
    EcosystemException,
    MalformedPayloadError,
    Severity,
    SourceError,
    SourceUnavailableError,
)


__all__ = [
    "ClockFactory",
    "ClockProtocol",
    "MockClock",
    "SystemClock",
    "ConfigurationError",
    "ConfigurationMissingError",
    "EcosystemException",
    "MalformedPayloadError",
    "Severity",
    "SourceError",
    "SourceUnavailableError",
]
