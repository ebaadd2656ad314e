"""
Orchestrator - Models.

============================================================
RESPONSIBILITY
============================================================
Defines data models for the refresh orchestrator.

- Snapshot: immutable result of one refresh cycle
- OrchestratorState: lifecycle of the refresh loop
- EngineConfig: engine-wide configuration from environment

============================================================
"""

from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Tuple
import os

from core.constants import (
    DEFAULT_REFRESH_INTERVAL_SECONDS,
    HISTORY_CAPACITY,
)
from core.exceptions import ConfigurationError
from data_ingestion.ingestion_service import IngestionServiceConfig
from data_ingestion.types import DomainSet
from scoring_engine.composite_score import CompositeWeights, HealthLabel, SubScores


# ============================================================
# ORCHESTRATOR STATE
# ============================================================

class OrchestratorState(Enum):
    """Lifecycle of the refresh loop."""

    IDLE = "idle"
    """Loop not started, or between cycles."""

    REFRESHING = "refreshing"
    """A cycle is in flight."""

    STOPPED = "stopped"
    """Loop stopped; manual cycles are still allowed."""


# ============================================================
# SNAPSHOT
# ============================================================

@dataclass(frozen=True)
class Snapshot:
    """
    Immutable result of one completed refresh cycle.

    Snapshots are never mutated after publication; history and
    readers share the same instances.
    """

    timestamp: datetime
    score: int
    label: HealthLabel
    domains: DomainSet
    sub_scores: SubScores
    degraded_domains: Tuple[str, ...] = ()

    @property
    def is_degraded(self) -> bool:
        return bool(self.degraded_domains)

    def trend_point(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp.isoformat(), "score": self.score}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "score": self.score,
            "label": self.label.value,
            "sub_scores": self.sub_scores.to_dict(),
            "degraded_domains": list(self.degraded_domains),
            "domains": self.domains.to_dict(),
        }


# ============================================================
# CONFIGURATION
# ============================================================

@dataclass
class EngineConfig:
    """Configuration for the whole engine."""

    # Scheduling
    refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS
    """Seconds between automatic refresh cycles."""

    history_capacity: int = HISTORY_CAPACITY
    """Number of snapshots kept in history."""

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"

    # HTTP transport
    api_host: str = "0.0.0.0"
    api_port: int = 5000

    # Scoring
    weights: CompositeWeights = field(default_factory=CompositeWeights)

    # Collectors
    ingestion: IngestionServiceConfig = field(default_factory=IngestionServiceConfig)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Load configuration from environment variables."""
        try:
            return cls(
                refresh_interval_seconds=float(
                    os.getenv("REFRESH_INTERVAL_SECONDS", str(DEFAULT_REFRESH_INTERVAL_SECONDS))
                ),
                history_capacity=int(os.getenv("HISTORY_CAPACITY", str(HISTORY_CAPACITY))),
                log_level=os.getenv("LOG_LEVEL", "INFO"),
                log_format=os.getenv("LOG_FORMAT", "text"),
                api_host=os.getenv("API_HOST", "0.0.0.0"),
                api_port=int(os.getenv("API_PORT", "5000")),
                ingestion=IngestionServiceConfig.from_env(),
            )
        except ValueError as e:
            raise ConfigurationError(
                message=f"Invalid numeric setting in environment: {e}",
                cause=e,
            ) from e

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.refresh_interval_seconds <= 0:
            errors.append("refresh_interval_seconds must be positive")

        if self.history_capacity < 1:
            errors.append("history_capacity must be at least 1")

        if self.log_format not in ("text", "json"):
            errors.append("log_format must be 'text' or 'json'")

        if not 0 < self.api_port < 65536:
            errors.append("api_port must be between 1 and 65535")

        errors.extend(self.ingestion.validate())
        return errors

    def ensure_valid(self) -> None:
        """Raise ConfigurationError if the configuration is invalid."""
        errors = self.validate()
        if errors:
            raise ConfigurationError(
                message="Invalid engine configuration: " + "; ".join(errors),
            )
