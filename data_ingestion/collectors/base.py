"""
Data Ingestion - Base Collector.

============================================================
PURPOSE
============================================================
Abstract base class for all domain collectors.

============================================================
DESIGN PRINCIPLES
============================================================
- One external source per collector
- fetch() never raises; failures select the fallback record
- Single attempt per cycle, the next cycle is the retry
- No state carried between cycles

============================================================
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, Type, TypeVar
from uuid import uuid4

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from core.exceptions import (
    ConfigurationMissingError,
    MalformedPayloadError,
    SourceError,
    SourceUnavailableError,
)
from data_ingestion.types import CollectorConfig, IngestionSource


R = TypeVar("R")  # Domain record type
M = TypeVar("M", bound=BaseModel)


class BaseCollector(ABC, Generic[R]):
    """
    Abstract base class for domain collectors.

    ============================================================
    RESPONSIBILITIES
    ============================================================
    - Fetch one payload from the external source
    - Validate it against the source schema
    - Derive the fixed-shape domain record
    - Substitute the fallback record on any failure

    ============================================================
    LIFECYCLE
    ============================================================
    1. Initialize with config (and optional test transport)
    2. Call fetch() once per refresh cycle
    3. Always receive a complete domain record

    ============================================================
    """

    domain: str = ""

    def __init__(
        self,
        config: CollectorConfig,
        source: IngestionSource,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the collector.

        Args:
            config: Collector configuration
            source: Ingestion source identifier
            transport: Optional httpx transport (tests inject MockTransport)
        """
        self._config = config
        self._source = source
        self._transport = transport
        self._logger = logging.getLogger(f"collector.{source.value}")
        self._collector_instance = f"{source.value}_{uuid4().hex[:8]}"

    @property
    def source_name(self) -> str:
        """Get the source name."""
        return self._source.value

    @property
    def is_enabled(self) -> bool:
        """Check if collector is enabled."""
        return self._config.enabled

    @property
    def version(self) -> str:
        """Get collector version."""
        return self._config.version

    @property
    def timeout_seconds(self) -> float:
        return self._config.timeout_seconds

    # =========================================================
    # ABSTRACT METHODS - Must be implemented by subclasses
    # =========================================================

    @abstractmethod
    async def fetch_payload(self) -> Any:
        """
        Fetch the raw payload from the external source.

        Raises:
            SourceUnavailableError: On network or API errors
            MalformedPayloadError: On undecodable bodies
            ConfigurationMissingError: When a required credential is absent
        """
        pass

    @abstractmethod
    def parse(self, payload: Any) -> R:
        """
        Derive the domain record from a raw payload.

        Raises:
            MalformedPayloadError: On unexpected payload shape
        """
        pass

    @abstractmethod
    def fallback(self, reason: str = "") -> R:
        """Build the documented fallback record."""
        pass

    def unconfigured(self, error: ConfigurationMissingError) -> R:
        """
        Build the record returned when a credential is missing.

        Defaults to the fallback record; collectors with a more
        descriptive degraded record override this.
        """
        return self.fallback(error.message)

    # =========================================================
    # COLLECTION WORKFLOW
    # =========================================================

    async def fetch(self) -> R:
        """
        Run one collection for the current cycle.

        Never raises for source failures. Cancellation is not caught
        and propagates to the caller.

        Returns:
            Domain record, from the source or the fallback
        """
        if not self.is_enabled:
            self._logger.info(f"Collector {self.source_name} is disabled, using fallback")
            return self.fallback("collector disabled")

        try:
            payload = await self.fetch_payload()
            record = self.parse(payload)

        except ConfigurationMissingError as e:
            self._logger.warning(
                f"Collector {self.source_name} not configured: {e.to_log_format()}"
            )
            return self.unconfigured(e)

        except SourceError as e:
            self._logger.warning(
                f"Collector {self.source_name} degraded to fallback: {e.to_log_format()}"
            )
            return self.fallback(e.message)

        except Exception as e:
            self._logger.exception(f"Unexpected error in {self.source_name}")
            return self.fallback(f"Unexpected error: {e}")

        self._logger.debug(f"Collected {self.domain} record from {self.source_name}")
        return record

    # =========================================================
    # HTTP HELPERS
    # =========================================================

    async def _get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        GET a JSON document with a single attempt.

        Raises:
            SourceUnavailableError: On timeout, transport error or non-2xx
            MalformedPayloadError: If the body is not JSON
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(url, params=params, headers=headers or {})
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            raise SourceUnavailableError(
                message=f"HTTP {e.response.status_code}: {e.response.text[:200]}",
                source=self.source_name,
                status_code=e.response.status_code,
            )
        except httpx.TimeoutException as e:
            raise SourceUnavailableError(
                message=f"Request timeout: {e}",
                source=self.source_name,
                cause=e,
            )
        except httpx.RequestError as e:
            raise SourceUnavailableError(
                message=f"Request error: {e}",
                source=self.source_name,
                cause=e,
            )
        except (json.JSONDecodeError, ValueError) as e:
            raise MalformedPayloadError(
                message=f"Response is not valid JSON: {e}",
                source=self.source_name,
                cause=e,
            )

    def _validate(self, schema: Type[M], payload: Any) -> M:
        """Validate a JSON object against a schema."""
        try:
            return schema.model_validate(payload)
        except ValidationError as e:
            raise MalformedPayloadError(
                message=f"Unexpected payload shape: {e.error_count()} validation error(s)",
                source=self.source_name,
                cause=e,
            )

    def _validate_list(self, schema: Type[M], payload: Any) -> list:
        """Validate a JSON array whose items follow a schema."""
        try:
            return TypeAdapter(list[schema]).validate_python(payload)
        except ValidationError as e:
            raise MalformedPayloadError(
                message=f"Unexpected payload shape: {e.error_count()} validation error(s)",
                source=self.source_name,
                cause=e,
            )

    def get_health_status(self) -> Dict[str, Any]:
        """
        Get collector health status.

        Returns:
            Health status dictionary
        """
        return {
            "source": self.source_name,
            "domain": self.domain,
            "enabled": self.is_enabled,
            "version": self.version,
            "collector_instance": self._collector_instance,
        }
