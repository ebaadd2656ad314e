"""
Orchestrator - Refresh Orchestrator.

============================================================
RESPONSIBILITY
============================================================
Drives refresh cycles and publishes snapshots.

- Runs a cycle on a fixed interval and on manual trigger
- Coalesces triggers while a cycle is in flight
- Scores the DomainSet and builds an immutable Snapshot
- Publishes the snapshot as current and appends it to history
- Notifies subscribers after publication

============================================================
CONCURRENCY
============================================================
Single event loop. The in-flight flag is set before the first
await of a cycle, so two triggers can never both start one.
Only this class writes the current snapshot and the history.

============================================================
"""

import asyncio
import inspect
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

from core.clock import ClockFactory, ClockProtocol
from data_ingestion.ingestion_service import IngestionService
from orchestrator.history import SnapshotHistory
from orchestrator.models import EngineConfig, OrchestratorState, Snapshot
from scoring_engine.composite_score import CompositeScorer


SnapshotCallback = Callable[[Snapshot], Any]


class RefreshOrchestrator:
    """
    Scheduler and publisher for ecosystem snapshots.

    ============================================================
    USAGE
    ============================================================
    ```python
    orchestrator = RefreshOrchestrator.from_config(EngineConfig.from_env())
    await orchestrator.start()
    ...
    orchestrator.trigger_manual_refresh()
    snapshot = await orchestrator.wait_for_cycle(timeout=30)
    ...
    await orchestrator.stop()
    ```

    ============================================================
    """

    def __init__(
        self,
        ingestion: IngestionService,
        scorer: Optional[CompositeScorer] = None,
        history: Optional[SnapshotHistory] = None,
        refresh_interval_seconds: float = 300,
        clock: Optional[ClockProtocol] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            ingestion: Service running the five collectors
            scorer: Composite scorer (canonical weights by default)
            history: Snapshot history (capacity 10 by default)
            refresh_interval_seconds: Seconds between automatic cycles
            clock: Clock for snapshot timestamps
        """
        self._ingestion = ingestion
        self._scorer = scorer if scorer is not None else CompositeScorer()
        self._history = history if history is not None else SnapshotHistory()
        self._refresh_interval = refresh_interval_seconds
        self._clock = clock if clock is not None else ClockFactory.get_clock()
        self._logger = logging.getLogger("orchestrator.refresh")

        self._current: Optional[Snapshot] = None
        self._in_flight = False
        self._state = OrchestratorState.IDLE
        self._subscribers: List[SnapshotCallback] = []

        self._cycle_event = asyncio.Event()
        self._stop_event = asyncio.Event()
        self._loop_task: Optional[asyncio.Task] = None
        self._manual_task: Optional[asyncio.Task] = None

        self._cycles_completed = 0
        self._cycles_coalesced = 0
        self._last_cycle_at: Optional[datetime] = None
        self._last_cycle_duration: Optional[float] = None

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[ClockProtocol] = None,
    ) -> "RefreshOrchestrator":
        """Build an orchestrator and its collaborators from configuration."""
        config.ensure_valid()
        return cls(
            ingestion=IngestionService(config.ingestion, transport=transport),
            scorer=CompositeScorer(config.weights),
            history=SnapshotHistory(config.history_capacity),
            refresh_interval_seconds=config.refresh_interval_seconds,
            clock=clock,
        )

    # =========================================================
    # PROPERTIES
    # =========================================================

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    @property
    def is_refreshing(self) -> bool:
        return self._in_flight

    @property
    def refresh_interval_seconds(self) -> float:
        return self._refresh_interval

    @property
    def scorer(self) -> CompositeScorer:
        return self._scorer

    # =========================================================
    # READ API
    # =========================================================

    def get_current_snapshot(self) -> Optional[Snapshot]:
        """Latest published snapshot, or None before the first cycle."""
        return self._current

    def get_history(self) -> Tuple[Snapshot, ...]:
        """Retained snapshots, oldest first, as an immutable copy."""
        return self._history.snapshots()

    @property
    def history_capacity(self) -> int:
        return self._history.capacity

    def get_status(self) -> Dict[str, Any]:
        return {
            "state": self._state.value,
            "running": self.is_running,
            "refreshing": self._in_flight,
            "refresh_interval_seconds": self._refresh_interval,
            "cycles_completed": self._cycles_completed,
            "cycles_coalesced": self._cycles_coalesced,
            "last_cycle_at": self._last_cycle_at.isoformat() if self._last_cycle_at else None,
            "last_cycle_duration_seconds": self._last_cycle_duration,
            "history_size": len(self._history),
            "ingestion": self._ingestion.get_health_status(),
        }

    # =========================================================
    # SUBSCRIPTIONS
    # =========================================================

    def subscribe(self, callback: SnapshotCallback) -> None:
        """Register a callback invoked with each new snapshot."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: SnapshotCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    async def wait_for_cycle(self, timeout: Optional[float] = None) -> Optional[Snapshot]:
        """
        Wait for the next cycle to complete.

        Args:
            timeout: Maximum seconds to wait (None waits forever)

        Returns:
            The new snapshot, or None if the timeout elapsed
        """
        event = self._cycle_event
        try:
            await asyncio.wait_for(event.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return None
        return self._current

    # =========================================================
    # CYCLE EXECUTION
    # =========================================================

    async def run_cycle(self) -> Optional[Snapshot]:
        """
        Run one refresh cycle.

        Returns:
            The published snapshot, or None if a cycle was already
            in flight and this trigger was coalesced into it
        """
        if self._in_flight:
            self._cycles_coalesced += 1
            self._logger.info("Refresh already in flight, trigger coalesced")
            return None

        self._in_flight = True
        previous_state = self._state
        self._state = OrchestratorState.REFRESHING
        started = self._clock.timestamp()

        try:
            domains = await self._ingestion.run_collection_cycle()
            result = self._scorer.score(domains)

            snapshot = Snapshot(
                timestamp=self._clock.now(),
                score=result.score,
                label=result.label,
                domains=domains,
                sub_scores=result.sub_scores,
                degraded_domains=domains.degraded_domains,
            )

            self._publish(snapshot)
            self._last_cycle_duration = self._clock.timestamp() - started

            self._logger.info(
                f"Snapshot published | score={snapshot.score} | label={snapshot.label.value}"
                + (f" | degraded={','.join(snapshot.degraded_domains)}" if snapshot.is_degraded else "")
            )

            await self._notify(snapshot)
            return snapshot
        finally:
            self._in_flight = False
            if self._state == OrchestratorState.REFRESHING:
                self._state = previous_state

    def _publish(self, snapshot: Snapshot) -> None:
        self._current = snapshot
        self._history.append(snapshot)
        self._cycles_completed += 1
        self._last_cycle_at = snapshot.timestamp

        # Wake current waiters; later waiters get a fresh event
        event = self._cycle_event
        self._cycle_event = asyncio.Event()
        event.set()

    async def _notify(self, snapshot: Snapshot) -> None:
        for callback in list(self._subscribers):
            try:
                result = callback(snapshot)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                self._logger.error(f"Subscriber {callback!r} failed: {e}", exc_info=True)

    # =========================================================
    # TRIGGERS
    # =========================================================

    def trigger_manual_refresh(self) -> bool:
        """
        Schedule a cycle now without waiting for it.

        Must be called from within the running event loop.

        Returns:
            True if a cycle was scheduled, False if one is already
            in flight or pending
        """
        if self._in_flight or (self._manual_task is not None and not self._manual_task.done()):
            self._cycles_coalesced += 1
            self._logger.info("Manual refresh ignored, cycle already in flight")
            return False

        self._logger.info("Manual refresh scheduled")
        self._manual_task = asyncio.get_running_loop().create_task(self._run_logged_cycle())
        return True

    async def _run_logged_cycle(self) -> Optional[Snapshot]:
        try:
            return await self.run_cycle()
        except Exception as e:
            self._logger.error(f"Refresh cycle failed: {e}", exc_info=True)
            return None

    # =========================================================
    # LIFECYCLE
    # =========================================================

    async def start(self) -> None:
        """Start the interval loop. The first cycle runs immediately."""
        if self.is_running:
            return

        self._logger.info(f"Starting refresh loop | interval={self._refresh_interval}s")
        self._stop_event = asyncio.Event()
        self._state = OrchestratorState.IDLE
        self._loop_task = asyncio.get_running_loop().create_task(self._run_loop())

    async def stop(self) -> None:
        """Stop the interval loop, cancelling any in-flight cycle."""
        self._stop_event.set()

        for task in (self._loop_task, self._manual_task):
            if task is None or task.done():
                continue
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        self._loop_task = None
        self._manual_task = None
        self._state = OrchestratorState.STOPPED
        self._logger.info("Refresh loop stopped")

    async def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            await self._run_logged_cycle()

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._refresh_interval)
            except asyncio.TimeoutError:
                continue
