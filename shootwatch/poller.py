"""Poll loop: one observe-diff-notify-persist cycle at a time.

Each cycle runs to completion before the next begins. Cancellation is
cooperative and only observed at the top of a cycle or during the sleep
between cycles, so a cycle can never notify without also persisting.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

import structlog

from shootwatch.diff.engine import compute_changes
from shootwatch.diff.migration import MigrationGuard
from shootwatch.errors import ObservationError, SnapshotWriteError
from shootwatch.models.changes import ChangeEvent
from shootwatch.models.cluster import Cluster
from shootwatch.notifications.manager import Notifier
from shootwatch.observability.metrics import (
    change_events_total,
    cycles_total,
    snapshot_clusters,
    snapshot_write_failures_total,
)
from shootwatch.snapshot.store import SnapshotStore

_log = structlog.get_logger(component="poller")

DEFAULT_INTERVAL_SECONDS = 60.0


class Observer(Protocol):
    async def observe(self) -> Mapping[str, Cluster]: ...


class PollerState(StrEnum):
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class CycleReport:
    """What one cycle did. ``events`` is empty for migration cycles."""

    events: tuple[ChangeEvent, ...]
    migrated: bool = False
    delivery_failures: int = 0
    persisted: bool = True


class Poller:
    """Orchestrates cycles against a single snapshot file.

    Args:
        observer: Anything with ``async observe() -> Mapping[str, Cluster]``
                  whose readiness barrier has already completed.
        store:    Snapshot store; loaded and saved once per cycle.
        notifier: Delivers one message per change event.
        guard:    Migration guard. Defaults to a fresh MigrationGuard.
        interval: Seconds to wait between cycles.
    """

    def __init__(
        self,
        observer: Observer,
        store: SnapshotStore,
        notifier: Notifier,
        guard: MigrationGuard | None = None,
        interval: float = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        self._observer = observer
        self._store = store
        self._notifier = notifier
        self._guard = guard or MigrationGuard()
        self._interval = interval
        self._state: PollerState | None = None

    @property
    def state(self) -> PollerState | None:
        """None until ``run()`` is entered."""
        return self._state

    async def run_cycle(self) -> CycleReport:
        """Run one complete cycle.

        Raises:
            ObservationError: the current shoot list could not be obtained.
                Nothing is loaded, notified or saved in that case.
        """
        observation = await self._observer.observe()
        previous = self._store.load()

        migrating = self._guard.should_migrate(previous)
        raw = compute_changes(previous, observation)
        for event in raw.events:
            change_events_total.labels(kind=event.kind.value).inc()
        result = self._guard.apply(previous, raw)

        failures = 0
        for event in result.events:
            outcome = await self._notifier.notify(event)
            if not outcome.ok:
                failures += 1

        persisted = True
        try:
            self._store.save(result.snapshot)
            snapshot_clusters.set(len(result.snapshot.clusters))
        except SnapshotWriteError as exc:
            # The next cycle diffs against the stale file and may repeat
            # these notifications.
            persisted = False
            snapshot_write_failures_total.inc()
            _log.error("snapshot_save_failed", path=exc.path, error=str(exc.cause))

        if migrating:
            _log.info(
                "snapshot_migration_finished",
                clusters=len(result.snapshot.clusters),
                persisted=persisted,
            )

        cycles_total.labels(outcome="migrated" if migrating else "ok").inc()
        _log.info(
            "cycle_completed",
            clusters=len(observation),
            events=len(result.events),
            migrated=migrating,
            delivery_failures=failures,
            persisted=persisted,
        )
        return CycleReport(
            events=result.events,
            migrated=migrating,
            delivery_failures=failures,
            persisted=persisted,
        )

    async def run(self, stop_event: asyncio.Event) -> None:
        """Repeat cycles until *stop_event* is set.

        The wait between cycles returns as soon as *stop_event* is set, so
        shutdown latency does not depend on the polling interval.

        Raises:
            ObservationError: propagated from a failed cycle; the loop is
                TERMINATED first.
        """
        self._state = PollerState.RUNNING
        _log.info("poller_started", interval=self._interval, snapshot=self._store.path)
        try:
            while not stop_event.is_set():
                try:
                    await self.run_cycle()
                except ObservationError as exc:
                    cycles_total.labels(outcome="observation_failed").inc()
                    _log.error("observation_failed", error=str(exc))
                    raise
                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=self._interval)
                except TimeoutError:
                    continue
        finally:
            self._state = PollerState.TERMINATED
            _log.info("poller_stopped")
