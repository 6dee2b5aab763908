"""Shared fixtures for shootwatch integration tests.

Provides an in-memory observer, a recording notification channel and a
snapshot store in a temporary directory, wired into a Poller so tests can
exercise full cycles without a Garden cluster or a webhook endpoint.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import pytest

from shootwatch.errors import ObservationError
from shootwatch.models.changes import ChangeEvent
from shootwatch.models.cluster import Cluster, WorkerGroup
from shootwatch.notifications.manager import DeliveryOutcome, NotificationChannel, Notifier
from shootwatch.poller import Poller
from shootwatch.snapshot.store import SnapshotStore

# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def make_group(
    name: str = "g1",
    minimum: int = 2,
    maximum: int = 5,
    image_name: str = "gardenlinux",
    image_version: str = "1443.3.0",
    version: str = "",
) -> WorkerGroup:
    return WorkerGroup(
        name=name,
        minimum=minimum,
        maximum=maximum,
        image_name=image_name,
        image_version=image_version,
        control_plane_version=version,
    )


def make_cluster(
    name: str = "A",
    version: str = "v1",
    groups: list[WorkerGroup] | None = None,
    seed: str = "aws-eu1",
) -> Cluster:
    return Cluster(
        name=name,
        control_plane_version=version,
        seed=seed,
        worker_groups={g.name: g for g in groups or []},
    )


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class FakeObserver:
    """Returns whatever ``clusters`` holds; raises ``error`` if set."""

    def __init__(self) -> None:
        self.clusters: dict[str, Cluster] = {}
        self.error: Exception | None = None
        self.calls = 0

    def set(self, *clusters: Cluster) -> None:
        self.clusters = {c.name: c for c in clusters}

    async def observe(self) -> Mapping[str, Cluster]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return dict(self.clusters)


class RecordingChannel(NotificationChannel):
    """Keeps every message; returns ``outcome`` for each send."""

    def __init__(self) -> None:
        self.messages: list[str] = []
        self.outcome = DeliveryOutcome.DELIVERED

    @property
    def channel_name(self) -> str:
        return "recording"

    async def send(self, message: str, event: ChangeEvent | None = None) -> DeliveryOutcome:
        self.messages.append(message)
        return self.outcome


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def snapshot_path(tmp_path: Path) -> Path:
    return tmp_path / "shoots.json"


@pytest.fixture()
def observer() -> FakeObserver:
    return FakeObserver()


@pytest.fixture()
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture()
def store(snapshot_path: Path) -> SnapshotStore:
    return SnapshotStore(str(snapshot_path))


@pytest.fixture()
def poller(observer: FakeObserver, store: SnapshotStore, channel: RecordingChannel) -> Poller:
    return Poller(observer=observer, store=store, notifier=Notifier(channel), interval=0.01)


@pytest.fixture()
def failing_observer(observer: FakeObserver) -> FakeObserver:
    observer.error = ObservationError("Listing shoots failed: forbidden")
    return observer
