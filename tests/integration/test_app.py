"""Integration tests for the application bootstrap and its exit codes."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from shootwatch import app as app_module
from shootwatch.app import ShootwatchApp, main
from shootwatch.models.config import NotificationConfig, ShootwatchConfig, SnapshotConfig
from shootwatch.notifications.manager import Notifier
from shootwatch.observer.shoots import ShootObserver
from shootwatch.poller import PollerState

from .conftest import RecordingChannel

_URL = "https://hooks.example.test/services/T000/B000/XXXX"

_SHOOT = {
    "metadata": {"namespace": "garden-dev", "name": "alpha"},
    "spec": {
        "seedName": "aws-eu1",
        "kubernetes": {"version": "1.30.2"},
        "provider": {
            "workers": [
                {
                    "name": "worker-a",
                    "minimum": 2,
                    "maximum": 5,
                    "machine": {"image": {"name": "gardenlinux", "version": "1443.3.0"}},
                }
            ]
        },
    },
}


def _config(tmp_path: Path) -> ShootwatchConfig:
    return ShootwatchConfig(
        notifications=NotificationConfig(webhook_url=_URL),
        snapshot=SnapshotConfig(path=str(tmp_path / "shoots.json")),
    )


def _observer(side_effect: object = None) -> ShootObserver:
    api = AsyncMock()
    if side_effect is not None:
        api.list_cluster_custom_object.side_effect = side_effect
    else:
        api.list_cluster_custom_object.return_value = {"items": [_SHOOT], "metadata": {}}
    return ShootObserver(api=api)


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep structlog's global configuration untouched across tests.
    monkeypatch.setattr(app_module, "setup_logging", lambda level: None)


@pytest.fixture()
def channel(monkeypatch: pytest.MonkeyPatch) -> RecordingChannel:
    recording = RecordingChannel()
    monkeypatch.setattr(app_module, "build_notifier", lambda config: Notifier(recording))
    return recording


async def test_app_runs_a_cycle_and_stops(tmp_path: Path, channel: RecordingChannel) -> None:
    app = ShootwatchApp(_config(tmp_path), observer=_observer())
    await app.start()

    task = asyncio.create_task(app.run())
    while not channel.messages:
        await asyncio.sleep(0.01)
    app.request_shutdown()
    await asyncio.wait_for(task, timeout=2.0)
    await app.stop()

    assert channel.messages == ["new cluster: garden-dev/alpha in seed aws-eu1"]
    assert app.poller is not None
    assert app.poller.state is PollerState.TERMINATED
    persisted = json.loads((tmp_path / "shoots.json").read_text())
    assert persisted["clusters"]["garden-dev/alpha"]["workerGroups"]["worker-a"]["imageName"] == "gardenlinux"


async def test_stop_before_start_is_safe(tmp_path: Path) -> None:
    await ShootwatchApp(_config(tmp_path)).stop()


async def test_readiness_failure_exits_1(
    tmp_path: Path, channel: RecordingChannel, monkeypatch: pytest.MonkeyPatch
) -> None:
    failing = _observer(side_effect=RuntimeError("forbidden"))
    monkeypatch.setattr(app_module, "ShootObserver", lambda **kwargs: failing)

    with pytest.raises(SystemExit) as exc_info:
        await main(_config(tmp_path))

    assert exc_info.value.code == 1
    assert channel.messages == []


async def test_observation_failure_after_start_exits_1(
    tmp_path: Path, channel: RecordingChannel, monkeypatch: pytest.MonkeyPatch
) -> None:
    # The readiness listing succeeds, the first cycle's listing fails.
    flaky = _observer(side_effect=[{"items": [_SHOOT], "metadata": {}}, RuntimeError("etcd timeout")])
    monkeypatch.setattr(app_module, "ShootObserver", lambda **kwargs: flaky)

    with pytest.raises(SystemExit) as exc_info:
        await main(_config(tmp_path))

    assert exc_info.value.code == 1
    assert not (tmp_path / "shoots.json").exists()
