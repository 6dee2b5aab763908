"""Tests for Shoot → Cluster conversion and the ShootObserver listing."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from shootwatch.errors import ObservationError
from shootwatch.models.cluster import WorkerGroup
from shootwatch.observer.shoots import SHOOT_GROUP, SHOOT_PLURAL, SHOOT_VERSION, ShootObserver, cluster_from_shoot


def _shoot(
    namespace: str = "garden-dev",
    name: str = "alpha",
    version: str = "1.30.2",
    seed: str | None = "aws-eu1",
    workers: list[dict] | None = None,
    status: dict | None = None,
) -> dict:
    spec: dict = {"kubernetes": {"version": version}, "provider": {"type": "aws", "workers": workers or []}}
    if seed is not None:
        spec["seedName"] = seed
    return {
        "apiVersion": "core.gardener.cloud/v1beta1",
        "kind": "Shoot",
        "metadata": {"namespace": namespace, "name": name},
        "spec": spec,
        "status": status or {},
    }


def _worker(name: str = "worker-a", minimum: int = 2, maximum: int = 5, version: str | None = None) -> dict:
    worker: dict = {
        "name": name,
        "minimum": minimum,
        "maximum": maximum,
        "machine": {"type": "m5.large", "image": {"name": "gardenlinux", "version": "1443.3.0"}},
    }
    if version is not None:
        worker["kubernetes"] = {"version": version}
    return worker


class TestClusterFromShoot:
    def test_full_conversion(self) -> None:
        shoot = _shoot(
            workers=[_worker(), _worker("worker-b", 0, 1, version="1.29.8")],
            status={
                "lastOperation": {"state": "Error", "description": "Flow failed"},
                "conditions": [
                    {"type": "APIServerAvailable", "status": "False", "message": "unreachable"},
                    {"type": "ControlPlaneHealthy", "status": "True", "message": "ok"},
                    {"type": "EveryNodeReady", "status": "Progressing", "message": "rolling"},
                    {"type": "SystemComponentsHealthy", "status": "Unknown", "message": "no data"},
                ],
            },
        )

        cluster = cluster_from_shoot(shoot)

        assert cluster.name == "garden-dev/alpha"
        assert cluster.control_plane_version == "1.30.2"
        assert cluster.seed == "aws-eu1"
        assert cluster.worker_groups == {
            "worker-a": WorkerGroup("worker-a", 2, 5, "gardenlinux", "1443.3.0", ""),
            "worker-b": WorkerGroup("worker-b", 0, 1, "gardenlinux", "1443.3.0", "1.29.8"),
        }
        assert cluster.last_operation_state == "Error"
        assert cluster.last_operation_description == "Flow failed"
        assert cluster.failing_conditions == (
            "APIServerAvailable - unreachable",
            "SystemComponentsHealthy - no data",
        )

    def test_minimal_shoot(self) -> None:
        cluster = cluster_from_shoot({"metadata": {"namespace": "garden-x", "name": "bare"}})

        assert cluster.name == "garden-x/bare"
        assert cluster.control_plane_version == ""
        assert cluster.seed == ""
        assert cluster.worker_groups == {}
        assert cluster.failing_conditions == ()

    def test_unscheduled_shoot_has_empty_seed(self) -> None:
        assert cluster_from_shoot(_shoot(seed=None)).seed == ""


class TestShootObserver:
    async def test_lists_all_pages(self) -> None:
        api = AsyncMock()
        api.list_cluster_custom_object.side_effect = [
            {"items": [_shoot(name="a")], "metadata": {"continue": "token-1"}},
            {"items": [_shoot(name="b")], "metadata": {}},
        ]
        observer = ShootObserver(api=api, request_timeout=7)

        observation = await observer.observe()

        assert sorted(observation) == ["garden-dev/a", "garden-dev/b"]
        first, second = api.list_cluster_custom_object.await_args_list
        assert first.args == (SHOOT_GROUP, SHOOT_VERSION, SHOOT_PLURAL)
        assert first.kwargs["_request_timeout"] == 7
        assert "_continue" not in first.kwargs
        assert second.kwargs["_continue"] == "token-1"

    async def test_api_failure_raises_observation_error(self) -> None:
        api = AsyncMock()
        api.list_cluster_custom_object.side_effect = RuntimeError("connection refused")

        with pytest.raises(ObservationError, match="connection refused"):
            await ShootObserver(api=api).observe()

    async def test_wait_ready_performs_first_listing(self) -> None:
        api = AsyncMock()
        api.list_cluster_custom_object.return_value = {"items": [], "metadata": {}}
        observer = ShootObserver(api=api)

        await observer.wait_ready()

        assert observer.ready
        api.list_cluster_custom_object.assert_awaited_once()

    async def test_wait_ready_propagates_failure(self) -> None:
        api = AsyncMock()
        api.list_cluster_custom_object.side_effect = RuntimeError("forbidden")
        observer = ShootObserver(api=api)

        with pytest.raises(ObservationError):
            await observer.wait_ready()
        assert not observer.ready

    async def test_observe_without_client_raises(self) -> None:
        with pytest.raises(ObservationError):
            await ShootObserver().observe()

    async def test_close_without_client_is_noop(self) -> None:
        await ShootObserver().close()
