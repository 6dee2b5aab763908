"""Gardener Shoot observer backed by kubernetes-asyncio.

Lists ``core.gardener.cloud/v1beta1`` Shoots across all namespaces of the
Garden cluster and converts each into a Cluster. Every call is a full
re-list; nothing is cached between cycles.
"""

from __future__ import annotations

from typing import Any

import structlog

from shootwatch.errors import ObservationError
from shootwatch.models.cluster import Cluster, WorkerGroup

_log = structlog.get_logger(component="observer.shoots")

SHOOT_GROUP = "core.gardener.cloud"
SHOOT_VERSION = "v1beta1"
SHOOT_PLURAL = "shoots"

_PAGE_SIZE = 500
# Condition statuses that do not indicate a problem.
_HEALTHY_CONDITION_STATUSES = frozenset({"True", "Progressing"})


class ShootObserver:
    """Point-in-time Shoot listing with a one-time readiness barrier.

    Args:
        kubeconfig_path: Path to a Garden kubeconfig. Empty means in-cluster
                         service-account configuration.
        request_timeout: Per-request timeout in seconds.
        api:             Optional pre-built ``CustomObjectsApi``; when given,
                         no client configuration is loaded (used by tests).
    """

    def __init__(
        self,
        kubeconfig_path: str = "",
        request_timeout: int = 30,
        api: Any | None = None,
    ) -> None:
        self._kubeconfig_path = kubeconfig_path
        self._request_timeout = request_timeout
        self._api = api
        self._api_client: Any | None = None
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    async def wait_ready(self) -> None:
        """Configure the client and complete one successful listing.

        Must succeed once before the poll loop's first cycle.

        Raises:
            ObservationError: credentials could not be loaded or the first
                listing failed.
        """
        if self._api is None:
            await self._configure_client()
        await self.observe()
        self._ready = True
        _log.info("shoot_observer_ready")

    async def observe(self) -> dict[str, Cluster]:
        """List all Shoots and return them keyed by ``<namespace>/<name>``.

        Raises:
            ObservationError: the listing call failed.
        """
        if self._api is None:
            raise ObservationError("Shoot observer used before wait_ready()")

        clusters: dict[str, Cluster] = {}
        continue_token = ""
        try:
            while True:
                kwargs: dict[str, Any] = {"limit": _PAGE_SIZE, "_request_timeout": self._request_timeout}
                if continue_token:
                    kwargs["_continue"] = continue_token
                page = await self._api.list_cluster_custom_object(
                    SHOOT_GROUP,
                    SHOOT_VERSION,
                    SHOOT_PLURAL,
                    **kwargs,
                )
                for item in page.get("items", []):
                    cluster = cluster_from_shoot(item)
                    clusters[cluster.name] = cluster
                continue_token = (page.get("metadata") or {}).get("continue") or ""
                if not continue_token:
                    break
        except ObservationError:
            raise
        except Exception as exc:
            raise ObservationError(f"Listing shoots failed: {exc}") from exc

        _log.debug("shoots_listed", count=len(clusters))
        return clusters

    async def close(self) -> None:
        """Close the underlying ApiClient connection pool, if one was created."""
        if self._api_client is None:
            return
        try:
            await self._api_client.close()
        except Exception as exc:
            _log.debug("api_client_close_failed", error=str(exc))
        self._api_client = None

    async def _configure_client(self) -> None:
        # Import lazily so tests that inject ``api`` never touch client config.
        from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]
        from kubernetes_asyncio import config as k8s_config  # type: ignore[import-untyped]

        try:
            if self._kubeconfig_path:
                await k8s_config.load_kube_config(config_file=self._kubeconfig_path)
                _log.info("k8s client configured from kubeconfig", path=self._kubeconfig_path)
            else:
                _log.info("Use in cluster configuration. This might not work.")
                k8s_config.load_incluster_config()
        except Exception as exc:
            raise ObservationError(f"Loading Garden credentials failed: {exc}") from exc

        self._api_client = k8s_client.ApiClient()
        self._api = k8s_client.CustomObjectsApi(self._api_client)


def cluster_from_shoot(shoot: dict[str, Any]) -> Cluster:
    """Convert a raw Shoot object into a Cluster.

    Missing optional fields become empty strings or zero; a Shoot without
    ``spec.provider.workers`` yields a cluster with no worker groups.
    """
    metadata = shoot.get("metadata") or {}
    spec = shoot.get("spec") or {}
    status = shoot.get("status") or {}
    last_operation = status.get("lastOperation") or {}

    name = f"{metadata.get('namespace', '')}/{metadata.get('name', '')}"
    workers = (spec.get("provider") or {}).get("workers") or []
    groups: dict[str, WorkerGroup] = {}
    for worker in workers:
        group = _worker_group_from_worker(worker)
        groups[group.name] = group

    return Cluster(
        name=name,
        control_plane_version=(spec.get("kubernetes") or {}).get("version"),
        seed=spec.get("seedName"),
        worker_groups=groups,
        last_operation_state=last_operation.get("state"),
        last_operation_description=last_operation.get("description"),
        failing_conditions=_failing_conditions(status.get("conditions") or []),
    )


def _worker_group_from_worker(worker: dict[str, Any]) -> WorkerGroup:
    image = (worker.get("machine") or {}).get("image") or {}
    return WorkerGroup(
        name=str(worker.get("name", "")),
        minimum=int(worker.get("minimum") or 0),
        maximum=int(worker.get("maximum") or 0),
        image_name=image.get("name"),
        image_version=image.get("version"),
        control_plane_version=(worker.get("kubernetes") or {}).get("version"),
    )


def _failing_conditions(conditions: list[dict[str, Any]]) -> tuple[str, ...]:
    return tuple(
        f"{condition.get('type', '')} - {condition.get('message', '')}"
        for condition in conditions
        if condition.get("status") not in _HEALTHY_CONDITION_STATUSES
    )
