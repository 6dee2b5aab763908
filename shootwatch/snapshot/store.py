"""JSON file persistence for snapshots.

The store holds exactly one snapshot: the state the poll loop last saw and
already notified about. Reads never fail (a missing or unreadable file
yields an empty snapshot); writes replace the file atomically so a crash
mid-write can never leave a truncated snapshot behind.

Current layout::

    {"schemaVersion": 2,
     "clusters": {"<ns>/<name>": {"controlPlaneVersion": ..., "seed": ...,
                                  "lastOperation": {...},
                                  "workerGroups": {"<group>": {...}}}}}

An object without a ``schemaVersion`` key is a bare map of cluster name to
entry. It is read as the legacy layout (flat single-worker fields) when any
entry lacks a populated ``workerGroups`` map, and as the current layout
otherwise.
"""

from __future__ import annotations

import json
import os
import tempfile
from typing import Any

import structlog

from shootwatch.errors import SnapshotWriteError
from shootwatch.models.cluster import (
    LEGACY_SCHEMA_VERSION,
    SCHEMA_VERSION,
    Cluster,
    Snapshot,
    WorkerGroup,
)

_log = structlog.get_logger(component="snapshot.store")

_FILE_MODE = 0o600


class SnapshotStore:
    """Loads and atomically saves the snapshot file at ``path``.

    Assumes a single reader/writer; there is no locking.
    """

    def __init__(self, path: str) -> None:
        if not path:
            raise ValueError("Snapshot path must not be empty")
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def load(self) -> Snapshot:
        """Return the persisted snapshot, or an empty one.

        First run (no file) and corruption are treated identically: both
        produce an empty current-version snapshot. Corruption is logged.
        """
        if not os.path.exists(self._path):
            _log.info("snapshot_file_missing", path=self._path)
            return Snapshot()
        try:
            with open(self._path, encoding="utf-8") as fh:
                raw = json.load(fh)
            snapshot = snapshot_from_dict(raw)
        except (OSError, ValueError, TypeError, AttributeError, RecursionError) as exc:
            _log.error("snapshot_load_failed", path=self._path, error=str(exc))
            return Snapshot()
        _log.debug(
            "snapshot_loaded",
            path=self._path,
            clusters=len(snapshot.clusters),
            schema_version=snapshot.schema_version,
        )
        return snapshot

    def save(self, snapshot: Snapshot) -> None:
        """Serialise *snapshot* and atomically replace the file.

        The payload is written to a temporary file in the target directory,
        flushed to disk and renamed over the old file.

        Raises:
            SnapshotWriteError: the file could not be written or replaced.
        """
        payload = json.dumps(snapshot_to_dict(snapshot), indent=2, sort_keys=True)
        directory = os.path.dirname(os.path.abspath(self._path))
        tmp_path = ""
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{os.path.basename(self._path)}.",
                suffix=".tmp",
                dir=directory,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp_path, _FILE_MODE)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise SnapshotWriteError(self._path, exc) from exc
        _log.debug("snapshot_saved", path=self._path, clusters=len(snapshot.clusters))


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    """Render *snapshot* in the current layout, whatever its loaded version."""
    return {
        "schemaVersion": SCHEMA_VERSION,
        "clusters": {name: _cluster_to_dict(cluster) for name, cluster in snapshot.clusters.items()},
    }


def _cluster_to_dict(cluster: Cluster) -> dict[str, Any]:
    return {
        "controlPlaneVersion": cluster.control_plane_version,
        "seed": cluster.seed,
        "lastOperation": {
            "state": cluster.last_operation_state,
            "description": cluster.last_operation_description,
            "failingConditions": list(cluster.failing_conditions),
        },
        "workerGroups": {
            name: {
                "minimum": group.minimum,
                "maximum": group.maximum,
                "imageName": group.image_name,
                "imageVersion": group.image_version,
                "controlPlaneVersion": group.control_plane_version,
            }
            for name, group in cluster.worker_groups.items()
        },
    }


def snapshot_from_dict(raw: object) -> Snapshot:
    """Parse either layout into a Snapshot.

    Raises:
        ValueError: the document is not a JSON object of the expected shape.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"snapshot must be a JSON object, got {type(raw).__name__}")

    if "schemaVersion" not in raw:
        if all(_has_worker_groups(entry) for entry in raw.values()):
            clusters = {name: _cluster_from_dict(name, entry) for name, entry in raw.items()}
            return Snapshot(clusters=clusters, schema_version=SCHEMA_VERSION)
        clusters = {name: _legacy_cluster_from_dict(name, entry) for name, entry in raw.items()}
        return Snapshot(clusters=clusters, schema_version=LEGACY_SCHEMA_VERSION)

    version = int(raw["schemaVersion"])
    if version > SCHEMA_VERSION:
        _log.warning("snapshot_schema_newer_than_supported", version=version, supported=SCHEMA_VERSION)
    entries = raw.get("clusters") or {}
    if not isinstance(entries, dict):
        raise ValueError("snapshot 'clusters' must be a JSON object")
    clusters = {name: _cluster_from_dict(name, entry) for name, entry in entries.items()}
    return Snapshot(clusters=clusters, schema_version=version)


def _cluster_from_dict(name: str, entry: dict[str, Any]) -> Cluster:
    last_op = entry.get("lastOperation") or {}
    groups = entry.get("workerGroups") or {}
    return Cluster(
        name=name,
        control_plane_version=entry.get("controlPlaneVersion"),
        seed=entry.get("seed"),
        last_operation_state=last_op.get("state"),
        last_operation_description=last_op.get("description"),
        failing_conditions=tuple(last_op.get("failingConditions") or ()),
        worker_groups={group_name: _group_from_dict(group_name, g) for group_name, g in groups.items()},
    )


def _group_from_dict(name: str, entry: dict[str, Any]) -> WorkerGroup:
    return WorkerGroup(
        name=name,
        minimum=int(entry.get("minimum") or 0),
        maximum=int(entry.get("maximum") or 0),
        image_name=entry.get("imageName"),
        image_version=entry.get("imageVersion"),
        control_plane_version=entry.get("controlPlaneVersion"),
    )


def _legacy_cluster_from_dict(name: str, entry: dict[str, Any]) -> Cluster:
    """Read a pre-worker-group entry.

    Only the cluster-level fields survive; the flat single-worker fields
    have no group name to attach to and are dropped. The migration guard
    suppresses notifications for the cycle that replaces this data.
    """
    groups = entry.get("workerGroups") or {}
    return Cluster(
        name=name,
        control_plane_version=entry.get("controlPlaneVersion") or entry.get("apiversion"),
        last_operation_state=entry.get("state"),
        worker_groups={group_name: _group_from_dict(group_name, g) for group_name, g in groups.items()},
    )


def _has_worker_groups(entry: object) -> bool:
    return isinstance(entry, dict) and bool(entry.get("workerGroups"))
