"""Core data structures for shootwatch."""

from shootwatch.models.changes import (
    ChangeEvent,
    ChangeKind,
    ClusterAdded,
    ClusterOperationFailed,
    ClusterRemoved,
    ClusterVersionChanged,
    WorkerGroupAdded,
    WorkerGroupImageChanged,
    WorkerGroupRemoved,
    WorkerGroupSizeChanged,
    WorkerGroupVersionChanged,
)
from shootwatch.models.cluster import (
    LEGACY_SCHEMA_VERSION,
    SCHEMA_VERSION,
    Cluster,
    Observation,
    Snapshot,
    WorkerGroup,
)
from shootwatch.models.config import ShootwatchConfig

__all__ = [
    "LEGACY_SCHEMA_VERSION",
    "SCHEMA_VERSION",
    "ChangeEvent",
    "ChangeKind",
    "Cluster",
    "ClusterAdded",
    "ClusterOperationFailed",
    "ClusterRemoved",
    "ClusterVersionChanged",
    "Observation",
    "ShootwatchConfig",
    "Snapshot",
    "WorkerGroup",
    "WorkerGroupAdded",
    "WorkerGroupImageChanged",
    "WorkerGroupRemoved",
    "WorkerGroupSizeChanged",
    "WorkerGroupVersionChanged",
]
