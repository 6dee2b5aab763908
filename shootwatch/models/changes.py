"""Change event data structures.

Every difference the diff engine finds between a snapshot and an
observation is expressed as exactly one of the frozen dataclasses below.
Each carries a ``kind`` discriminator so consumers can dispatch without
isinstance chains.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar


class ChangeKind(StrEnum):
    """Discriminator for ChangeEvent variants."""

    CLUSTER_ADDED = "cluster_added"
    CLUSTER_REMOVED = "cluster_removed"
    CLUSTER_VERSION_CHANGED = "cluster_version_changed"
    CLUSTER_OPERATION_FAILED = "cluster_operation_failed"
    WORKER_GROUP_ADDED = "worker_group_added"
    WORKER_GROUP_REMOVED = "worker_group_removed"
    WORKER_GROUP_SIZE_CHANGED = "worker_group_size_changed"
    WORKER_GROUP_IMAGE_CHANGED = "worker_group_image_changed"
    WORKER_GROUP_VERSION_CHANGED = "worker_group_version_changed"


@dataclass(frozen=True)
class ClusterAdded:
    kind: ClassVar[ChangeKind] = ChangeKind.CLUSTER_ADDED

    name: str
    seed: str = ""


@dataclass(frozen=True)
class ClusterRemoved:
    kind: ClassVar[ChangeKind] = ChangeKind.CLUSTER_REMOVED

    name: str


@dataclass(frozen=True)
class ClusterVersionChanged:
    kind: ClassVar[ChangeKind] = ChangeKind.CLUSTER_VERSION_CHANGED

    name: str
    old: str
    new: str


@dataclass(frozen=True)
class ClusterOperationFailed:
    """The cluster's last operation transitioned into the ``Error`` state."""

    kind: ClassVar[ChangeKind] = ChangeKind.CLUSTER_OPERATION_FAILED

    name: str
    description: str = ""
    conditions: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class WorkerGroupAdded:
    kind: ClassVar[ChangeKind] = ChangeKind.WORKER_GROUP_ADDED

    cluster: str
    name: str


@dataclass(frozen=True)
class WorkerGroupRemoved:
    kind: ClassVar[ChangeKind] = ChangeKind.WORKER_GROUP_REMOVED

    cluster: str
    name: str


@dataclass(frozen=True)
class WorkerGroupSizeChanged:
    """``minimum``/``maximum`` compared as a single unit."""

    kind: ClassVar[ChangeKind] = ChangeKind.WORKER_GROUP_SIZE_CHANGED

    cluster: str
    name: str
    old_min: int
    old_max: int
    new_min: int
    new_max: int


@dataclass(frozen=True)
class WorkerGroupImageChanged:
    """``imageName``/``imageVersion`` compared as a single unit."""

    kind: ClassVar[ChangeKind] = ChangeKind.WORKER_GROUP_IMAGE_CHANGED

    cluster: str
    name: str
    old_image: str
    old_version: str
    new_image: str
    new_version: str


@dataclass(frozen=True)
class WorkerGroupVersionChanged:
    kind: ClassVar[ChangeKind] = ChangeKind.WORKER_GROUP_VERSION_CHANGED

    cluster: str
    name: str
    old: str
    new: str


ChangeEvent = (
    ClusterAdded
    | ClusterRemoved
    | ClusterVersionChanged
    | ClusterOperationFailed
    | WorkerGroupAdded
    | WorkerGroupRemoved
    | WorkerGroupSizeChanged
    | WorkerGroupImageChanged
    | WorkerGroupVersionChanged
)
