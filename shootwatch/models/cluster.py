"""Cluster, worker group and snapshot data structures."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

# Version 1 files are bare cluster maps without per-group data.
SCHEMA_VERSION = 2
LEGACY_SCHEMA_VERSION = 1


def _text(value: object) -> str:
    """Normalise an optional string field: ``None`` and absent both mean ``""``."""
    return "" if value is None else str(value)


@dataclass(frozen=True)
class WorkerGroup:
    """One pool of worker nodes within a cluster.

    ``minimum``/``maximum`` are passed through exactly as the control plane
    reports them; no bounds are enforced here.
    """

    name: str
    minimum: int = 0
    maximum: int = 0
    image_name: str = ""
    image_version: str = ""
    control_plane_version: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "image_name", _text(self.image_name))
        object.__setattr__(self, "image_version", _text(self.image_version))
        object.__setattr__(self, "control_plane_version", _text(self.control_plane_version))


@dataclass(frozen=True)
class Cluster:
    """A managed cluster, keyed by ``<namespace>/<name>``.

    Immutable: the diff engine and the snapshot store only ever replace
    clusters, never mutate them.
    """

    name: str
    control_plane_version: str = ""
    worker_groups: Mapping[str, WorkerGroup] = field(default_factory=dict)
    seed: str = ""
    last_operation_state: str = ""
    last_operation_description: str = ""
    failing_conditions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "control_plane_version", _text(self.control_plane_version))
        object.__setattr__(self, "seed", _text(self.seed))
        object.__setattr__(self, "last_operation_state", _text(self.last_operation_state))
        object.__setattr__(self, "last_operation_description", _text(self.last_operation_description))
        object.__setattr__(self, "worker_groups", dict(self.worker_groups))
        object.__setattr__(self, "failing_conditions", tuple(self.failing_conditions))


@dataclass(frozen=True)
class Snapshot:
    """What was last seen and already notified about.

    Produced by the diff engine at the end of every cycle and handed to the
    snapshot store; never merged, always replaced wholesale.
    """

    clusters: Mapping[str, Cluster] = field(default_factory=dict)
    schema_version: int = SCHEMA_VERSION

    def __post_init__(self) -> None:
        object.__setattr__(self, "clusters", dict(self.clusters))

    @property
    def is_empty(self) -> bool:
        return not self.clusters

    @property
    def is_legacy(self) -> bool:
        """True when the snapshot was read from an older schema layout."""
        return self.schema_version < SCHEMA_VERSION


# Current truth for one cycle, keyed by cluster name.
Observation = Mapping[str, Cluster]
