"""Snapshot diff engine.

Pure and side-effect free: given the previous snapshot and the current
observation, produce the ordered change events and the snapshot that
replaces the previous one.

Emission order is a documented total order so that output is reproducible
and notifications read naturally:

1. Clusters present in the observation, sorted by name. For each one:
   ``ClusterAdded`` (and nothing else) if it is new; otherwise
   ``ClusterVersionChanged``, then the worker-group events, then
   ``ClusterOperationFailed``.
2. Clusters only in the previous snapshot, sorted by name: ``ClusterRemoved``.

Worker groups of an existing cluster follow the same shape: groups present
now in sorted order (added, or size/image/version changes in that order),
then removed groups in sorted order.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from shootwatch.models.changes import (
    ChangeEvent,
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
from shootwatch.models.cluster import SCHEMA_VERSION, Cluster, Observation, Snapshot, WorkerGroup

# Gardener's LastOperationStateError.
_ERROR_STATE = "Error"


@dataclass(frozen=True)
class DiffResult:
    """Outcome of one diff: the events and the snapshot to persist."""

    events: tuple[ChangeEvent, ...]
    snapshot: Snapshot


def compute_changes(previous: Snapshot, current: Observation) -> DiffResult:
    """Diff *current* against *previous*.

    The returned snapshot is the observation verbatim, stamped with the
    current schema version.
    """
    events = tuple(_diff_clusters(previous.clusters, current))
    return DiffResult(
        events=events,
        snapshot=Snapshot(clusters=current, schema_version=SCHEMA_VERSION),
    )


def _diff_clusters(previous: Mapping[str, Cluster], current: Mapping[str, Cluster]) -> Iterator[ChangeEvent]:
    for name in sorted(current):
        cluster = current[name]
        old = previous.get(name)
        if old is None:
            # Groups of a new cluster are recorded, never reported.
            yield ClusterAdded(name=name, seed=cluster.seed)
            continue
        yield from _diff_cluster(old, cluster)

    for name in sorted(previous.keys() - current.keys()):
        # Removal subsumes the cluster's worker groups.
        yield ClusterRemoved(name=name)


def _diff_cluster(old: Cluster, new: Cluster) -> Iterator[ChangeEvent]:
    if old.control_plane_version != new.control_plane_version:
        yield ClusterVersionChanged(
            name=new.name,
            old=old.control_plane_version,
            new=new.control_plane_version,
        )

    for group_name in sorted(new.worker_groups):
        old_group = old.worker_groups.get(group_name)
        if old_group is None:
            yield WorkerGroupAdded(cluster=new.name, name=group_name)
            continue
        yield from _diff_group(new.name, old_group, new.worker_groups[group_name])

    for group_name in sorted(old.worker_groups.keys() - new.worker_groups.keys()):
        yield WorkerGroupRemoved(cluster=new.name, name=group_name)

    if old.last_operation_state != new.last_operation_state and new.last_operation_state == _ERROR_STATE:
        yield ClusterOperationFailed(
            name=new.name,
            description=new.last_operation_description,
            conditions=new.failing_conditions,
        )


def _diff_group(cluster: str, old: WorkerGroup, new: WorkerGroup) -> Iterator[ChangeEvent]:
    """Compare one group: size, then image, then version. Not mutually exclusive."""
    if (old.minimum, old.maximum) != (new.minimum, new.maximum):
        yield WorkerGroupSizeChanged(
            cluster=cluster,
            name=new.name,
            old_min=old.minimum,
            old_max=old.maximum,
            new_min=new.minimum,
            new_max=new.maximum,
        )
    if (old.image_name, old.image_version) != (new.image_name, new.image_version):
        yield WorkerGroupImageChanged(
            cluster=cluster,
            name=new.name,
            old_image=old.image_name,
            old_version=old.image_version,
            new_image=new.image_name,
            new_version=new.image_version,
        )
    if old.control_plane_version != new.control_plane_version:
        yield WorkerGroupVersionChanged(
            cluster=cluster,
            name=new.name,
            old=old.control_plane_version,
            new=new.control_plane_version,
        )
