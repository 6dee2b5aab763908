"""Human-readable message templates, one per change kind.

Values are substituted literally; no escaping or truncation is applied.
"""

from __future__ import annotations

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


def format_message(event: ChangeEvent) -> str:
    """Render *event* as the text posted to the webhook.

    Every message is a single line except ``ClusterOperationFailed``: its
    headline is followed by one line per failing condition, matching what
    operators already see for shoot errors in Slack.

    Raises:
        TypeError: *event* is not a known change event.
    """
    if isinstance(event, ClusterAdded):
        return f"new cluster: {event.name} in seed {event.seed}"
    if isinstance(event, ClusterRemoved):
        return f"cluster {event.name} has been deleted"
    if isinstance(event, ClusterVersionChanged):
        return f"new cluster API version for {event.name}: {event.new} (old: {event.old})"
    if isinstance(event, WorkerGroupAdded):
        return f"new workergroup: {event.name} in cluster {event.cluster}"
    if isinstance(event, WorkerGroupRemoved):
        return f"workergroup {event.name} in {event.cluster} has been deleted"
    if isinstance(event, WorkerGroupSizeChanged):
        return (
            f"new sizes for workergroup {event.name} in {event.cluster}: "
            f"min {event.new_min}, max {event.new_max} (old: {event.old_min}, {event.old_max})"
        )
    if isinstance(event, WorkerGroupImageChanged):
        return (
            f"new worker image versions for workergroup {event.name} in {event.cluster}: "
            f"{event.new_image}-{event.new_version} (old: {event.old_image}-{event.old_version})"
        )
    if isinstance(event, WorkerGroupVersionChanged):
        return f"new API version for workergroup {event.name} in {event.cluster}: {event.new} (old: {event.old})"
    if isinstance(event, ClusterOperationFailed):
        lines = [f"shoot {event.name} has errors: {event.description}"]
        lines.extend(event.conditions)
        return "\n".join(lines)
    raise TypeError(f"Unsupported change event: {event!r}")
