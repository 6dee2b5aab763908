"""Migration guard for snapshots written by an older schema.

Legacy snapshot files carry no per-worker-group data, so diffing them
against a full observation would report every group of every cluster as
added. The first cycle after such a file is loaded is run as a silent
resynchronisation instead: the diff still produces the new snapshot, but
its events are withheld.

Detection is an explicit schema-version check. A current-version snapshot
that happens to contain a cluster with zero worker groups is an ordinary
snapshot and never triggers migration.
"""

from __future__ import annotations

import structlog

from shootwatch.diff.engine import DiffResult
from shootwatch.models.cluster import SCHEMA_VERSION, Snapshot

_log = structlog.get_logger(component="diff.migration")


class MigrationGuard:
    """Decides whether a cycle runs in migration mode and applies suppression."""

    def should_migrate(self, previous: Snapshot) -> bool:
        """True when *previous* is a non-empty snapshot from an older schema.

        An empty snapshot is a first run, not a migration.
        """
        return previous.is_legacy and not previous.is_empty

    def apply(self, previous: Snapshot, result: DiffResult) -> DiffResult:
        """Return *result* unchanged, or with every event suppressed.

        Logs the ``snapshot_migration_started`` marker when suppressing; the
        poll loop logs ``snapshot_migration_finished`` once the new snapshot
        is persisted. The returned snapshot is always at the current schema
        version, so migration lasts exactly one cycle.
        """
        if not self.should_migrate(previous):
            return result

        _log.info(
            "snapshot_migration_started",
            from_version=previous.schema_version,
            to_version=SCHEMA_VERSION,
            clusters=len(previous.clusters),
            suppressed_events=len(result.events),
        )
        return DiffResult(events=(), snapshot=result.snapshot)
