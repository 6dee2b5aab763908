"""Tests for MigrationGuard detection and suppression."""

from __future__ import annotations

from shootwatch.diff.engine import compute_changes
from shootwatch.diff.migration import MigrationGuard
from shootwatch.models.cluster import LEGACY_SCHEMA_VERSION, SCHEMA_VERSION, Cluster, Snapshot, WorkerGroup

_GROUP = WorkerGroup(name="g1", minimum=2, maximum=5, image_name="gardenlinux", image_version="1443.3")


def _legacy(*names: str) -> Snapshot:
    return Snapshot(
        clusters={n: Cluster(name=n, control_plane_version="v1") for n in names},
        schema_version=LEGACY_SCHEMA_VERSION,
    )


class TestShouldMigrate:
    def test_non_empty_legacy_snapshot_migrates(self) -> None:
        assert MigrationGuard().should_migrate(_legacy("A"))

    def test_empty_legacy_snapshot_is_a_first_run(self) -> None:
        assert not MigrationGuard().should_migrate(_legacy())

    def test_empty_current_snapshot_is_a_first_run(self) -> None:
        assert not MigrationGuard().should_migrate(Snapshot())

    def test_current_snapshot_with_zero_group_cluster_does_not_migrate(self) -> None:
        snapshot = Snapshot(clusters={"A": Cluster(name="A", control_plane_version="v1")})
        assert not MigrationGuard().should_migrate(snapshot)


class TestApply:
    def test_suppresses_every_event_but_keeps_snapshot(self) -> None:
        previous = _legacy("A", "gone")
        current = {
            "A": Cluster(name="A", control_plane_version="v2", worker_groups={"g1": _GROUP}),
            "new": Cluster(name="new", control_plane_version="v1"),
        }
        raw = compute_changes(previous, current)
        assert raw.events  # version change, group added, cluster added, cluster removed

        result = MigrationGuard().apply(previous, raw)

        assert result.events == ()
        assert result.snapshot == raw.snapshot
        assert result.snapshot.schema_version == SCHEMA_VERSION
        assert not MigrationGuard().should_migrate(result.snapshot)

    def test_passes_through_outside_migration(self) -> None:
        previous = Snapshot(clusters={"A": Cluster(name="A", control_plane_version="v1")})
        raw = compute_changes(previous, {"A": Cluster(name="A", control_plane_version="v2")})

        assert MigrationGuard().apply(previous, raw) is raw
