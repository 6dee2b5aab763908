"""Diff engine and migration guard.

Exports:
    compute_changes -- Pure (Snapshot, Observation) -> DiffResult.
    DiffResult      -- Ordered change events plus the next snapshot.
    MigrationGuard  -- One-cycle event suppression after a schema upgrade.
"""

from shootwatch.diff.engine import DiffResult, compute_changes
from shootwatch.diff.migration import MigrationGuard

__all__ = ["DiffResult", "MigrationGuard", "compute_changes"]
