"""Snapshot persistence for shootwatch.

Exports:
    SnapshotStore      -- Loads and atomically saves the JSON snapshot file.
    snapshot_to_dict   -- Render a Snapshot in the current file layout.
    snapshot_from_dict -- Parse the current or legacy file layout.
"""

from shootwatch.snapshot.store import SnapshotStore, snapshot_from_dict, snapshot_to_dict

__all__ = ["SnapshotStore", "snapshot_from_dict", "snapshot_to_dict"]
