"""Exception hierarchy for shootwatch."""

from __future__ import annotations


class ShootwatchError(Exception):
    """Base class for all shootwatch errors."""


class ConfigError(ShootwatchError):
    """Raised when startup configuration fails validation."""


class ObservationError(ShootwatchError):
    """Raised when the current shoot list cannot be obtained.

    Fatal to the poll loop: without current truth no cycle can proceed.
    """


class SnapshotWriteError(ShootwatchError):
    """Raised when the snapshot file cannot be persisted."""

    def __init__(self, path: str, cause: Exception) -> None:
        super().__init__(f"Failed to write snapshot {path}: {cause}")
        self.path = path
        self.cause = cause
