"""shootwatch: change notifications for Gardener shoot clusters."""

__version__ = "0.3.0"
