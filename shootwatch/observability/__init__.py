"""Logging and metrics for shootwatch."""
