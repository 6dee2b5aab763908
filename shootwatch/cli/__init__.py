"""shootwatch command-line interface.

Exposes:
    cli -- Click command entry point (registered as ``shootwatch`` script).
"""

from shootwatch.cli.main import cli

__all__ = ["cli"]
