"""Entry point for `python -m shootwatch`.

Usage:
    python -m shootwatch --webhook-url https://hooks.slack.com/... --filename shoots.json
"""

from __future__ import annotations

from shootwatch.cli import cli

cli()
