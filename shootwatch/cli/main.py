"""Click command for running the shoot watcher."""

from __future__ import annotations

import asyncio

import click

from shootwatch.app import main
from shootwatch.config import load_config, validate_config
from shootwatch.errors import ConfigError


@click.command(name="shootwatch", help="Logs shoot events to slack.")
@click.option("--kubeconfig", default=None, help="Path to kubeconfig file for a Garden cluster.")
@click.option("--webhook-url", "--slackurl", "webhook_url", default=None, help="URL to the Slack (or JSON) webhook.")
@click.option("--filename", default=None, help="Path to the snapshot file.")
@click.option("--interval", type=click.IntRange(min=1), default=None, help="Seconds between polling cycles.")
@click.option(
    "--webhook-format",
    type=click.Choice(["slack", "json"], case_sensitive=False),
    default=None,
    help="Payload format of the webhook.",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Log level.",
)
def cli(
    kubeconfig: str | None,
    webhook_url: str | None,
    filename: str | None,
    interval: int | None,
    webhook_format: str | None,
    log_level: str | None,
) -> None:
    """Validate configuration, then poll until interrupted."""
    try:
        config = load_config(
            kubeconfig=kubeconfig,
            webhook_url=webhook_url,
            filename=filename,
            interval=interval,
            webhook_format=webhook_format,
            log_level=log_level,
        )
        validate_config(config)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    asyncio.run(main(config))
