"""Fire Watch - Unified CLI.

Relays National Weather Service fire weather alerts to Discord.

Usage:
    firewatch --help
    firewatch init
    firewatch run
    firewatch check --dry-run
"""

from __future__ import annotations

import click

from ..core.utils import setup_logging


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Set logging level (overrides the config file).",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"], case_sensitive=False),
    default=None,
    help="Set logging format (overrides the config file).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_format: str | None) -> None:
    """Fire Watch - NWS fire weather alerts for Discord.

    Polls the National Weather Service for active fire weather alerts
    and posts each new one to a Discord channel.

    \b
    Monitored alert types:
      - Red Flag Warning
      - Fire Weather Watch
      - Fire Warning
      - Extreme Fire Danger

    \b
    Examples:
      firewatch init
      firewatch run
      firewatch active
      firewatch check --dry-run
    """
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level
    ctx.obj["log_format"] = log_format
    setup_logging(level=log_level or "INFO", log_format=log_format or "console")


# Import and register commands
from .commands import init, oneshot, run

cli.add_command(init.init)
cli.add_command(run.run)
cli.add_command(oneshot.check)
cli.add_command(oneshot.active)
cli.add_command(oneshot.test_alert)


if __name__ == "__main__":
    cli()
