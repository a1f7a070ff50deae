"""One-shot commands - check, active and test outside the running bot."""

from __future__ import annotations

from pathlib import Path

import click

from ...alerts.base import format_message_text
from ...commands.handler import CommandHandler
from ...monitor.context import MonitorContext, build_context
from ...monitor.poller import PollTrigger
from ..utils import (
    async_command,
    config_option,
    dry_run_option,
    load_settings,
    output_json,
    print_header,
    print_table_row,
)


def _context(config_path: Path, dry_run: bool) -> MonitorContext:
    config, credentials = load_settings(config_path, require_credentials=not dry_run)
    return build_context(config, credentials)


@click.command()
@config_option
@dry_run_option
@click.option("--json", "as_json", is_flag=True, help="Output the result as JSON.")
@async_command
async def check(config_path: Path, dry_run: bool, as_json: bool) -> None:
    """Run one poll cycle and deliver any alerts found.

    Every active alert counts as new, since a fresh process has no
    delivery history.
    """
    context = _context(config_path, dry_run)
    try:
        result = await context.poller.run(PollTrigger.MANUAL)
    finally:
        await context.close()

    if as_json:
        output_json(result.to_dict())
        return

    print_header("Manual Check Complete")
    print_table_row("Active alerts:", str(result.total))
    print_table_row("New alerts:", str(result.new))
    print_table_row("Failed deliveries:", str(result.failed))


@click.command()
@config_option
@async_command
async def active(config_path: Path) -> None:
    """Show currently active fire weather alerts grouped by type."""
    context = _context(config_path, dry_run=True)
    try:
        reply = await CommandHandler(context).active()
    finally:
        await context.close()

    click.echo(format_message_text(reply))


@click.command(name="test")
@config_option
@dry_run_option
@async_command
async def test_alert(config_path: Path, dry_run: bool) -> None:
    """Deliver a synthetic test alert to the configured channel."""
    context = _context(config_path, dry_run)
    try:
        reply = await CommandHandler(context).test()
        ok = await context.notifier.deliver(context.channel_id, reply)
    finally:
        await context.close()

    if not ok:
        raise click.ClickException("Test alert could not be delivered.")
    click.echo("Test alert sent.")
