"""Run command - starts the alert bot.

Starts a long-running session that:
- Announces itself in the alert channel
- Polls the NWS feed at a fixed interval and relays new fire alerts
- Answers channel commands (!test, !status, !check, !active)
"""

from __future__ import annotations

import asyncio
import signal
import sys
from pathlib import Path

import click

from ...bot import FireWatchBot
from ...core.utils import get_logger
from ...monitor.context import build_context
from ..utils import config_option, dry_run_option, load_settings

logger = get_logger(__name__)


async def run_bot(bot: FireWatchBot) -> None:
    """Run the bot until SIGINT/SIGTERM.

    Args:
        bot: Configured bot.
    """
    shutdown_event = asyncio.Event()

    def handle_shutdown(sig, frame):
        logger.info("shutdown_signal_received", signal=sig)
        shutdown_event.set()

    # Register signal handlers (Unix only)
    if sys.platform != "win32":
        signal.signal(signal.SIGINT, handle_shutdown)
        signal.signal(signal.SIGTERM, handle_shutdown)

    config = bot.context.config
    click.echo("Starting Fire Weather Alert Bot...")
    click.echo(f"  Monitoring: {', '.join(config.feed.alert_types)}")
    click.echo(f"  Channel: {bot.context.channel_id}")
    click.echo(f"  Poll interval: {config.polling.interval_seconds:g}s")
    click.echo("Press Ctrl+C to stop.")
    click.echo("-" * 50)

    await bot.start()

    try:
        if sys.platform == "win32":
            # Windows: use simple wait loop
            while not shutdown_event.is_set():
                await asyncio.sleep(1)
        else:
            await shutdown_event.wait()
    except KeyboardInterrupt:
        pass
    finally:
        await bot.stop()
        click.echo("Shutdown complete.")


@click.command()
@config_option
@dry_run_option
def run(config_path: Path, dry_run: bool) -> None:
    """Start the fire weather alert bot.

    \b
    Examples:
      firewatch run
      firewatch run --config /etc/firewatch/config.json
      firewatch run --dry-run
    """
    config, credentials = load_settings(config_path, require_credentials=not dry_run)
    bot = FireWatchBot(build_context(config, credentials))
    asyncio.run(run_bot(bot))
