"""Init command - first-run credential setup."""

from __future__ import annotations

from pathlib import Path

import click

from ...core.config import save_credentials
from ..utils import config_option, print_header


@click.command()
@config_option
@click.option("--token", help="Discord bot token (prompted if omitted).")
@click.option("--channel-id", help="Discord channel ID (prompted if omitted).")
def init(config_path: Path, token: str | None, channel_id: str | None) -> None:
    """Save Discord credentials to the config file.

    \b
    Examples:
      firewatch init
      firewatch init --config ./bot.json
    """
    print_header("Fire Weather Alert Bot - First Run")

    if not token:
        click.echo("You need a Discord Bot Token.")
        click.echo("Get one at: https://discord.com/developers/applications")
        click.echo("(Create app > Bot > Reset Token > Copy)")
        click.echo("Enable the Message Content intent to use channel commands.")
        token = click.prompt("Paste your Discord Bot Token", hide_input=True)

    if not channel_id:
        click.echo()
        click.echo("You need a Discord Channel ID.")
        click.echo("(Enable Developer Mode in Discord, right-click channel > Copy ID)")
        channel_id = click.prompt("Paste your Channel ID")

    if not token.strip() or not channel_id.strip():
        raise click.UsageError("Token and channel ID must not be empty.")

    path = save_credentials(token, channel_id, config_path)
    click.echo(f"\nConfig saved to {path}")
