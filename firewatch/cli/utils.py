"""CLI utility functions.

Provides:
- Async execution helper for Click commands
- Settings loading with distinct configuration-error exits
- Output formatting utilities
"""

from __future__ import annotations

import asyncio
import json
import sys
from functools import wraps
from pathlib import Path
from typing import Any, Callable, TypeVar

import click

from ..core.config import Config, ConfigurationError, Credentials, load_config
from ..core.utils import get_logger, setup_logging

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

CONFIG_ERROR_EXIT_CODE = 2

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default="config.json",
    show_default=True,
    help="Path to the JSON config file.",
)

dry_run_option = click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print messages to the console instead of posting to Discord.",
)


def async_command(f: F) -> F:
    """Decorator to run async functions in Click commands.

    Usage:
        @cli.command()
        @async_command
        async def my_command():
            await some_async_operation()
    """
    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return asyncio.run(f(*args, **kwargs))
    return wrapper  # type: ignore


def load_settings(
    config_path: Path | None,
    require_credentials: bool = True,
) -> tuple[Config, Credentials | None]:
    """Load config and credentials, exiting distinctly on failure.

    Args:
        config_path: Path to config file.
        require_credentials: Whether Discord credentials must be present.

    Returns:
        Config and credentials (None when not required).
    """
    try:
        config = load_config(config_path)
        credentials = Credentials.load(config_path) if require_credentials else None
    except ConfigurationError as e:
        fail_configuration(e)

    apply_logging(config)

    return config, credentials


def apply_logging(config: Config) -> None:
    """Reconfigure logging from the config file unless set on the command line."""
    ctx = click.get_current_context(silent=True)
    options = (ctx.find_root().obj or {}) if ctx is not None else {}

    setup_logging(
        level=options.get("log_level") or config.general.log_level,
        log_format=options.get("log_format") or config.general.log_format,
    )


def fail_configuration(error: ConfigurationError) -> None:
    """Report a startup configuration error and exit."""
    logger.error("configuration_error", error=str(error))
    click.echo(f"Configuration error: {error}", err=True)
    sys.exit(CONFIG_ERROR_EXIT_CODE)


def print_header(title: str, width: int = 70) -> None:
    """Print a formatted header."""
    click.echo("=" * width)
    click.echo(f"  {title}")
    click.echo("=" * width)


def print_table_row(label: str, value: str, width: int = 20) -> None:
    """Print a formatted table row."""
    click.echo(f"  {label:<{width}} {value}")


def output_json(data: Any) -> None:
    """Output data as JSON."""
    click.echo(json.dumps(data, indent=2, default=str))
