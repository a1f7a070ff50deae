"""On-demand commands and the channel listener that drives them."""

from .handler import CommandHandler, build_test_alert
from .listener import CommandListener, parse_command

__all__ = [
    "CommandHandler",
    "CommandListener",
    "build_test_alert",
    "parse_command",
]
