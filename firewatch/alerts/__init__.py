"""Alert delivery and rendering.

This module provides:
- Notifier interface with console and Discord implementations
- Discord REST client used for delivery and command polling
- Embed rendering for alerts and command replies
"""

from .base import (
    ConsoleNotifier,
    Message,
    Notifier,
    NotifierChannel,
)
from .discord import DiscordAPIError, DiscordClient, DiscordNotifier

__all__ = [
    "ConsoleNotifier",
    "DiscordAPIError",
    "DiscordClient",
    "DiscordNotifier",
    "Message",
    "Notifier",
    "NotifierChannel",
]
