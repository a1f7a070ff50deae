"""Base notification infrastructure.

Provides:
- Notifier abstract base class for delivering rendered messages
- ConsoleNotifier for dry runs and local use
- Delivery statistics per notifier
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any

import click

from ..core.utils import get_logger, utc_now

logger = get_logger(__name__)

# Discord message payload: {"content": ...} and/or {"embeds": [...]}
Message = dict[str, Any]


class NotifierChannel(Enum):
    """Supported delivery channels."""

    CONSOLE = "console"
    DISCORD = "discord"


class Notifier(ABC):
    """Abstract base class for message delivery.

    Subclasses implement send_message(); deliver() wraps it so that no
    exception ever escapes to the caller.
    """

    def __init__(self):
        self._messages_sent: int = 0
        self._messages_failed: int = 0
        self._last_sent_time: datetime | None = None

    @property
    @abstractmethod
    def channel(self) -> NotifierChannel:
        """Get the channel type."""
        pass

    @abstractmethod
    async def send_message(self, channel_id: str, message: Message) -> bool:
        """Send a message.

        Args:
            channel_id: Destination channel.
            message: Rendered message payload.

        Returns:
            True if sent successfully.
        """
        pass

    async def deliver(self, channel_id: str, message: Message) -> bool:
        """Deliver a message, converting any error into a False result.

        Args:
            channel_id: Destination channel.
            message: Rendered message payload.

        Returns:
            True if delivered.
        """
        try:
            success = await self.send_message(channel_id, message)
        except Exception as e:
            logger.error(
                "notifier_delivery_error",
                channel=self.channel.value,
                channel_id=channel_id,
                error=str(e),
            )
            success = False

        if success:
            self._messages_sent += 1
            self._last_sent_time = utc_now()
        else:
            self._messages_failed += 1

        return success

    async def close(self) -> None:
        """Release any held resources."""
        return None

    def get_stats(self) -> dict:
        """Get notifier statistics."""
        return {
            "channel": self.channel.value,
            "messages_sent": self._messages_sent,
            "messages_failed": self._messages_failed,
            "last_sent": self._last_sent_time.isoformat() if self._last_sent_time else None,
        }


def format_message_text(message: Message) -> str:
    """Format a message payload as plain text."""
    lines = []

    if message.get("content"):
        lines.append(message["content"])

    for embed in message.get("embeds", []):
        if embed.get("author"):
            lines.append(embed["author"]["name"])
        lines.append(f"== {embed.get('title', '')} ==")
        if embed.get("description"):
            lines.append(embed["description"])
        for field in embed.get("fields", []):
            lines.append(f"  {field['name']}: {field['value']}")
        if embed.get("url"):
            lines.append(f"  {embed['url']}")
        if embed.get("footer"):
            lines.append(f"[{embed['footer']['text']}]")

    return "\n".join(lines)


class ConsoleNotifier(Notifier):
    """Notifier that prints messages to the console."""

    def __init__(self, as_json: bool = False):
        super().__init__()
        self.as_json = as_json

    @property
    def channel(self) -> NotifierChannel:
        return NotifierChannel.CONSOLE

    async def send_message(self, channel_id: str, message: Message) -> bool:
        """Print message to console."""
        if self.as_json:
            click.echo(json.dumps(message, indent=2, default=str))
        else:
            click.echo(format_message_text(message))
        click.echo("-" * 50)
        return True
