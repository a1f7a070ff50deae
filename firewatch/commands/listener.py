"""Channel command listener.

Polls the alert channel through the Discord REST API for messages of the
form ``!status`` and posts the command replies back to the channel. Reading
message text requires the bot's Message Content intent to be enabled.
"""

from __future__ import annotations

from typing import Any

from ..alerts.discord import DiscordClient
from ..core.utils import get_logger
from ..monitor.context import MonitorContext
from .handler import CommandHandler

logger = get_logger(__name__)


def parse_command(content: str, prefix: str) -> str | None:
    """Extract the command name from a message, if it is a command.

    Args:
        content: Message text.
        prefix: Command prefix, e.g. '!'.

    Returns:
        Lower-cased command name, or None.
    """
    text = (content or "").strip()
    if not prefix or not text.startswith(prefix):
        return None

    parts = text[len(prefix):].split()
    if not parts:
        return None
    return parts[0].lower()


class CommandListener:
    """Turns channel messages into command replies.

    Usage:
        listener = CommandListener(context, handler, client)
        scheduler.add_job("commands", listener.poll_once, interval_seconds=5)
    """

    def __init__(
        self,
        context: MonitorContext,
        handler: CommandHandler,
        client: DiscordClient,
    ):
        self.context = context
        self.handler = handler
        self.client = client
        self.prefix = context.config.commands.prefix

        self._last_message_id: str | None = None
        self._commands_handled = 0

    @property
    def commands_handled(self) -> int:
        return self._commands_handled

    async def prime(self) -> None:
        """Start after the newest existing message so history is not replayed."""
        latest = await self.client.get_messages(self.context.channel_id, limit=1)
        self._last_message_id = latest[0]["id"] if latest else "0"
        logger.debug("command_listener_primed", after=self._last_message_id)

    async def poll_once(self) -> int:
        """Handle any command messages posted since the last poll.

        Returns:
            Number of commands handled.
        """
        try:
            if self._last_message_id is None:
                await self.prime()
                return 0

            messages = await self.client.get_messages(
                self.context.channel_id,
                after=self._last_message_id,
            )
        except Exception as e:
            logger.error("command_listener_poll_failed", error=str(e))
            return 0

        handled = 0
        for message in sorted(messages, key=lambda m: int(m["id"])):
            self._last_message_id = message["id"]
            if await self._handle_message(message):
                handled += 1

        self._commands_handled += handled
        return handled

    async def _handle_message(self, message: dict[str, Any]) -> bool:
        if (message.get("author") or {}).get("bot"):
            return False

        name = parse_command(message.get("content", ""), self.prefix)
        if name is None:
            return False

        try:
            reply = await self.handler.dispatch(name)
        except Exception as e:
            logger.error("command_failed", command=name, error=str(e))
            return False

        reply = {**reply, "message_reference": {"message_id": message["id"]}}
        if not await self.context.notifier.deliver(self.context.channel_id, reply):
            logger.error("command_reply_failed", command=name, message_id=message["id"])
        return True
