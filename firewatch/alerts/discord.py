"""Discord bot alert delivery.

Talks to the Discord REST API with a bot token to post messages to a
channel and to read recent channel messages for the command listener.
"""

from __future__ import annotations

import asyncio
from typing import Any

import aiohttp

from ..core.config import DiscordConfig
from ..core.utils import get_logger
from .base import Message, Notifier, NotifierChannel

logger = get_logger(__name__)


class DiscordAPIError(Exception):
    """Raised when the Discord API returns an unexpected response."""

    def __init__(self, status: int, message: str):
        super().__init__(f"Discord API error {status}: {message}")
        self.status = status


class DiscordClient:
    """Minimal Discord REST client authenticated as a bot.

    Usage:
        client = DiscordClient(token="...")
        await client.create_message("123456789", {"content": "hello"})
        messages = await client.get_messages("123456789", after="987654321")
        await client.close()
    """

    def __init__(
        self,
        token: str,
        config: DiscordConfig | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        """Initialize Discord client.

        Args:
            token: Bot token.
            config: Discord API configuration.
            session: Optional pre-built session (owned by the caller).
        """
        config = config or DiscordConfig()
        self.token = token
        self.api_base = config.api_base.rstrip("/")
        self.timeout = config.timeout_seconds

        self._session = session
        self._owns_session = session is None

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bot {self.token}",
            "Content-Type": "application/json",
        }

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def create_message(self, channel_id: str, payload: Message) -> dict[str, Any]:
        """Post a message to a channel.

        Args:
            channel_id: Destination channel ID.
            payload: Message payload (content and/or embeds).

        Returns:
            Created message object.

        Raises:
            DiscordAPIError: On a non-success response.
        """
        url = f"{self.api_base}/channels/{channel_id}/messages"
        async with self._get_session().post(url, json=payload, headers=self.headers) as response:
            if response.status in (200, 201):
                return await response.json()
            if response.status == 429:
                data = await response.json(content_type=None)
                retry_after = data.get("retry_after", "?") if isinstance(data, dict) else "?"
                logger.warning("discord_rate_limited", retry_after=retry_after)
                raise DiscordAPIError(429, f"rate limited, retry after {retry_after}s")
            text = await response.text()
            raise DiscordAPIError(response.status, text)

    async def get_messages(
        self,
        channel_id: str,
        after: str | None = None,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        """Fetch recent channel messages.

        Args:
            channel_id: Channel to read.
            after: Only return messages after this message ID.
            limit: Maximum messages (1-100).

        Returns:
            Message objects, newest first as returned by Discord.

        Raises:
            DiscordAPIError: On a non-success response.
        """
        url = f"{self.api_base}/channels/{channel_id}/messages"
        params: dict[str, Any] = {"limit": limit}
        if after:
            params["after"] = after

        async with self._get_session().get(url, params=params, headers=self.headers) as response:
            if response.status == 200:
                return await response.json()
            text = await response.text()
            raise DiscordAPIError(response.status, text)


class DiscordNotifier(Notifier):
    """Delivers rendered messages to a Discord channel.

    Usage:
        notifier = DiscordNotifier(DiscordClient(token="..."))
        ok = await notifier.deliver("123456789", {"embeds": [embed]})
    """

    def __init__(self, client: DiscordClient):
        super().__init__()
        self.client = client

    @property
    def channel(self) -> NotifierChannel:
        return NotifierChannel.DISCORD

    async def send_message(self, channel_id: str, message: Message) -> bool:
        """Send message to a Discord channel.

        Args:
            channel_id: Destination channel ID.
            message: Message payload.

        Returns:
            True if sent successfully.
        """
        try:
            await self.client.create_message(channel_id, message)
            return True

        except DiscordAPIError as e:
            logger.error("discord_send_failed", channel_id=channel_id, status=e.status, error=str(e))
            return False
        except asyncio.TimeoutError:
            logger.error("discord_send_timeout", channel_id=channel_id)
            return False
        except aiohttp.ClientError as e:
            logger.error("discord_send_failed", channel_id=channel_id, error=str(e))
            return False

    async def close(self) -> None:
        await self.client.close()
