"""National Weather Service alerts adapter.

Reads the public active-alerts GeoJSON feed.

References:
- https://www.weather.gov/documentation/services-web-api
"""

from __future__ import annotations

from typing import Any

import httpx

from ..core.config import FeedConfig
from ..core.utils import get_logger, parse_timestamp
from .base import AlertRecord, AlertSource

logger = get_logger(__name__)


class NWSAlertSource(AlertSource):
    """Alert source backed by api.weather.gov.

    Example:
        ```python
        source = NWSAlertSource(FeedConfig())
        alerts = await source.fetch()
        await source.close()
        ```
    """

    def __init__(
        self,
        config: FeedConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize NWS source.

        Args:
            config: Feed configuration.
            client: Optional pre-built HTTP client (owned by the caller).
        """
        config = config or FeedConfig()
        super().__init__(config.alert_types)

        self.url = config.url
        self.user_agent = config.user_agent
        self.timeout = config.timeout_seconds
        self.server_side_filter = config.server_side_filter

        self._client = client
        self._owns_client = client is None

    @property
    def headers(self) -> dict[str, str]:
        """Request headers expected by the NWS API."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/geo+json",
        }

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this source created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def fetch(self) -> list[AlertRecord]:
        """Fetch active alerts of the monitored types.

        Returns:
            Matching alerts in feed order; empty list on any failure.
        """
        params: dict[str, Any] = {}
        if self.server_side_filter and self.alert_types:
            params["event"] = ",".join(self.alert_types)

        try:
            response = await self._get_client().get(
                self.url,
                params=params,
                headers=self.headers,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("nws_fetch_failed", status_code=e.response.status_code)
            return []
        except Exception as e:
            logger.error("nws_fetch_failed", error=str(e))
            return []

        features = (data.get("features") or []) if isinstance(data, dict) else []

        alerts = []
        for feature in features:
            alert = self._parse_alert(feature)
            if alert and self.matches(alert):
                alerts.append(alert)

        logger.debug("nws_alerts_fetched", total=len(features), matching=len(alerts))
        return alerts

    def _parse_alert(self, feature: dict[str, Any]) -> AlertRecord | None:
        """Parse a GeoJSON feature into an AlertRecord.

        Args:
            feature: Raw feature from the feed.

        Returns:
            Parsed alert, or None if the feature lacks an id or event.
        """
        try:
            props = feature.get("properties") or {}
            alert_id = props.get("id")
            event = props.get("event")
            if not alert_id or not event:
                return None

            return AlertRecord(
                id=str(alert_id),
                event=event,
                severity=props.get("severity") or "Unknown",
                urgency=props.get("urgency") or "Unknown",
                certainty=props.get("certainty") or "Unknown",
                description=props.get("description") or "",
                area=props.get("areaDesc") or "",
                effective=parse_timestamp(props.get("effective")),
                expires=parse_timestamp(props.get("expires")),
                headline=props.get("headline"),
                url=props.get("@id"),
            )

        except Exception as e:
            logger.warning("nws_parse_alert_failed", error=str(e))
            return None
