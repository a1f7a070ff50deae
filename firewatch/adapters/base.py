"""Base alert source and the alert record shared across the bot.

Defines the interface every feed adapter implements, so the poll cycle and
command handler never depend on a specific upstream.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AlertRecord:
    """A hazard alert as published by the upstream feed.

    Attributes:
        id: Feed-unique alert identifier.
        event: Event type (e.g., 'Red Flag Warning').
        severity: Severity classification.
        urgency: Urgency classification.
        certainty: Certainty classification.
        description: Free-text description.
        area: Affected-area description.
        effective: When the alert takes effect.
        expires: When the alert expires.
        headline: Short headline, if provided.
        url: Canonical reference URL, if provided.
    """

    id: str
    event: str
    severity: str = "Unknown"
    urgency: str = "Unknown"
    certainty: str = "Unknown"
    description: str = ""
    area: str = ""
    effective: datetime | None = None
    expires: datetime | None = None
    headline: str | None = None
    url: str | None = None


class AlertSource(ABC):
    """Abstract base class for alert feeds.

    Implementations must never raise from fetch(); failures are logged
    and reported as an empty list.
    """

    def __init__(self, alert_types: list[str]):
        """Initialize source.

        Args:
            alert_types: Event types of interest.
        """
        self.alert_types = list(alert_types)

    @abstractmethod
    async def fetch(self) -> list[AlertRecord]:
        """Fetch currently-active alerts of the monitored types.

        Returns:
            Alerts in feed order, or an empty list on failure.
        """
        pass

    def matches(self, alert: AlertRecord) -> bool:
        """Check whether an alert is one of the monitored types."""
        return alert.event in self.alert_types

    async def close(self) -> None:
        """Release any held resources."""
        return None
