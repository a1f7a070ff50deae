"""Discord embed rendering for alerts and command replies."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from ..adapters.base import AlertRecord
from ..core.utils import format_uptime, truncate, utc_now

EASTERN = ZoneInfo("America/New_York")

DESCRIPTION_LIMIT = 2000
FIELD_VALUE_LIMIT = 1024
AUTHOR_NAME_LIMIT = 256
SUMMARY_LIMIT = 4000
AREAS_PER_TYPE = 3

EVENT_COLORS = {
    "Red Flag Warning": 0xFF0000,
    "Extreme Fire Danger": 0xFF0000,
    "Fire Warning": 0xFF4500,
    "Fire Weather Watch": 0xFFAA00,
}

SEVERITY_COLORS = {
    "Extreme": 0xFF0000,
    "Severe": 0xFF6600,
    "Moderate": 0xFFCC00,
    "Minor": 0x00FF00,
    "Unknown": 0x808080,
}

STATUS_COLOR = 0x0099FF
ACTIVITY_COLOR = 0xFF6600
QUIET_COLOR = 0x00AA00

COMMANDS = {
    "test": "Send a test alert",
    "status": "Show bot status",
    "check": "Manually check for alerts",
    "active": "Show active alerts",
}


def get_alert_color(event: str, severity: str | None) -> int:
    """Pick an embed color by event type, falling back to severity."""
    if event in EVENT_COLORS:
        return EVENT_COLORS[event]
    return SEVERITY_COLORS.get(severity or "Unknown", SEVERITY_COLORS["Unknown"])


def format_eastern(moment: datetime) -> str:
    """Format a timestamp in US Eastern time, e.g. 'Jul 4, 2025, 3:30 PM ET'."""
    local = moment.astimezone(EASTERN)
    hour = local.strftime("%I").lstrip("0") or "12"
    return f"{local.strftime('%b')} {local.day}, {local.year}, {hour}:{local.strftime('%M %p')} ET"


def discord_relative(moment: datetime | None, default: str) -> str:
    """Render a Discord relative timestamp tag, or a default when unset."""
    if moment is None:
        return default
    return f"<t:{int(moment.timestamp())}:R>"


def _field(name: str, value: Any, inline: bool = True) -> dict[str, Any]:
    return {"name": name, "value": truncate(str(value), FIELD_VALUE_LIMIT), "inline": inline}


def build_alert_embed(alert: AlertRecord, is_test: bool = False) -> dict[str, Any]:
    """Build the Discord embed for a single alert.

    Args:
        alert: Alert to render.
        is_test: Mark the embed as a test alert.

    Returns:
        Embed dictionary.
    """
    event = alert.event or "Fire Alert"
    description = truncate(alert.description or "No description available", DESCRIPTION_LIMIT)

    embed: dict[str, Any] = {
        "title": f"TEST - {event}" if is_test else event,
        "description": description,
        "color": get_alert_color(event, alert.severity),
        "fields": [
            _field("Area", alert.area or "Unknown", inline=False),
            _field("Severity", alert.severity or "Unknown"),
            _field("Urgency", alert.urgency or "Unknown"),
            _field("Certainty", alert.certainty or "Unknown"),
        ],
        "timestamp": (alert.effective or utc_now()).isoformat(),
        "footer": {"text": "TEST ALERT - Not Real" if is_test else "National Weather Service"},
    }

    if alert.headline:
        embed["author"] = {"name": truncate(alert.headline, AUTHOR_NAME_LIMIT)}

    if alert.expires:
        embed["fields"].append(_field("Expires", format_eastern(alert.expires), inline=False))

    if alert.url:
        embed["url"] = alert.url

    return embed


def alert_message(alert: AlertRecord, is_test: bool = False) -> dict[str, Any]:
    """Wrap an alert embed into a message payload."""
    return {"embeds": [build_alert_embed(alert, is_test=is_test)]}


def build_status_embed(
    uptime: timedelta,
    alerts_sent: int,
    tracked_count: int,
    last_check_time: datetime | None,
    last_alert_time: datetime | None,
    interval_seconds: float,
    alert_types: list[str],
) -> dict[str, Any]:
    """Build the status reply embed."""
    return {
        "title": "Bot Status",
        "color": STATUS_COLOR,
        "fields": [
            _field("Uptime", format_uptime(uptime)),
            _field("Alerts Sent", alerts_sent),
            _field("Tracked Alerts", tracked_count),
            _field("Last Check", discord_relative(last_check_time, "Never")),
            _field("Last Alert", discord_relative(last_alert_time, "None yet")),
            _field("Poll Interval", f"{interval_seconds:g} seconds"),
            _field("Monitoring", ", ".join(alert_types), inline=False),
        ],
        "timestamp": utc_now().isoformat(),
        "footer": {"text": "Fire Weather Alert Bot"},
    }


def build_check_embed(total: int, new: int) -> dict[str, Any]:
    """Build the manual-check reply embed."""
    return {
        "title": "Manual Check Complete",
        "description": (
            f"Found and sent **{new}** new alert(s)!" if new > 0 else "No new alerts found."
        ),
        "color": ACTIVITY_COLOR if new > 0 else QUIET_COLOR,
        "fields": [
            _field("Active Alerts", total),
            _field("New Alerts", new),
        ],
        "timestamp": utc_now().isoformat(),
    }


def summarize_by_type(alerts: list[AlertRecord]) -> str:
    """Summarize alerts grouped by event type with a few areas each."""
    if not alerts:
        return "No active fire weather alerts at this time."

    by_type: dict[str, list[AlertRecord]] = defaultdict(list)
    for alert in alerts:
        by_type[alert.event].append(alert)

    lines = []
    for event, typed in by_type.items():
        lines.append(f"**{event}** ({len(typed)})")
        for alert in typed[:AREAS_PER_TYPE]:
            lines.append(f"  • {alert.area or 'Unknown area'}")
        if len(typed) > AREAS_PER_TYPE:
            lines.append(f"  *...and {len(typed) - AREAS_PER_TYPE} more*")

    return truncate("\n".join(lines), SUMMARY_LIMIT)


def build_active_embed(alerts: list[AlertRecord]) -> dict[str, Any]:
    """Build the active-alerts reply embed."""
    return {
        "title": f"Active Fire Weather Alerts: {len(alerts)}",
        "description": summarize_by_type(alerts),
        "color": ACTIVITY_COLOR if alerts else QUIET_COLOR,
        "timestamp": utc_now().isoformat(),
        "footer": {"text": "Data from National Weather Service"},
    }


def build_startup_embed(
    alert_types: list[str],
    interval_seconds: float,
    prefix: str = "!",
) -> dict[str, Any]:
    """Build the embed announcing the bot is online."""
    monitored = "\n".join(f"• {t}" for t in alert_types)
    commands = "\n".join(f"`{prefix}{name}` - {desc}" for name, desc in COMMANDS.items())

    return {
        "title": "Fire Weather Alert Bot Online",
        "description": (
            "Now monitoring for fire weather alerts across the United States.\n\n"
            f"**Alert Types Monitored:**\n{monitored}\n\n"
            f"**Commands:**\n{commands}"
        ),
        "color": QUIET_COLOR,
        "timestamp": utc_now().isoformat(),
        "footer": {"text": f"Polling every {interval_seconds:g} seconds"},
    }


def build_help_embed(prefix: str = "!") -> dict[str, Any]:
    """Build the reply for an unknown command."""
    commands = "\n".join(f"`{prefix}{name}` - {desc}" for name, desc in COMMANDS.items())
    return {
        "title": "Available Commands",
        "description": commands,
        "color": STATUS_COLOR,
    }
