"""Fire Watch - relays NWS fire weather alerts to a Discord channel."""

__version__ = "1.0.0"
