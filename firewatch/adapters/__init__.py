"""Alert feed adapters."""

from .base import AlertRecord, AlertSource
from .nws import NWSAlertSource

__all__ = ["AlertRecord", "AlertSource", "NWSAlertSource"]
