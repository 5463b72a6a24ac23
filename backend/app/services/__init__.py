"""Business services."""

from app.services.indicator_service import ChartOverlay, IndicatorService
from app.services.notifications import (
    NotificationInput,
    NotificationType,
    build_signal_notification,
)

__all__ = [
    "ChartOverlay",
    "IndicatorService",
    "NotificationInput",
    "NotificationType",
    "build_signal_notification",
]
