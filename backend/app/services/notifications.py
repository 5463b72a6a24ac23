"""Notification payloads for classified signals.

Builds validated notification input for an external dispatcher.
Storing and delivering notifications happens outside this package.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, Field

from core.models.signal import Signal, SignalKind

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 100
MAX_MESSAGE_LENGTH = 500


def _orjson_dumps(obj: Any) -> str:
    """Serialize object to JSON string using orjson."""
    return orjson.dumps(obj, default=str).decode("utf-8")


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class NotificationInput(BaseModel):
    """Validated input for creating a notification."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    message: str = Field(min_length=1, max_length=MAX_MESSAGE_LENGTH)
    type: NotificationType = NotificationType.INFO
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_json(self) -> str:
        """Serialize to JSON string using orjson."""
        return _orjson_dumps(self.model_dump(mode="json"))


_SIGNAL_TYPES = {
    SignalKind.BULLISH: NotificationType.SUCCESS,
    SignalKind.BEARISH: NotificationType.WARNING,
}


def build_signal_notification(symbol: str, signal: Signal) -> NotificationInput | None:
    """
    Build a notification for an actionable signal.

    Args:
        symbol: Trading symbol the signal was computed for
        signal: Classified signal for the latest bar

    Returns:
        NotificationInput for bullish/bearish signals, None for neutral
    """
    notification_type = _SIGNAL_TYPES.get(signal.kind)
    if notification_type is None:
        return None

    title = f"{symbol.strip().upper()} {signal.kind.value} signal"
    message = f"{signal.description} (strength {signal.strength:.1f}/100)"

    notification = NotificationInput(
        title=title[:MAX_TITLE_LENGTH],
        message=message,
        type=notification_type,
    )
    logger.info("Signal notification: %s - %s", notification.title, notification.message)
    return notification
