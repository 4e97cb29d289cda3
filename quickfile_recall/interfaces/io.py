"""Notification protocol for user-visible feedback.

Background flows (startup reconciliation, access tracking) never notify;
only user-initiated actions report through a NotificationHandler.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


class NotificationType(str, Enum):
    """Types of notifications for user feedback."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Notification:
    """Notification data structure.

    Attributes:
        notification_type: The type of notification.
        message: The one-line message shown to the user.
    """

    notification_type: NotificationType
    message: str


@runtime_checkable
class NotificationHandler(Protocol):
    """Protocol for notification display."""

    def show(self, notification: Notification) -> None:
        """Display a notification.

        Args:
            notification: The Notification object to display.
        """
        ...


class NoOpNotificationHandler(NotificationHandler):
    """No-op notification handler for silent mode."""

    def show(self, notification: Notification) -> None:
        pass
