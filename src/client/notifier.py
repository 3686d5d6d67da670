"""
Dofus Retro Tracker - User notifications

The interceptor reports terminal failures through a Notifier passed to it
explicitly. Notifications are fire-and-forget: notify() never blocks and
never raises into the request path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)


class Notifier(Protocol):
    """Capability to show a dismissible message for a bounded time."""

    def notify(self, message: str, duration_ms: int) -> None: ...


@dataclass
class Notification:
    """A message on screen until it expires or the user dismisses it."""

    message: str
    duration_ms: int
    shown_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    dismissed: bool = False

    @property
    def expires_at(self) -> datetime:
        return self.shown_at + timedelta(milliseconds=self.duration_ms)

    def is_visible(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return not self.dismissed and now < self.expires_at


class LogNotifier:
    """Writes notifications to the structured log. Used by headless runs."""

    def notify(self, message: str, duration_ms: int) -> None:
        logger.warning("user_notification", message=message, duration_ms=duration_ms)


class InMemoryNotifier:
    """
    Keeps notifications for a UI to render.

    The dashboard shows ``visible()`` as banners and lets the user dismiss
    them. Expired or dismissed ones are discarded when the next one arrives.
    """

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, message: str, duration_ms: int) -> None:
        notification = Notification(message=message, duration_ms=duration_ms)
        # Expired and dismissed notifications are dropped on every new one
        self.notifications = [
            n for n in self.notifications if n.is_visible(notification.shown_at)
        ]
        self.notifications.append(notification)

    def visible(self, now: datetime | None = None) -> list[Notification]:
        return [n for n in self.notifications if n.is_visible(now)]

    def dismiss(self, notification: Notification) -> None:
        notification.dismissed = True

    def dismiss_all(self) -> None:
        for notification in self.notifications:
            notification.dismissed = True
