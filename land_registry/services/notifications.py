"""
Notification sinks for workflow outcomes.

A sink has success(title, body) and error(title, body); calls are fire and
forget. The Streamlit toast sink lives in land_registry.ui.
"""

from __future__ import annotations

from typing import Any, Protocol

from land_registry.utils.logger import get_logger

logger = get_logger("notifications")


class Notifier(Protocol):
    def success(self, title: str, body: str) -> None: ...

    def error(self, title: str, body: str) -> None: ...


class LoggingNotifier:
    """Default sink for headless use: notifications go to the app log."""

    def success(self, title: str, body: str) -> None:
        logger.info("%s: %s", title, body)

    def error(self, title: str, body: str) -> None:
        logger.warning("%s: %s", title, body)


class RecordingNotifier:
    """Keeps every notification; `last` is what a single toast surface would show."""

    def __init__(self) -> None:
        self.history: list[dict[str, Any]] = []

    def success(self, title: str, body: str) -> None:
        self.history.append({"kind": "success", "title": title, "body": body})

    def error(self, title: str, body: str) -> None:
        self.history.append({"kind": "error", "title": title, "body": body})

    @property
    def last(self) -> dict[str, Any] | None:
        return self.history[-1] if self.history else None

    def clear(self) -> None:
        self.history.clear()
