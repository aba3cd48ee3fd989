"""Notifier implementations for user-facing feedback."""

from __future__ import annotations

import logging
from typing import Any

from django.contrib import messages

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Default notifier: writes user-facing messages to the library logger."""

    def success(self, message: str) -> None:
        logger.info("notify success: %s", message)

    def error(self, message: str) -> None:
        logger.error("notify error: %s", message)

    def warning(self, message: str) -> None:
        logger.warning("notify warning: %s", message)


class MessagesNotifier:
    """Forward notifications to ``django.contrib.messages`` for one request."""

    def __init__(self, request: Any) -> None:
        self.request = request

    def success(self, message: str) -> None:
        messages.success(self.request, message)

    def error(self, message: str) -> None:
        messages.error(self.request, message)

    def warning(self, message: str) -> None:
        messages.warning(self.request, message)


class RecordingNotifier:
    """Keep notifications in memory; handy for previews and tests."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.events.append(("success", message))

    def error(self, message: str) -> None:
        self.events.append(("error", message))

    def warning(self, message: str) -> None:
        self.events.append(("warning", message))

    def messages_for(self, level: str) -> list[str]:
        return [message for event_level, message in self.events if event_level == level]
