"""
flows/notifications.py

Toast-style notifications emitted by the flow controllers.

Controllers only see a ``Notifier`` callable taking (title, message,
severity).  The Streamlit layer uses a NotificationLog and drains it into
``st.toast`` on every rerun; tests inspect the log directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class Severity(str, Enum):
    info = "info"
    success = "success"
    error = "error"


@dataclass(frozen=True)
class Notification:
    title: str
    message: str
    severity: Severity = Severity.info


class Notifier(Protocol):
    def __call__(self, title: str, message: str, severity: Severity = Severity.info) -> None: ...


class NotificationLog:
    """In-memory notifier that keeps everything it was handed until drained."""

    def __init__(self) -> None:
        self._items: list[Notification] = []

    def __call__(self, title: str, message: str, severity: Severity = Severity.info) -> None:
        self._items.append(Notification(title, message, Severity(severity)))

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> list[Notification]:
        return list(self._items)

    def drain(self) -> list[Notification]:
        items, self._items = self._items, []
        return items
