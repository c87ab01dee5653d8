# src/habittrack/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps storage and the host notification scheduler swappable and makes
testing easier.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any, Awaitable, Protocol

from ..notifications.center import NotificationRequest, ScheduleResult


class KeyValueRepo(Protocol):
    """Durable byte-oriented key-value partition (app-local or shared)."""

    def get(self, key: str) -> bytes | None: ...
    def set(self, key: str, value: bytes) -> None: ...
    def delete(self, key: str) -> None: ...


class NotificationCenter(Protocol):
    """
    Host-side one-shot notification scheduler.

    add() replaces any pending request with the same identifier.
    remove_pending() ignores identifiers that have nothing scheduled.
    """

    def request_authorization(self) -> ScheduleResult: ...
    def add(self, request: NotificationRequest) -> ScheduleResult: ...
    def remove_pending(self, identifiers: Iterable[str]) -> None: ...
    def pending_requests(self) -> list[NotificationRequest]: ...
    def pop_due(self, now: datetime) -> list[NotificationRequest]: ...


class OutboundMessenger(Protocol):
    """
    Connector-side port: how the reminder loop shows a fired reminder.

    The console connector prints it; tests collect it.
    """

    def send_text(self, *, text: str, title: str | None = None) -> Awaitable[None]: ...


class SnapshotGateway(Protocol):
    def save_snapshot(self, tasks: Iterable[Any]) -> bool: ...
    def load_snapshot(self) -> list[Any]: ...
