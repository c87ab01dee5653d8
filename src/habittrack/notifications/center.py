# src/habittrack/notifications/center.py

from __future__ import annotations

"""
In-process local notification center.

Plays the role of the host OS scheduler: it keeps at most one pending one-shot
request per identifier and hands out the requests whose fire time has passed.
It knows nothing about tasks; ReminderScheduler builds the requests.
"""

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class NotificationRequest:
    identifier: str
    title: str
    body: str
    fire_at: datetime


@dataclass(slots=True, frozen=True)
class ScheduleResult:
    ok: bool
    error: str | None = None

    @classmethod
    def success(cls) -> ScheduleResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str) -> ScheduleResult:
        return cls(ok=False, error=error)


class LocalNotificationCenter:
    """
    Pending-request registry keyed by identifier.

    Authorization:
    - enabled=False behaves like a user who denied the permission prompt:
      request_authorization() and add() return failures.
    - add() before request_authorization() is allowed (the prompt is implicit).

    Thread-safety:
    - all access goes through one lock (console thread + reminder loop thread)
    """

    def __init__(self, *, enabled: bool = True) -> None:
        self._enabled = enabled
        self._authorized: bool | None = None
        self._pending: dict[str, NotificationRequest] = {}
        self._lock = threading.Lock()

    @property
    def authorized(self) -> bool:
        return bool(self._authorized) if self._authorized is not None else self._enabled

    def request_authorization(self) -> ScheduleResult:
        self._authorized = self._enabled
        if not self._enabled:
            return ScheduleResult.failure("notification permission denied")
        return ScheduleResult.success()

    def add(self, request: NotificationRequest) -> ScheduleResult:
        if not self.authorized:
            return ScheduleResult.failure("notification permission denied")
        with self._lock:
            replaced = request.identifier in self._pending
            self._pending[request.identifier] = request
        logger.debug(
            "Notification %s id=%s fire_at=%s",
            "replaced" if replaced else "added",
            request.identifier,
            request.fire_at.isoformat(),
        )
        return ScheduleResult.success()

    def remove_pending(self, identifiers: Iterable[str]) -> None:
        with self._lock:
            for ident in identifiers:
                if self._pending.pop(ident, None) is not None:
                    logger.debug("Notification removed id=%s", ident)

    def pending_requests(self) -> list[NotificationRequest]:
        with self._lock:
            return sorted(self._pending.values(), key=lambda r: r.fire_at)

    def get_pending(self, identifier: str) -> NotificationRequest | None:
        with self._lock:
            return self._pending.get(identifier)

    def pop_due(self, now: datetime) -> list[NotificationRequest]:
        """Remove and return every request with fire_at <= now (one-shot)."""
        with self._lock:
            due = [r for r in self._pending.values() if r.fire_at <= now]
            for r in due:
                del self._pending[r.identifier]
        due.sort(key=lambda r: r.fire_at)
        return due
