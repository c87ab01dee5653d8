# tests/fakes.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from habittrack.notifications.center import NotificationRequest, ScheduleResult


class FixedClock:
    """Deterministic clock; tests move time explicitly with advance()."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class MemoryKV:
    """In-memory KeyValueRepo."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class BrokenKV(MemoryKV):
    """KeyValueRepo whose writes always fail (disk full, read-only FS, ...)."""

    def set(self, key: str, value: bytes) -> None:
        raise OSError("disk full")


class ExplodingNotificationCenter:
    """NotificationCenter whose scheduling calls raise."""

    def __init__(self) -> None:
        self.removed: list[str] = []

    def request_authorization(self) -> ScheduleResult:
        raise RuntimeError("host scheduler unavailable")

    def add(self, request: NotificationRequest) -> ScheduleResult:
        raise RuntimeError("host scheduler unavailable")

    def remove_pending(self, identifiers: Iterable[str]) -> None:
        self.removed.extend(identifiers)

    def pending_requests(self) -> list[NotificationRequest]:
        return []

    def pop_due(self, now: datetime) -> list[NotificationRequest]:
        return []


@dataclass(slots=True)
class SentMessage:
    text: str
    title: str | None


@dataclass(slots=True)
class FakeMessenger:
    """
    Fake OutboundMessenger used by reminder loop tests.
    """

    sent: list[SentMessage] = field(default_factory=list)
    fail: bool = False

    async def send_text(self, *, text: str, title: str | None = None) -> None:
        if self.fail:
            raise ConnectionError("terminal gone")
        self.sent.append(SentMessage(text=text, title=title))
