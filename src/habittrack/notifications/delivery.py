# src/habittrack/notifications/delivery.py

from __future__ import annotations

"""
Reminder delivery loop.

A small polling loop that:
- pops reminders whose fire time has passed from the notification center,
- hands them to an injected messenger port.

Reminders are one-shot: a failed delivery is logged and not retried.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from ..core.ports import NotificationCenter, OutboundMessenger

logger = logging.getLogger(__name__)


async def deliver_due_reminders(
        center: NotificationCenter,
        messenger: OutboundMessenger,
        now: datetime,
) -> int:
    """Deliver everything due at `now`; returns the number of successful deliveries."""
    try:
        due = center.pop_due(now)
    except Exception:
        logger.exception("pop_due failed")
        return 0

    delivered = 0
    for request in due:
        try:
            await messenger.send_text(text=request.body, title=request.title)
            delivered += 1
            logger.info("Reminder delivered id=%s", request.identifier)
        except Exception:
            logger.exception("Reminder delivery failed id=%s", request.identifier)
    return delivered


async def run_reminder_loop(
        center: NotificationCenter,
        messenger: OutboundMessenger,
        clock: Callable[[], datetime],
        *,
        interval_seconds: float = 30.0,
) -> None:
    """
    Every interval_seconds deliver the reminders that are due.

    To stop the loop, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        await deliver_due_reminders(center, messenger, clock())
        await asyncio.sleep(sleep_s)
