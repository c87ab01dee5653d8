# src/habittrack/storage/gateway.py

from __future__ import annotations

"""
Persistence gateway.

Writes the task snapshot to the app-local partition and mirrors it (plus a
plain integer task count) into the shared partition read by the widget.
Reads always go to the app-local partition.

Nothing here raises to the caller: write failures are logged and reported as
False, read failures degrade to "no data".
"""

import json
import logging
from collections.abc import Iterable
from typing import Any

from ..core.ports import KeyValueRepo
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
TASK_COUNT_KEY = "task_count"


def encode_snapshot(tasks: Iterable[Task]) -> bytes:
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False).encode("utf-8")


def decode_snapshot(raw: bytes) -> list[Task]:
    data = json.loads(raw.decode("utf-8"))
    if not isinstance(data, list):
        raise ValueError("snapshot is not a list")
    return [Task.from_dict(item) for item in data]


class PersistenceGateway:
    def __init__(self, local: KeyValueRepo, shared: KeyValueRepo | None = None) -> None:
        self._local = local
        self._shared = shared

    # ---- task snapshot ----

    def save_snapshot(self, tasks: Iterable[Task]) -> bool:
        items = list(tasks)
        try:
            encoded = encode_snapshot(items)
        except Exception:
            logger.exception("Failed to encode task snapshot (n=%d)", len(items))
            return False

        ok = True
        if self._shared is not None:
            try:
                self._shared.set(TASKS_KEY, encoded)
                self._shared.set(TASK_COUNT_KEY, str(len(items)).encode("ascii"))
            except Exception:
                logger.exception("Failed to write snapshot to shared store")
                ok = False

        try:
            self._local.set(TASKS_KEY, encoded)
        except Exception:
            logger.exception("Failed to write snapshot to local store")
            ok = False

        if ok:
            logger.debug("Snapshot saved n=%d bytes=%d", len(items), len(encoded))
        return ok

    def load_snapshot(self) -> list[Task]:
        try:
            raw = self._local.get(TASKS_KEY)
        except Exception:
            logger.exception("Failed to read snapshot from local store")
            return []

        if raw is None:
            return []

        try:
            tasks = decode_snapshot(raw)
        except Exception as e:
            logger.warning("Stored snapshot is unreadable; starting empty (%s)", e)
            return []

        logger.info("Snapshot loaded n=%d", len(tasks))
        return tasks

    def load_task_count(self) -> int:
        return read_task_count(self._shared)

    # ---- settings ----

    def save_setting(self, key: str, value: Any) -> bool:
        try:
            self._local.set(key, json.dumps(value).encode("utf-8"))
            return True
        except Exception:
            logger.exception("Failed to save setting key=%s", key)
            return False

    def load_setting(self, key: str, default: Any) -> Any:
        """
        Read a JSON setting. Falls back to `default` when the key is missing,
        unreadable, or stored with a different type than the default.
        """
        try:
            raw = self._local.get(key)
        except Exception:
            logger.exception("Failed to read setting key=%s", key)
            return default

        if raw is None:
            return default

        try:
            value = json.loads(raw.decode("utf-8"))
        except Exception:
            logger.warning("Setting key=%s is unreadable; using default", key)
            return default

        if default is not None and not isinstance(value, type(default)):
            return default
        return value


def read_task_count(shared: KeyValueRepo | None) -> int:
    """Shared-store task count; 0 when the store or key is absent or unreadable."""
    if shared is None:
        return 0
    try:
        raw = shared.get(TASK_COUNT_KEY)
    except Exception:
        logger.debug("Failed to read task count from shared store", exc_info=True)
        return 0
    if raw is None:
        return 0
    try:
        return max(0, int(raw.decode("ascii").strip()))
    except ValueError:
        return 0
