# src/habittrack/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "habittrack.log"

# Minimum console level per logger prefix; first match wins.
# The reminder loop and the SQLite partitions log on every poll/open, which
# would interleave with the "> " prompt.
CONSOLE_THRESHOLDS: tuple[tuple[str, int], ...] = (
    ("habittrack.notifications.delivery", logging.WARNING),
    ("habittrack.storage.kv_store", logging.WARNING),
    ("habittrack.", logging.NOTSET),
)
OTHER_LOGGERS_THRESHOLD = logging.ERROR


class _PromptFriendlyFilter(logging.Filter):
    """Console filter: app logs pass, chatty app modules and everything else only when serious."""

    def filter(self, record: logging.LogRecord) -> bool:
        for prefix, threshold in CONSOLE_THRESHOLDS:
            if record.name.startswith(prefix):
                return record.levelno >= threshold
        # py.warnings and third-party loggers
        return record.levelno >= OTHER_LOGGERS_THRESHOLD


def setup_logging(
    *,
    log_dir: str | Path = ".local/habittrack",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Send logs to stderr (filtered, for the interactive console) and to
    <log_dir>/habittrack.log (everything at file_level).

    Replaces handlers already on the root logger, so calling it twice does not
    duplicate output. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_PromptFriendlyFilter())
    root.addHandler(console)

    to_file = logging.FileHandler(str(log_file), encoding="utf-8")
    to_file.setLevel(file_level)
    to_file.setFormatter(fmt)
    root.addHandler(to_file)

    logging.captureWarnings(True)
    return log_file
