"""Logging for the game client and the leaderboard service.

Game events attach their fields through ``extra={"data": {...}}``; the
console shows them as ``key=value`` pairs and the log file keeps them
as JSON.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

ROOT = "cyberfish"


def _fields(record: logging.LogRecord) -> dict:
    data = getattr(record, "data", None)
    return data if isinstance(data, dict) else {}


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc)
                          .isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
            **_fields(record),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """`12:00:01 W leaderboard: Score not saved name=Rex score=3`"""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        name = record.name[len(ROOT) + 1:] if record.name.startswith(ROOT + ".") else record.name
        line = f"{ts} {record.levelname[0]} {name}: {record.getMessage()}"
        pairs = " ".join(f"{k}={v}" for k, v in _fields(record).items())
        if pairs:
            line = f"{line} {pairs}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(level: str = "info", log_file: str | None = None) -> None:
    root = logging.getLogger(ROOT)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(ConsoleFormatter())
    root.addHandler(console)

    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(JsonLineFormatter())
        root.addHandler(fh)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT}.{name}")
