"""Logging helpers."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Render log records as compact JSON."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.default_time_format),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
        }

        extras = {
            key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS
        }
        if extras:
            data.update(extras)

        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        return json.dumps(data, ensure_ascii=False, default=str)


def _formatter(structured: bool) -> logging.Formatter:
    return JsonFormatter() if structured else logging.Formatter(_PLAIN_FORMAT)


def configure_logging(
    *,
    level: int | str = logging.INFO,
    structured: bool = True,
    log_file: Path | None = None,
) -> None:
    """Configure root logging to stdout plus an optional append-only diagnostic file."""

    root = logging.getLogger()
    root.setLevel(level)
    formatter = _formatter(structured)

    if not any(getattr(handler, "_wenyan_stream", False) for handler in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler._wenyan_stream = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    if log_file is not None:
        target = str(Path(log_file).resolve())
        existing = [
            h
            for h in root.handlers
            if isinstance(h, logging.FileHandler) and h.baseFilename == target
        ]
        if not existing:
            Path(target).parent.mkdir(parents=True, exist_ok=True)
            root.addHandler(logging.FileHandler(target, mode="a", encoding="utf-8"))

    for handler in root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "JsonFormatter"]
