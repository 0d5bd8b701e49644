"""Logging setup for the zonaldrill CLI."""

from __future__ import annotations

import json
import logging
import sys
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

# Attributes present on every LogRecord; anything else came in via ``extra``.
_RECORD_FIELDS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


@dataclass(frozen=True)
class LogOptions:
    """Configuration for logging output."""

    verbose: int = 0
    quiet: bool = False
    log_file: Path | None = None
    json_console: bool = False


def new_request_id() -> str:
    """Return a short hex identifier for correlating one drill's log lines."""
    return uuid.uuid4().hex[:8]


class RequestContextFilter(logging.Filter):
    """Attach a request identifier to records that do not carry one."""

    def __init__(self, request_id: str | None = None) -> None:
        super().__init__()
        self.request_id = request_id

    def filter(self, record: logging.LogRecord) -> bool:
        if self.request_id and not getattr(record, "request", None):
            record.request = self.request_id
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, including ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra = {
            key: value for key, value in record.__dict__.items() if key not in _RECORD_FIELDS
        }
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class HumanFormatter(logging.Formatter):
    """Prefix log lines with the request they belong to, when known."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        request = getattr(record, "request", None)
        if request:
            return f"[{request}] {message}"
        return message


def _console_level(options: LogOptions) -> int:
    if options.quiet:
        return logging.WARNING
    if options.verbose > 0:
        return logging.DEBUG
    return logging.INFO


def configure_logging(options: LogOptions, *, request_id: str | None = None) -> logging.Logger:
    """Install console (and optional JSON file) handlers on the root logger."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.DEBUG)
    context = RequestContextFilter(request_id)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(_console_level(options))
    console.setFormatter(
        JsonFormatter() if options.json_console else HumanFormatter("%(levelname)s: %(message)s")
    )
    console.addFilter(context)
    root.addHandler(console)

    if options.log_file:
        options.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(options.log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JsonFormatter())
        file_handler.addFilter(context)
        root.addHandler(file_handler)

    # rasterio logs every GDAL environment change at debug level.
    logging.getLogger("rasterio").setLevel(max(logging.INFO, console.level))
    return root
