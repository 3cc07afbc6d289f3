"""
JSONL logging bootstrap for hosts and the CLI.
Installs a single structured JSONL sink on the root logger.

Resolution events carry their context as record extras (see
ResolutionError.log_fields); the sink nests them under a "require" key:

    {"ts": ..., "lvl": "DEBUG", "event": "require.failed", "message": ...,
     "require": {"specifier": "../x", "requester": "/main.a", "error_kind": "out_of_root"}}
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path

DEFAULT_PATH = os.environ.get("REQUIRE_LOG_PATH", "./require-resolution.log.jsonl")
DEFAULT_LEVEL = os.environ.get("REQUIRE_LOG_LEVEL", "INFO").upper()

RESOLUTION_FIELDS = ("specifier", "requester", "target", "error_kind", "chain")


class JsonlHandler(logging.Handler):
    """Appends one JSON object per record to `path`."""

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def format_record(self, record: logging.LogRecord) -> dict:
        payload = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "lvl": record.levelname,
            "schema": {"name": "require.log", "ver": "1.0.0"},
            "logger": record.name,
            "event": getattr(record, "event", None),
            "message": record.getMessage(),
        }
        context = {}
        for field in RESOLUTION_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                context[field] = value
        if context:
            payload["require"] = context
        if record.exc_info:
            payload["exc"] = logging.Formatter().formatException(record.exc_info)
        return payload

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = json.dumps(self.format_record(record), ensure_ascii=False, default=str)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception:
            self.handleError(record)


def init_json_logging(path: str | None = None, level: str | None = None) -> JsonlHandler:
    """Install the JSONL sink on the root logger, replacing an earlier one.

    Args:
        path: Output file (default: $REQUIRE_LOG_PATH)
        level: Root log level name (default: $REQUIRE_LOG_LEVEL, then INFO)
    """
    path = path or DEFAULT_PATH
    level = (level or DEFAULT_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    for h in list(root.handlers):
        if isinstance(h, JsonlHandler):
            root.removeHandler(h)
    handler = JsonlHandler(path)
    root.addHandler(handler)
    return handler
