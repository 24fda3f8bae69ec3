"""
Root logging setup — called once from the app factory.

text:  human-readable lines for local dev
json:  one JSON object per line for hosted log collectors
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = ("path", "status_code", "email")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    root = logging.getLogger()
    # Re-running the factory (tests, reloads) must not stack handlers
    for handler in list(root.handlers):
        if getattr(handler, "_waitlist_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    handler._waitlist_handler = True
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
