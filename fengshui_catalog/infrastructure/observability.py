"""Structured Logging: JSON log lines for the catalog service.

Invariants:
    - Every line has timestamp, level, logger and message
    - Catalog extras (category, record_id, file_name, counts, error_code, path)
      appear when set
    - A logged CatalogError exception contributes its code and severity
    - setup_logging() installs exactly one catalog handler, however often it runs
"""

import json
import logging
from datetime import datetime, timezone

from fengshui_catalog.core.errors import CatalogError

HANDLER_NAME = "fengshui_catalog"

_EXTRA_FIELDS = (
    "category", "record_id", "file_name", "counts", "error_code", "path",
)
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Format records as single JSON lines, non-ASCII kept."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            exc = record.exc_info[1]
            if isinstance(exc, CatalogError):
                log.setdefault("error_code", exc.code)
                log["severity"] = exc.severity.value
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the catalog handler on the root logger, replacing a previous one."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
