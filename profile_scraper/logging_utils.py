"""Logging configuration helpers with structured output."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from .config import ScraperConfig

SERVICE_NAME = "profile-scraper"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, the shape serverless log drains index."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "severity": record.levelname,
            "service": getattr(record, "service", SERVICE_NAME),
            "environment": getattr(record, "environment", "unknown"),
            "logger": record.name,
            "location": f"{record.module}:{record.lineno}",
            "event": getattr(record, "event", None),
        }
        fields = record.__dict__.get("extra_fields")
        if fields:
            payload.update(fields)
        else:
            payload["message"] = record.getMessage()
        if record.exc_info:
            payload["traceback"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


class ContextFilter(logging.Filter):
    """Stamps the service, environment and a fallback event name on each record."""

    def __init__(self, environment: str, service: str = SERVICE_NAME) -> None:
        super().__init__()
        self._environment = environment
        self._service = service

    def filter(self, record: logging.LogRecord) -> bool:
        record.environment = self._environment
        record.service = self._service
        if not getattr(record, "event", None):
            record.event = f"{record.module}.{record.funcName}"
        return True


def configure_logging(config: ScraperConfig) -> None:
    """Route all records to a single stderr handler.

    Serverless hosts collect stderr, so there is no file handler. Outside of
    development every line is a JSON object.
    """
    root = logging.getLogger()
    root.setLevel(config.log_level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    if config.environment == "development":
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s", "%H:%M:%S"))
    else:
        handler.setFormatter(JsonFormatter())
    handler.addFilter(ContextFilter(config.environment))
    root.addHandler(handler)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with ``fields``.

    The message is a compact JSON line for plain-text handlers; JsonFormatter
    merges the fields into its own object instead.
    """
    payload = {"event": event, **fields}
    logger.log(
        level,
        json.dumps(payload, default=str, separators=(",", ":")),
        extra={"event": event, "extra_fields": payload},
    )
