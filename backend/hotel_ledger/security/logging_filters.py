"""Logging setup and a filter that scrubs credentials from log records."""

from __future__ import annotations

import logging
import re

from asgi_correlation_id import CorrelationIdFilter

_SENSITIVE_PATTERN = re.compile(
    r"(Authorization: Bearer\s+[\w\.-]+|access_token\"\s*:\s*\"[^\"]+\"|password\"\s*:\s*\"[^\"]+\")",
    re.IGNORECASE,
)

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"


class SensitiveFilter(logging.Filter):
    """Replace sensitive tokens in log messages with a redaction marker."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = _SENSITIVE_PATTERN.sub("**REDACTED**", record.msg)
        return True


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler with request-id and redaction filters."""
    root = logging.getLogger()
    if any(getattr(handler, "_hotel_ledger", False) for handler in root.handlers):
        return
    handler = logging.StreamHandler()
    handler._hotel_ledger = True  # type: ignore[attr-defined]
    handler.addFilter(CorrelationIdFilter(uuid_length=32, default_value="-"))
    handler.addFilter(SensitiveFilter())
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper())


__all__ = ["SensitiveFilter", "configure_logging"]
