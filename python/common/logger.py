"""Central level-based logger (standard library `logging`).

Env:
- LOG_LEVEL: DEBUG|INFO|WARNING|ERROR|CRITICAL (default: INFO)

Records passing through the configured handler have keytool password
arguments and `password=` pairs masked.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Optional

DEFAULT_LOGGER_NAME = "jks_provider"
MASK = "***"

_SECRET_RE = re.compile(r"(-(?:src|dest)?(?:store|key)pass\s+|password=)(\S+)", re.IGNORECASE)


def redact(text: str) -> str:
    return _SECRET_RE.sub(lambda m: m.group(1) + MASK, text)


class RedactingFilter(logging.Filter):
    """Mask secrets in the fully formatted message."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = redact(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def _level_from_env() -> int:
    raw = (os.getenv("LOG_LEVEL") or "INFO").upper().strip()
    return getattr(logging, raw, logging.INFO)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a configured logger.

    This configures the root logger once (idempotent). Output goes to stderr so
    CLI output on stdout stays machine readable.
    """
    level = _level_from_env()
    root = logging.getLogger()
    if not getattr(root, "_jks_provider_configured", False):
        handler = logging.StreamHandler()
        handler.addFilter(RedactingFilter())
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s - %(message)s",
            handlers=[handler],
        )
        setattr(root, "_jks_provider_configured", True)
    root.setLevel(level)
    return logging.getLogger(name or DEFAULT_LOGGER_NAME)
