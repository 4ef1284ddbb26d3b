"""
Logging utilities with sensitive data masking.

API keys, session tokens and MPC share blobs flow through almost every call
in this package; nothing that reaches a log record may carry them in clear.

Usage:
    import logging
    from portal_wallet.logging import configure_logging, mask_sensitive_data

    configure_logging(level="INFO", json_format=False)
    logger = logging.getLogger(__name__)

    logger.info("Client created", extra=mask_sensitive_data({
        "client_id": "cl_123",
        "client_api_key": "secret",  # Will be masked
    }))
"""
from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

MASK_PATTERN = "***"
MAX_LOG_MESSAGE_LENGTH = 10_000

SENSITIVE_FIELDS = frozenset({
    "share",
    "api_key",
    "apikey",
    "client_api_key",
    "clientapikey",
    "custodian_api_key",
    "session_token",
    "client_session_token",
    "clientsessiontoken",
    "authorization",
    "password",
    "secret",
})

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
    "created", "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "message", "taskName",
})


def mask_value(value: str, show_chars: int = 4) -> str:
    """Mask a sensitive value, optionally showing first/last characters."""
    if not value or len(value) <= show_chars * 2:
        return MASK_PATTERN
    return f"{value[:show_chars]}...{value[-show_chars:]}"


def is_sensitive_key(key: str) -> bool:
    """Check if a key name indicates sensitive data."""
    key_lower = key.lower().replace("-", "_")
    if key_lower in SENSITIVE_FIELDS:
        return True
    # Identifiers of shares and tokens are safe to log
    if key_lower.endswith(("id", "ids")):
        return False
    return any(
        sensitive in key_lower for sensitive in ("secret", "token", "api_key", "apikey", "share")
    )


def mask_sensitive_data(
    data: Any,
    additional_fields: Optional[Sequence[str]] = None,
    _depth: int = 0,
    _max_depth: int = 10,
) -> Any:
    """Recursively mask sensitive data in a data structure.

    Returns a copy; the input is never modified.
    """
    if _depth > _max_depth:
        return data

    if isinstance(data, dict):
        result = {}
        for key, value in data.items():
            if is_sensitive_key(str(key)) or (additional_fields and key in additional_fields):
                result[key] = MASK_PATTERN
            else:
                result[key] = mask_sensitive_data(value, additional_fields, _depth + 1, _max_depth)
        return result

    if isinstance(data, (list, tuple)):
        return type(data)(
            mask_sensitive_data(item, additional_fields, _depth + 1, _max_depth)
            for item in data
        )

    if isinstance(data, str):
        return _mask_inline_patterns(data)

    return data


def _mask_inline_patterns(text: str) -> str:
    """Mask bearer credentials embedded in free text."""
    if len(text) > MAX_LOG_MESSAGE_LENGTH:
        text = text[:MAX_LOG_MESSAGE_LENGTH] + "...[truncated]"
    return re.sub(r"(Bearer\s+)[a-zA-Z0-9._-]+", r"\1***", text, flags=re.IGNORECASE)


class StructuredFormatter(logging.Formatter):
    """JSON formatter; extras are masked before serialization."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _mask_inline_patterns(record.getMessage()),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        log_data.update(mask_sensitive_data(extras))

        return json.dumps(log_data, default=str)


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Install a single stderr handler on the root logger."""
    handler = logging.StreamHandler(sys.stderr)
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())

    logging.getLogger("httpx").setLevel(logging.WARNING)
