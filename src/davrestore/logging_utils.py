"""Structured diagnostic logging for davrestore."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

EVENT_KEY_ORDER: dict[str, list[str]] = {
    "run_start": [
        "ts",
        "level",
        "base_url",
        "user",
        "cutoff",
        "shard",
        "total_shards",
        "range_start",
        "range_end",
        "prefix",
        "verify_tls",
    ],
    "run_stop": [
        "ts",
        "level",
        "reason",
        "restored",
        "already_present",
        "failed",
        "elapsed_ms",
        "error_type",
        "error",
    ],
    "dav_request": [
        "ts",
        "level",
        "method",
        "url",
        "depth",
        "destination",
        "status",
        "elapsed_ms",
    ],
    "dav_retry": [
        "ts",
        "level",
        "operation",
        "target",
        "attempt",
        "sleep_sec",
        "result",
        "status",
        "error_type",
        "error",
    ],
    "entry_outcome": [
        "ts",
        "level",
        "destination",
        "kind",
        "outcome",
        "attempts",
        "status",
        "reason",
    ],
}
DEFAULT_EVENT_KEY_ORDER = ["ts", "level"]
EVENT_FIELDS_ATTR = "event_fields"


def sanitize_error_message(error_msg: str) -> str:
    """Remove credentials from error text before it is logged or shown."""
    sanitized = re.sub(
        r"(Authorization:\s*Basic)\s+[A-Za-z0-9+/=]+",
        r"\1 [REDACTED]",
        error_msg,
        flags=re.IGNORECASE,
    )
    sanitized = re.sub(
        r"(https?://)[^/\s:@]+:[^/\s@]+@",
        r"\1[REDACTED]@",
        sanitized,
    )
    return sanitized


def _to_log_safe(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _to_log_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_log_safe(v) for v in value]
    return str(value)


def _field_order(event_name: str, fields: dict[str, Any]) -> list[str]:
    preferred = EVENT_KEY_ORDER.get(event_name, DEFAULT_EVENT_KEY_ORDER)
    rank = {key: index for index, key in enumerate(preferred)}
    present = [key for key, value in fields.items() if value is not None]
    return sorted(present, key=lambda key: (rank.get(key, len(rank)), key))


class StructuredTextFormatter(logging.Formatter):
    """Render each record as an `=== event ===` header plus `key: value` lines.

    davrestore events carry their fields on the record (see `log_event`);
    records from other loggers, such as httpx, render their message text.
    """

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = dict(getattr(record, EVENT_FIELDS_ATTR, None) or {})
        event_name = str(fields.pop("event", record.name))
        if not fields:
            fields["message"] = record.getMessage()
        fields["level"] = record.levelname

        lines = [f"=== {event_name} ==="]
        for key in _field_order(event_name, fields):
            value = str(fields[key]).replace("\n", "\\n")
            lines.append(f"{key}: {value}")
        if record.exc_info:
            lines.extend(["traceback:", self.formatException(record.exc_info)])
        return "\n".join(lines) + "\n"


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Emit a structured log event."""
    payload: dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
    }
    for key, value in fields.items():
        if isinstance(value, str) and key in ("error", "reason"):
            value = sanitize_error_message(value)
        payload[key] = _to_log_safe(value)
    logging.getLogger("davrestore").log(
        level,
        json.dumps(payload, ensure_ascii=False, separators=(",", ":")),
        extra={EVENT_FIELDS_ATTR: payload},
    )


def before_sleep_log_event(
    *,
    operation: str,
    target: str,
    level: int = logging.WARNING,
):
    """Build a tenacity before_sleep callback that emits structured retry logs."""

    def _callback(retry_state: Any) -> None:
        outcome = getattr(retry_state, "outcome", None)
        next_action = getattr(retry_state, "next_action", None)
        if outcome is None:
            return

        payload: dict[str, Any] = {
            "operation": operation,
            "target": target,
            "attempt": retry_state.attempt_number,
            "sleep_sec": getattr(next_action, "sleep", None),
        }
        if outcome.failed:
            error = outcome.exception()
            payload["result"] = "raised"
            payload["error_type"] = type(error).__name__
            payload["error"] = str(error)
        else:
            payload["result"] = "returned"
            payload["status"] = getattr(outcome.result(), "status", None)

        log_event("dav_retry", level=level, **payload)

    return _callback


def setup_logging(log_file: Optional[Path] = None) -> None:
    """Route davrestore events to `log_file`, or silence them."""
    logger = logging.getLogger("davrestore")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file is None:
        logger.addHandler(logging.NullHandler())
        logger.propagate = False
        return

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(str(log_file), encoding="utf-8")
    handler.setFormatter(StructuredTextFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
