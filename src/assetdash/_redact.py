"""Helpers for safe debug logging.

Configuration payloads carry operator contact details and requests may
carry auth headers. :func:`redact_for_log` scrubs such fields before
they reach DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

_MAX_DEPTH = 20

# Replaced wholesale.
_SECRET_KEYS: frozenset[str] = frozenset(
    {
        "authorization",
        "cookie",
        "password",
        "token",
        "access_token",
        "refresh_token",
    }
)

# Reduced to a shape that still tells two operators apart in a log.
_CONTACT_KEYS: frozenset[str] = frozenset({"alert_email"})


def mask_email(address: str) -> str:
    """``"ops.lead@example.com"`` → ``"o***@example.com"``."""
    local, at, domain = address.partition("@")
    if not at or not local:
        return "<redacted>"
    return f"{local[0]}***@{domain}"


def _redact_pair(key: str, value: Any, max_string: int, depth: int) -> Any:
    lowered = key.lower()
    if lowered in _SECRET_KEYS:
        return "<redacted>"
    if lowered in _CONTACT_KEYS:
        return mask_email(value) if isinstance(value, str) and value else value
    return redact_for_log(value, max_string=max_string, _depth=depth + 1)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted, JSON-friendly copy of *value* for debug logs.

    Models are dumped first, long strings are truncated and byte blobs
    are reduced to their length.
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, BaseModel):
        return redact_for_log(value.model_dump(mode="json"), max_string=max_string, _depth=_depth + 1)
    if isinstance(value, Mapping):
        return {str(k): _redact_pair(str(k), v, max_string, _depth) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
    return repr(value)
