from __future__ import annotations

from collections.abc import Mapping
from typing import Any

REDACTED = "***REDACTED***"

SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "secret",
        "token",
        "api_key",
        "password",
        "authorization",
    }
)

# Model inputs and outputs can be arbitrarily large; logs only keep a preview.
PAYLOAD_KEYS: frozenset[str] = frozenset(
    {
        "prompt",
        "response",
        "decision",
        "document",
    }
)


def _is_sensitive_key(key: str) -> bool:
    normalized = key.lower()
    return any(sensitive in normalized for sensitive in SENSITIVE_KEYS)


def _is_payload_key(key: str) -> bool:
    normalized = key.lower()
    return any(payload in normalized for payload in PAYLOAD_KEYS)


def clip_payload(value: str, max_chars: int) -> str:
    if len(value) <= max_chars:
        return value
    return f"{value[:max_chars]}... [{len(value) - max_chars} more chars]"


def redact_sensitive(data: Any, *, max_payload_chars: int = 200) -> Any:
    if isinstance(data, Mapping):
        redacted: dict[Any, Any] = {}
        for key, value in data.items():
            if _is_sensitive_key(str(key)):
                redacted[key] = REDACTED
            elif isinstance(value, str) and _is_payload_key(str(key)):
                redacted[key] = clip_payload(value, max_payload_chars)
            else:
                redacted[key] = redact_sensitive(value, max_payload_chars=max_payload_chars)
        return redacted
    if isinstance(data, list):
        return [redact_sensitive(item, max_payload_chars=max_payload_chars) for item in data]
    return data
