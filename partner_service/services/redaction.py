from __future__ import annotations
from typing import Any

DEFAULT_SENSITIVE_KEYS = {
    "password", "secret",
    "client_id", "client_secret",
    "token", "access_token", "refresh_token",
    "api_key", "authorization",
    "encryption_key",
}

REDACTED = "**********"

def redact_payload(value: Any, *, extra_keys: set[str] | None = None) -> Any:
    """Copy ``value`` with sensitive keys masked at any depth. Keys match exactly, case-insensitively."""
    sensitive = set(DEFAULT_SENSITIVE_KEYS)
    if extra_keys:
        sensitive |= {k.lower() for k in extra_keys}

    def _walk(v: Any) -> Any:
        if isinstance(v, dict):
            return {
                k: REDACTED if isinstance(k, str) and k.lower() in sensitive else _walk(vv)
                for k, vv in v.items()
            }
        if isinstance(v, (list, tuple)):
            return [_walk(x) for x in v]
        return v

    return _walk(value)
