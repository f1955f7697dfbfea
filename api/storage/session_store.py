from __future__ import annotations

import json
import secrets
from typing import Any, Dict, Optional

from config import SESSION_LIFETIME_SECS, log
from storage.email_cache_store import get_backend

KEY_PREFIX = "session"


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


def _key(session_id: str) -> str:
    return f"{KEY_PREFIX}:{session_id}"


def load_session_data(session_id: Optional[str]) -> Dict[str, Any]:
    """Server-side state for a session id; empty when unknown, expired or unreadable."""
    if not session_id:
        return {}
    raw = get_backend().get(_key(session_id))
    if raw is None:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        log.warning("Discarding malformed session entry sid=%s...", session_id[:8])
        return {}
    return data if isinstance(data, dict) else {}


def save_session_data(
    session_id: str,
    data: Dict[str, Any],
    ttl_seconds: int = SESSION_LIFETIME_SECS,
) -> bool:
    # Each write refreshes the TTL, matching a rolling cookie lifetime.
    return get_backend().setex(_key(session_id), ttl_seconds, json.dumps(data, ensure_ascii=False))


def delete_session_data(session_id: Optional[str]) -> None:
    if session_id:
        get_backend().delete(_key(session_id))
