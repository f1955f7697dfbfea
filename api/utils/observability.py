from __future__ import annotations

import hashlib
from typing import Any, Dict, Optional

from flask import g, has_request_context

from utils.debug_events import record_event


def user_tag(user_identity: Optional[str]) -> str:
    """Short stable tag for a mailbox identity, so raw addresses stay out of event data."""
    if not user_identity:
        return "anon"
    return hashlib.sha256(user_identity.encode("utf-8")).hexdigest()[:10]


def log_event(
    category: str,
    message: str,
    *,
    user_identity: Optional[str] = None,
    request_id: Optional[str] = None,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    payload = dict(data or {})
    if user_identity is not None:
        payload["user"] = user_tag(user_identity)
    if request_id is None and has_request_context():
        request_id = getattr(g, "request_id", None)
    return record_event(
        category,
        message,
        data=payload,
        request_id=request_id,
        level=level,
    )
