from __future__ import annotations

import uuid
from typing import Any, Dict, Optional, Tuple

from flask import Response, g, jsonify, request


def _request_id() -> str:
    return getattr(g, "request_id", None) or request.headers.get("X-Request-Id") or str(uuid.uuid4())


def jerror(
    message: str,
    status: int = 400,
    code: str = "bad_request",
    extra: Optional[Dict[str, Any]] = None,
) -> Tuple[Response, int]:
    body: Dict[str, Any] = {
        "ok": False,
        "error": {"code": code, "message": message},
        "request_id": _request_id(),
    }
    if extra:
        body.update(extra)
    return jsonify(body), status


def jok(data: Any, status: int = 200) -> Tuple[Response, int]:
    return jsonify({"ok": True, "data": data, "request_id": _request_id()}), status
