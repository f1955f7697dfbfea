from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint

from clients.openai_client import client
from config import APP_NAME, APP_VERSION, OPENAI_MODEL, REDIS_URL
from utils.json_helpers import jok

meta_bp = Blueprint("meta", __name__)


# =========================
# Meta / Health
# =========================
@meta_bp.get("/health")
def health():
    return jok(
        {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "llm": bool(client),
            "model": OPENAI_MODEL,
            "cache": "redis" if REDIS_URL else "memory",
        }
    )


@meta_bp.get("/version")
def version():
    return jok({"name": APP_NAME, "version": APP_VERSION})
