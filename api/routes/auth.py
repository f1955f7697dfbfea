from __future__ import annotations

from urllib.parse import urlencode

from flask import Blueprint, redirect, request

from clients.google_client import build_auth_url, exchange_code, fetch_user_email
from config import FRONTEND_URL, log
from utils.auth_helpers import (
    clear_session,
    get_access_token_from_session,
    get_session_email,
    store_auth,
)
from utils.errors import OAuthError
from utils.observability import log_event

auth_bp = Blueprint("auth", __name__, url_prefix="/api")


def _frontend_redirect(error: str = ""):
    if error:
        return redirect(f"{FRONTEND_URL}?{urlencode({'error': error})}")
    return redirect(FRONTEND_URL)


# =========================
# OAuth (Gmail)
# =========================
@auth_bp.get("/auth/status")
def auth_status():
    return {"authenticated": bool(get_access_token_from_session()), "email": get_session_email()}


@auth_bp.get("/auth/gmail")
def auth_start():
    return redirect(build_auth_url())


@auth_bp.get("/auth/callback")
def auth_callback():
    code = (request.args.get("code") or "").strip()
    if not code:
        return _frontend_redirect("no_code")
    try:
        tokens = exchange_code(code)
        email = fetch_user_email(tokens["access_token"])
    except OAuthError as e:
        log.error("Error during OAuth callback: %s", e.message)
        return _frontend_redirect("auth_failed")

    store_auth(tokens, email)
    log_event("auth", "connected", user_identity=email)
    return _frontend_redirect()


@auth_bp.post("/auth/logout")
def auth_logout():
    clear_session()
    return {"success": True}
