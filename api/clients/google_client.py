from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests

from config import (
    GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET,
    GOOGLE_REDIRECT_URI,
    GOOGLE_TIMEOUT_SECS,
)
from utils.errors import OAuthError

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

SCOPES = [
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/userinfo.email",
]


# =========================
# Google helper calls (OAuth)
# =========================
def _google_get(access_token: str, url: str, params: Optional[dict] = None) -> Dict[str, Any]:
    r = requests.get(
        url,
        headers={"Authorization": f"Bearer {access_token}"},
        params=params or {},
        timeout=GOOGLE_TIMEOUT_SECS,
    )
    if r.status_code >= 400:
        raise OAuthError(f"Google GET {url} -> {r.status_code} {r.text}")
    return r.json()


def _google_post_form(url: str, form: Dict[str, str]) -> Dict[str, Any]:
    r = requests.post(url, data=form, timeout=GOOGLE_TIMEOUT_SECS)
    if r.status_code >= 400:
        raise OAuthError(f"Google POST {url} -> {r.status_code} {r.text}")
    return r.json()


def build_auth_url(state: Optional[str] = None) -> str:
    """Consent-screen URL for read-only Gmail access with a refresh token."""
    params = {
        "client_id": GOOGLE_CLIENT_ID,
        "redirect_uri": GOOGLE_REDIRECT_URI,
        "response_type": "code",
        "scope": " ".join(SCOPES),
        "access_type": "offline",
        "include_granted_scopes": "true",
    }
    if state:
        params["state"] = state
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


def exchange_code(code: str) -> Dict[str, Any]:
    """
    Trade an authorization code for tokens.
    Returns Google's token payload: access_token, expires_in, scope,
    token_type and (first consent only) refresh_token.
    """
    if not code:
        raise OAuthError("Missing authorization code")
    tokens = _google_post_form(GOOGLE_TOKEN_URL, {
        "code": code,
        "client_id": GOOGLE_CLIENT_ID,
        "client_secret": GOOGLE_CLIENT_SECRET,
        "redirect_uri": GOOGLE_REDIRECT_URI,
        "grant_type": "authorization_code",
    })
    if not tokens.get("access_token"):
        raise OAuthError("Token response did not include an access_token")
    return tokens


def fetch_user_email(access_token: str) -> Optional[str]:
    info = _google_get(access_token, GOOGLE_USERINFO_URL)
    return info.get("email") or None
