# clients/gmail_client.py
"""
Gmail fetch utilities (token-in, Email-out).
- Accepts a short-lived OAuth ACCESS TOKEN with gmail.readonly scope.
- Pages through users.messages.list up to a bounded total.
- Fetches full messages concurrently, keeping list order.
- Normalizes headers, plain-text body and the unread flag into Email.
"""

from __future__ import annotations

import base64
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Tuple

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from config import GMAIL_FETCH_WORKERS, log
from schemas.email import BODY_MAX_CHARS, Email, FetchResult
from utils.errors import MailboxError

PER_PAGE_DEFAULT = 50
PER_PAGE_MIN, PER_PAGE_MAX = 10, 100
TOTAL_LIMIT_DEFAULT = 300
TOTAL_LIMIT_MIN, TOTAL_LIMIT_MAX = 50, 1000

_UNREAD = "UNREAD"

_local = threading.local()


# =========================
# Service
# =========================
def build_service(access_token: str):
    """
    Build a Gmail API service using an OAuth ACCESS TOKEN (not an ID token).
    Required scope: gmail.readonly
    """
    if not access_token:
        raise ValueError("Missing Gmail access token")
    creds = Credentials(token=access_token)
    # 'cache_discovery=False' avoids a write attempt in serverless envs
    return build("gmail", "v1", credentials=creds, cache_discovery=False)


def _thread_service(access_token: str):
    # The underlying httplib2 transport is not thread-safe: one service per worker thread.
    cached = getattr(_local, "service", None)
    if cached is None or cached[0] != access_token:
        cached = (access_token, build_service(access_token))
        _local.service = cached
    return cached[1]


# =========================
# Helpers
# =========================
def _clamp(value: int, lo: int, hi: int) -> int:
    return min(max(int(value), lo), hi)


def _get_header(headers: List[Dict[str, str]], name: str) -> str:
    """Return first header value matching name (case-sensitive per Gmail)."""
    for h in headers or []:
        if h.get("name") == name:
            return h.get("value", "")
    return ""


def _decode_body(data: str) -> str:
    """Gmail bodies are base64url without guaranteed padding."""
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8", errors="replace")


def _extract_body(payload: Dict[str, Any]) -> str:
    inline = (payload.get("body") or {}).get("data")
    if inline:
        return _decode_body(inline)
    for part in payload.get("parts") or []:
        if part.get("mimeType") == "text/plain":
            data = (part.get("body") or {}).get("data")
            return _decode_body(data) if data else ""
    return ""


def normalize_message(msg: Dict[str, Any]) -> Email:
    """Map a users.messages.get(format=full) resource to an Email."""
    payload = msg.get("payload") or {}
    headers = payload.get("headers") or []
    return Email(
        id=msg.get("id", ""),
        subject=_get_header(headers, "Subject") or "No Subject",
        sender=_get_header(headers, "From") or "Unknown",
        date=_get_header(headers, "Date"),
        snippet=msg.get("snippet") or "",
        body=_extract_body(payload)[:BODY_MAX_CHARS],
        is_unread=_UNREAD in (msg.get("labelIds") or []),
    )


# =========================
# Fetch
# =========================
def list_message_ids(
    service,
    query: Optional[str],
    per_page: int,
    total_limit: int,
) -> Tuple[List[str], int]:
    """
    Page through users.messages.list until there is no next page or
    `total_limit` ids are collected. Returns (ids, total ids seen).
    """
    collected: List[str] = []
    total_seen = 0
    page_token: Optional[str] = None
    while True:
        list_kwargs: Dict[str, Any] = {
            "userId": "me",
            "maxResults": per_page,
            "q": query or "",
        }
        if page_token:
            list_kwargs["pageToken"] = page_token
        resp = service.users().messages().list(**list_kwargs).execute()
        msgs = resp.get("messages") or []
        total_seen += len(msgs)
        collected.extend(m["id"] for m in msgs if m.get("id"))
        page_token = resp.get("nextPageToken")
        if not page_token or len(collected) >= total_limit:
            break
    return collected[:total_limit], total_seen


def fetch_message(access_token: str, message_id: str) -> Email:
    msg = _thread_service(access_token).users().messages().get(
        userId="me",
        id=message_id,
        format="full",
    ).execute()
    return normalize_message(msg)


def fetch_emails(
    access_token: str,
    query: Optional[str] = None,
    per_page: int = PER_PAGE_DEFAULT,
    total_limit: int = TOTAL_LIMIT_DEFAULT,
) -> FetchResult:
    """
    List up to `total_limit` message ids matching `query` (Gmail search syntax),
    then fetch each message in full.

    Detail fetches run on a thread pool; results come back in list order.
    A single failed list or detail call fails the whole batch with MailboxError.
    """
    per_page = _clamp(per_page, PER_PAGE_MIN, PER_PAGE_MAX)
    total_limit = _clamp(total_limit, TOTAL_LIMIT_MIN, TOTAL_LIMIT_MAX)

    try:
        ids, total = list_message_ids(build_service(access_token), query, per_page, total_limit)
        if not ids:
            return FetchResult(emails=[], total=total)

        workers = max(1, min(GMAIL_FETCH_WORKERS, len(ids)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            emails = list(executor.map(lambda mid: fetch_message(access_token, mid), ids))
    except Exception as e:
        log.exception("Error fetching emails q=%r", query)
        raise MailboxError(f"Gmail fetch error: {e}") from e

    log.debug("Fetched %d of %d listed messages q=%r", len(emails), total, query)
    return FetchResult(emails=emails, total=total)
