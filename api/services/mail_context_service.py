from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from clients.gmail_client import fetch_emails
from config import log
from schemas.email import Email
from services.intent_service import parse_desired_email_count, wants_fresh_emails
from services.query_service import build_gmail_query_from_message
from storage.email_cache_store import cache_emails, count_key, get_cached_emails, query_key
from utils.observability import log_event

COUNT_FALLBACK = 20
COUNT_MIN = 5
COUNT_MAX = 200

QUERY_PER_PAGE = 100
QUERY_TOTAL_LIMIT = 500


@dataclass
class EmailContext:
    emails: List[Email] = field(default_factory=list)
    meta_notes: List[str] = field(default_factory=list)
    query: Optional[str] = None
    from_cache: bool = False


def resolve_email_context(
    message: str,
    user_identity: Optional[str],
    access_token: str,
    force_refresh: bool = False,
) -> EmailContext:
    """
    Load the emails a chat message is asking about.

    A message that maps to a Gmail search is served from the query-scoped
    cache or a bounded search; anything else loads the N most recent emails
    through the count-scoped cache. The cache is skipped entirely when the
    caller forces a refresh, the message asks for fresh mail, or the user
    wants more results than last time.
    """
    desired = parse_desired_email_count(
        message, fallback=COUNT_FALLBACK, min_count=COUNT_MIN, max_count=COUNT_MAX
    )
    should_force = bool(force_refresh) or wants_fresh_emails(message) or desired.wants_more

    q = build_gmail_query_from_message(message).query
    if q:
        return _resolve_query(q, user_identity, access_token, should_force)
    return _resolve_recent(desired.count, user_identity, access_token, should_force)


def _resolve_query(q: str, user_identity: Optional[str], access_token: str, force: bool) -> EmailContext:
    key = query_key(user_identity, q)
    if not force:
        cached = get_cached_emails(key)
        if cached is not None:
            log.debug("Using cached query emails q=%r", q)
            log_event("cache", "query_hit", user_identity=user_identity, data={"count": len(cached)})
            return EmailContext(emails=cached, query=q, from_cache=True)

    log.debug("Fetching query-filtered emails from Gmail q=%r", q)
    result = fetch_emails(access_token, query=q, per_page=QUERY_PER_PAGE, total_limit=QUERY_TOTAL_LIMIT)
    cache_emails(key, result.emails)
    log_event(
        "cache",
        "query_miss",
        user_identity=user_identity,
        data={"forced": force, "count": len(result.emails), "total": result.total},
    )
    note = f"Search matched ~{result.total} messages (showing up to {len(result.emails)})."
    return EmailContext(emails=result.emails, meta_notes=[note], query=q)


def _resolve_recent(desired: int, user_identity: Optional[str], access_token: str, force: bool) -> EmailContext:
    key = count_key(user_identity, desired)
    if not force:
        cached = get_cached_emails(key)
        # A shorter list cached under this key cannot satisfy the request.
        if cached is not None and len(cached) >= desired:
            log.debug("Using cached recent emails n=%d", desired)
            log_event("cache", "recent_hit", user_identity=user_identity, data={"count": len(cached)})
            return EmailContext(emails=cached, from_cache=True)

    log.debug("Fetching recent emails from Gmail n=%d", desired)
    result = fetch_emails(access_token, per_page=desired, total_limit=desired)
    cache_emails(key, result.emails)
    log_event(
        "cache",
        "recent_miss",
        user_identity=user_identity,
        data={"forced": force, "desired": desired, "count": len(result.emails), "total": result.total},
    )
    note = f"Loaded recent emails (showing {len(result.emails)} of ~{result.total})."
    return EmailContext(emails=result.emails, meta_notes=[note])
