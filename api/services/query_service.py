from __future__ import annotations

import re
from typing import List, NamedTuple, Optional

_YEAR_RE = re.compile(r"\b(20\d{2})\b")
_FROM_RE = re.compile(
    r"(?:emails?\s+)?from\s+([a-z0-9._%+\-@]+(?:\.[a-z0-9-]+)*|[a-z]+(?:\s+[a-z]+){0,3})"
)
_SENDER_JUNK_RE = re.compile(r"[^a-z0-9@._\-\s]")
_TOPIC_RE = re.compile(r"(?:about|regarding)\s+([\w\s]{3,50})")
_RECENCY_RE = re.compile(r"today|latest|recent|this week|yesterday|now")


class GmailQuery(NamedTuple):
    query: Optional[str]
    reason: Optional[str]


def _year_range(m: str) -> Optional[str]:
    match = _YEAR_RE.search(m)
    if not match:
        return None
    year = int(match.group(1))
    return f"after:{year}/01/01 before:{year + 1}/01/01"


def _sender(m: str) -> Optional[str]:
    match = _FROM_RE.search(m)
    if not match:
        return None
    sender = _SENDER_JUNK_RE.sub("", match.group(1)).strip()
    if not sender:
        return None
    if "@" in sender or "." in sender:
        parts = sender.split("@")
        domain = parts[1] if len(parts) > 1 and parts[1] else sender
        return f"from:{domain}"
    return "from:" + re.sub(r"\s+", "", sender)


def _topic(m: str) -> Optional[str]:
    match = _TOPIC_RE.search(m)
    if not match:
        return None
    return "{" + re.sub(r"\s+", " ", match.group(1).strip()) + "}"


def _recency(m: str) -> Optional[str]:
    if not _RECENCY_RE.search(m):
        return None
    if "yesterday" in m:
        return "newer_than:2d"
    if "week" in m:
        return "newer_than:7d"
    return "newer_than:1d"


def build_gmail_query_from_message(message: str) -> GmailQuery:
    """
    Translate a chat message into Gmail search syntax.

    Fragments are emitted in a fixed order (year range, sender, topic,
    unread, recency) and joined with spaces. Returns a null query when
    nothing in the message maps to a search operator.
    """
    m = (message or "").lower()
    parts: List[str] = []

    for fragment in (_year_range(m), _sender(m), _topic(m)):
        if fragment:
            parts.append(fragment)
    if "unread" in m:
        parts.append("is:unread")
    recency = _recency(m)
    if recency:
        parts.append(recency)

    q = " ".join(parts).strip()
    if not q:
        return GmailQuery(query=None, reason=None)
    return GmailQuery(query=q, reason="derived from user message")
