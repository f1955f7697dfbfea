from __future__ import annotations

import re
from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence, Tuple

READ_EMAIL = "read_email"
GENERAL = "general"


@dataclass(frozen=True)
class KeywordRule:
    """Case-insensitive substring rule mapping a message to an intent label."""

    intent: str
    keywords: Tuple[str, ...]

    def matches(self, text: str) -> bool:
        lower = text.lower()
        return any(keyword in lower for keyword in self.keywords)


MAILBOX_RULE = KeywordRule(
    READ_EMAIL,
    (
        "email",
        "emails",
        "gmail",
        "inbox",
        "message",
        "messages",
        "unread",
        "latest",
        "recent",
        "mail",
        "sender",
        "from",
        "subject",
        "received",
        "yesterday",
        "today",
        "week",
    ),
)

REFRESH_RULE = KeywordRule(
    "refresh",
    (
        "refresh",
        "latest",
        "fetch again",
        "update",
        "check now",
        "get new",
        "most recent",
        "just now",
    ),
)

# Evaluated in order; first match wins.
INTENT_RULES: Sequence[KeywordRule] = (MAILBOX_RULE,)


def classify_intent_text(user_text: str, rules: Sequence[KeywordRule] = INTENT_RULES) -> str:
    """
    Classify a chat message into an intent label using ordered keyword rules.
    Returns GENERAL when nothing matches.
    """
    text = (user_text or "").strip()
    if not text:
        return GENERAL
    for rule in rules:
        if rule.matches(text):
            return rule.intent
    return GENERAL


def is_gmail_query(message: str) -> bool:
    return classify_intent_text(message) == READ_EMAIL


def wants_fresh_emails(message: str) -> bool:
    return REFRESH_RULE.matches(message or "")


# =========================
# Result count
# =========================
class EmailCountRequest(NamedTuple):
    count: int
    wants_more: bool


# "show 25", "25 emails", "top 20", "list 100". Any standalone 1-3 digit
# number counts, so "I have 2 kids" also parses as 2.
_COUNT_RE = re.compile(r"\b(\d{1,3})\b\s*(?:emails?|msgs?|messages?)?")
_MORE_RE = re.compile(r"(more|show more|next|load more)")


def parse_desired_email_count(
    message: str,
    fallback: int = 20,
    min_count: Optional[int] = 5,
    max_count: Optional[int] = 200,
) -> EmailCountRequest:
    """Extract how many emails the user wants and whether they asked for more."""
    lo = max(1, 5 if min_count is None else min_count)
    hi = min(500, 200 if max_count is None else max_count)
    m = (message or "").lower()

    count = fallback
    match = _COUNT_RE.search(m)
    if match:
        count = min(max(int(match.group(1)), lo), hi)

    return EmailCountRequest(count=count, wants_more=bool(_MORE_RE.search(m)))
