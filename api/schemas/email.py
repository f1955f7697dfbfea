from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

BODY_MAX_CHARS = 500


@dataclass(frozen=True)
class Email:
    """A Gmail message normalized for prompting and caching.

    Serialized with the wire keys ``from`` and ``isUnread`` so cached
    payloads stay readable by other clients of the same Redis.
    """

    id: str
    subject: str = "No Subject"
    sender: str = "Unknown"
    date: str = ""
    snippet: str = ""
    body: str = ""
    is_unread: bool = False

    def __post_init__(self) -> None:
        if len(self.body) > BODY_MAX_CHARS:
            object.__setattr__(self, "body", self.body[:BODY_MAX_CHARS])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "subject": self.subject,
            "from": self.sender,
            "date": self.date,
            "snippet": self.snippet,
            "body": self.body,
            "isUnread": self.is_unread,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Email":
        """Inverse of to_dict. Raises KeyError/TypeError on malformed input."""
        return cls(
            id=str(data["id"]),
            subject=str(data.get("subject", "No Subject")),
            sender=str(data.get("from", "Unknown")),
            date=str(data.get("date", "")),
            snippet=str(data.get("snippet", "")),
            body=str(data.get("body", "")),
            is_unread=bool(data.get("isUnread", False)),
        )


@dataclass(frozen=True)
class FetchResult:
    emails: List[Email] = field(default_factory=list)
    total: int = 0
