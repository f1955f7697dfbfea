from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional, TypedDict

Role = Literal["system", "user", "assistant"]


class ChatMessage(TypedDict):
    role: Role
    content: str


class ChatRequest(TypedDict, total=False):
    message: str
    forceRefreshEmails: bool


class ChatResponse(TypedDict):
    response: str
    usedGmail: bool


@dataclass
class ChatSession:
    """Per-session state handed to the chat pipeline by the transport layer."""

    email: Optional[str] = None
    access_token: Optional[str] = None
    history: List[ChatMessage] = field(default_factory=list)


@dataclass(frozen=True)
class ChatTurnResult:
    response: str
    used_gmail: bool
    history: List[ChatMessage]
