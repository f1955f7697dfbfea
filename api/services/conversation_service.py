from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from clients.openai_client import coerce_messages
from schemas.chat import ChatMessage

MAX_HISTORY_MESSAGES = 50
CONTEXT_HISTORY_MESSAGES = 10


def recent_context(history: Optional[Sequence[ChatMessage]]) -> List[Dict[str, str]]:
    """
    The slice of stored history forwarded to the model on the next turn.

    Malformed and empty-content entries are filtered out before slicing, so
    the model always sees the newest CONTEXT_HISTORY_MESSAGES usable entries.
    """
    return coerce_messages(list(history or []))[-CONTEXT_HISTORY_MESSAGES:]


def build_model_messages(
    system_prompt: str,
    history: Optional[Sequence[ChatMessage]],
    user_prompt: str,
) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": system_prompt.strip()},
        *recent_context(history),
        {"role": "user", "content": user_prompt.strip()},
    ]


def append_turn(
    history: Optional[Sequence[ChatMessage]],
    user_content: str,
    assistant_content: str,
) -> List[ChatMessage]:
    """Return a new history with one exchange appended, capped to the newest entries."""
    updated: List[ChatMessage] = list(history or [])
    updated.append({"role": "user", "content": user_content.strip()})
    updated.append({"role": "assistant", "content": assistant_content})
    return updated[-MAX_HISTORY_MESSAGES:]
