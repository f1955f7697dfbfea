from __future__ import annotations

from typing import Any, Dict, List, Optional

from flask import session

from schemas.chat import ChatMessage, ChatSession
from storage.session_store import (
    delete_session_data,
    load_session_data,
    new_session_id,
    save_session_data,
)

# The signed cookie carries only the session id; everything below lives
# server-side in storage.session_store.
SESSION_ID = "sid"

SESSION_TOKENS = "tokens"
SESSION_EMAIL = "email"
SESSION_HISTORY = "chatHistory"


# =========================
# Session id
# =========================
def _session_id() -> Optional[str]:
    sid = session.get(SESSION_ID)
    return sid if isinstance(sid, str) and sid else None


def _ensure_session_id() -> str:
    sid = _session_id()
    if sid is None:
        sid = new_session_id()
        session.permanent = True
        session[SESSION_ID] = sid
    return sid


def _load_state() -> Dict[str, Any]:
    return load_session_data(_session_id())


def _update_state(**changes: Any) -> None:
    sid = _ensure_session_id()
    state = load_session_data(sid)
    state.update(changes)
    save_session_data(sid, state)


# =========================
# Session helpers
# =========================
def get_session_tokens() -> Optional[Dict[str, Any]]:
    tokens = _load_state().get(SESSION_TOKENS)
    return tokens if isinstance(tokens, dict) else None


def get_session_email() -> Optional[str]:
    return _load_state().get(SESSION_EMAIL)


def get_access_token_from_session() -> Optional[str]:
    """
    Gmail requires an OAuth access token with gmail.readonly scope.
    It is stored server-side against the session id set by /api/auth/callback.
    """
    tokens = get_session_tokens() or {}
    token = (tokens.get("access_token") or "").strip()
    return token or None


def store_auth(tokens: Dict[str, Any], email: Optional[str]) -> None:
    _update_state(
        **{
            SESSION_TOKENS: {
                k: tokens[k]
                for k in ("access_token", "refresh_token", "expires_in", "scope", "token_type")
                if k in tokens
            },
            SESSION_EMAIL: email,
        }
    )


def load_chat_session() -> ChatSession:
    # One store read per turn.
    state = _load_state()
    tokens = state.get(SESSION_TOKENS)
    token = (tokens.get("access_token") or "").strip() if isinstance(tokens, dict) else ""
    history = state.get(SESSION_HISTORY)
    return ChatSession(
        email=state.get(SESSION_EMAIL),
        access_token=token or None,
        history=list(history) if isinstance(history, list) else [],
    )


def save_chat_history(history: List[ChatMessage]) -> None:
    _update_state(**{SESSION_HISTORY: history})


def clear_session() -> None:
    delete_session_data(_session_id())
    session.clear()
