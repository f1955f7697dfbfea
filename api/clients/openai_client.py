from __future__ import annotations

from typing import Dict, List, Optional

from openai import OpenAI, OpenAIError

from config import OPENAI_API_KEY, OPENAI_BASE_URL, OPENAI_MODEL, log
from utils.errors import LLMError

client: Optional[OpenAI] = None
if OPENAI_API_KEY:
    client = OpenAI(api_key=OPENAI_API_KEY, base_url=OPENAI_BASE_URL)


# =========================
# Chat message helpers
# =========================
def _normalize_message_role(m: dict) -> Dict[str, str]:
    role = m.get("role", "user")
    if role not in ("system", "user", "assistant"):
        role = "user"
    return {"role": role, "content": str(m.get("content", "")).strip()}


def coerce_messages(messages) -> List[Dict[str, str]]:
    """Coerce stored history into OpenAI chat format, dropping empty turns."""
    if not isinstance(messages, list):
        return []
    out: List[Dict[str, str]] = []
    for m in messages:
        if not isinstance(m, dict):
            continue
        nm = _normalize_message_role(m)
        if nm["content"]:
            out.append(nm)
    return out


# =========================
# Completion
# =========================
def chat_complete(
    messages: List[Dict[str, str]],
    temperature: float = 0.7,
    max_tokens: int = 1024,
    model: Optional[str] = None,
) -> str:
    """
    One chat completion call. Returns the first choice's text, or "" when the
    provider returns no content. Provider failures raise LLMError.
    """
    if not client:
        raise LLMError("LLM provider is not configured (OPENAI_API_KEY missing)")
    try:
        resp = client.chat.completions.create(
            model=model or OPENAI_MODEL,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except OpenAIError as e:
        log.error("LLM API error: %s", e)
        raise LLMError("Failed to generate response from LLM") from e

    if not resp.choices:
        return ""
    return resp.choices[0].message.content or ""
