from __future__ import annotations

from typing import List, Optional

from config import log
from schemas.chat import ChatSession, ChatTurnResult
from schemas.email import Email
from services.conversation_service import append_turn, build_model_messages
from services.intent_service import is_gmail_query
from services.mail_context_service import resolve_email_context
from services.prompts import build_email_user_prompt, build_system_prompt
from services.summarizer_service import complete_direct, needs_chunking, summarize_in_chunks
from utils.errors import AuthRequiredError
from utils.observability import log_event


def handle_chat_turn(message: str, force_refresh: bool, session: ChatSession) -> ChatTurnResult:
    """
    Answer one chat message, pulling Gmail context when the message needs it.

    The session is read, never mutated: the updated history comes back on the
    result for the transport layer to persist. Collaborator failures propagate
    and leave the history untouched.
    """
    email_context: Optional[List[Email]] = None
    meta_notes: List[str] = []
    used_gmail = False

    if is_gmail_query(message):
        if not session.access_token:
            raise AuthRequiredError()
        ctx = resolve_email_context(
            message,
            user_identity=session.email,
            access_token=session.access_token,
            force_refresh=force_refresh,
        )
        email_context = ctx.emails
        meta_notes = ctx.meta_notes
        used_gmail = True

    system_prompt = build_system_prompt(meta_notes)
    user_prompt = message
    if email_context is not None:
        user_prompt = build_email_user_prompt(message, email_context)

    if needs_chunking(email_context):
        mode = "chunked"
        response = summarize_in_chunks(email_context, message, system_prompt)
    else:
        mode = "direct"
        response = complete_direct(build_model_messages(system_prompt, session.history, user_prompt))

    history = append_turn(session.history, user_prompt, response)
    log.info(
        "chat turn mode=%s used_gmail=%s emails=%d history=%d",
        mode,
        used_gmail,
        len(email_context or []),
        len(history),
    )
    log_event(
        "chat",
        "turn_complete",
        user_identity=session.email,
        data={"mode": mode, "used_gmail": used_gmail, "emails": len(email_context or [])},
    )
    return ChatTurnResult(response=response, used_gmail=used_gmail, history=history)
