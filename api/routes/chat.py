from __future__ import annotations

from flask import Blueprint, request

from config import IS_PRODUCTION, log
from services.chat_service import handle_chat_turn
from utils.auth_helpers import load_chat_session, save_chat_history
from utils.errors import AuthRequiredError, ServiceError
from utils.json_helpers import jerror

chat_bp = Blueprint("chat", __name__, url_prefix="/api")


@chat_bp.post("/chat")
def chat():
    """
    One chat turn.
    Request body:
      { message: string, forceRefreshEmails?: bool }
    Response:
      { response: string, usedGmail: bool }
    """
    data = request.get_json(force=True, silent=True) or {}
    message = data.get("message")
    if not isinstance(message, str) or not message.strip():
        return jerror("Message is required", 400)

    chat_session = load_chat_session()
    try:
        result = handle_chat_turn(
            message,
            force_refresh=bool(data.get("forceRefreshEmails")),
            session=chat_session,
        )
    except AuthRequiredError as e:
        return jerror(e.message, e.status, e.code, e.extra)
    except ServiceError as e:
        log.error("Chat error: %s", e.message)
        message_out = e.message if not IS_PRODUCTION else "Failed to process message"
        return jerror(message_out, 500, e.code)

    save_chat_history(result.history)
    return {"response": result.response, "usedGmail": result.used_gmail}
