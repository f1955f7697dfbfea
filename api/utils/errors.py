from __future__ import annotations

from typing import Any, Dict, Optional


class ServiceError(Exception):
    def __init__(
        self,
        message: str,
        status: int = 400,
        code: str = "bad_request",
        extra: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.extra = extra or {}


class AuthRequiredError(ServiceError):
    """Mailbox data is needed but the session holds no usable Gmail token."""

    def __init__(self, message: str = "Please connect your Gmail account first"):
        super().__init__(message, 401, "auth_required", extra={"needsAuth": True})


class OAuthError(ServiceError):
    def __init__(self, message: str):
        super().__init__(message, 401, "oauth_failed")


class MailboxError(ServiceError):
    def __init__(self, message: str):
        super().__init__(message, 502, "mailbox_error")


class LLMError(ServiceError):
    def __init__(self, message: str):
        super().__init__(message, 502, "llm_error")
