from __future__ import annotations

from flask import Flask

from config import IS_PRODUCTION, log
from utils.errors import ServiceError
from utils.json_helpers import jerror


# =========================
# Error Handlers
# =========================
def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ServiceError)
    def service_error(e: ServiceError):
        return jerror(e.message, e.status, e.code, e.extra)

    @app.errorhandler(404)
    def not_found(_):
        return jerror("Route not found", 404, "not_found")

    @app.errorhandler(500)
    def internal(e):
        log.error("Server error: %s", e)
        message = "Internal server error"
        original = getattr(e, "original_exception", None)
        if not IS_PRODUCTION and original is not None:
            message = str(original)
        return jerror(message, 500, "internal_error")
