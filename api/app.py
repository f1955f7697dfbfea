from __future__ import annotations

import time
import uuid
from datetime import timedelta

from flask import Flask, g, got_request_exception, request
from flask_cors import CORS

from config import (
    DEBUG,
    FLASK_SECRET,
    FRONTEND_URL,
    IS_PRODUCTION,
    PORT,
    SESSION_COOKIE_SECURE,
    SESSION_LIFETIME_SECS,
)
from utils.error_handlers import register_error_handlers
from utils.observability import log_event


def create_app() -> Flask:
    app = Flask(__name__)
    app.secret_key = FLASK_SECRET
    app.config.update(
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SECURE=SESSION_COOKIE_SECURE,
        SESSION_COOKIE_SAMESITE="None" if IS_PRODUCTION else "Lax",
        PERMANENT_SESSION_LIFETIME=timedelta(seconds=SESSION_LIFETIME_SECS),
    )
    CORS(app, origins=[FRONTEND_URL], supports_credentials=True)

    @app.before_request
    def _request_start():
        g.request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        g.request_start_ts = time.time()
        log_event("request", f"{request.method} {request.path} start")

    @app.after_request
    def _request_end(response):
        rid = getattr(g, "request_id", None)
        start_ts = getattr(g, "request_start_ts", None)
        duration_ms = int((time.time() - start_ts) * 1000) if start_ts else None
        response.headers["X-Request-Id"] = rid or response.headers.get("X-Request-Id", "")
        log_event(
            "request",
            f"{request.method} {request.path} end",
            data={"status": response.status_code, "duration_ms": duration_ms},
        )
        return response

    def _log_exception(sender, exception, **extra):
        log_event(
            "error",
            type(exception).__name__,
            data={"error": str(exception), "path": request.path},
            level="error",
        )

    got_request_exception.connect(_log_exception, app, weak=False)

    # Register blueprints
    from routes.auth import auth_bp
    from routes.chat import chat_bp
    from routes.debug import debug_bp
    from routes.meta import meta_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(chat_bp)
    app.register_blueprint(meta_bp)
    app.register_blueprint(debug_bp)

    register_error_handlers(app)
    return app


app = create_app()


# =========================
# Run
# =========================
if __name__ == "__main__":
    # Local dev only; production runs under gunicorn.
    app.run(host="0.0.0.0", port=PORT, debug=DEBUG)
