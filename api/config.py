from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

# -------------------------------------------------------------------
# Paths
# -------------------------------------------------------------------
BASE_DIR = os.path.dirname(os.path.abspath(__file__))     # api/
ROOT_DIR = os.path.dirname(BASE_DIR)                      # project root

# =========================
# Config & Initialization
# =========================
# Load root .env first, then any CWD .env.
load_dotenv(os.path.join(ROOT_DIR, ".env"))
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


APP_NAME = os.getenv("APP_NAME", "InboxChat API")
APP_VERSION = os.getenv("APP_VERSION", "0.1.0")
PORT = int(os.getenv("PORT", "3000"))
DEBUG = _env_bool("DEBUG", "true")
ENV = os.getenv("ENV", os.getenv("NODE_ENV", "development")).lower()
IS_PRODUCTION = ENV == "production"

FLASK_SECRET = os.getenv("FLASK_SECRET", "inboxchat-dev-secret")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/")
SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE", "true" if IS_PRODUCTION else "false")
SESSION_LIFETIME_SECS = int(os.getenv("SESSION_LIFETIME_SECS", str(24 * 60 * 60)))

# LLM (any OpenAI-compatible endpoint, e.g. OpenRouter via OPENAI_BASE_URL)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL") or None
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# Google OAuth
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET", "")
GOOGLE_REDIRECT_URI = os.getenv("GOOGLE_REDIRECT_URI", "http://localhost:3000/api/auth/callback")
GOOGLE_TIMEOUT_SECS = float(os.getenv("GOOGLE_TIMEOUT_SECS", "20"))
GMAIL_FETCH_WORKERS = int(os.getenv("GMAIL_FETCH_WORKERS", "10"))

# Email cache (Redis when REDIS_URL is set, in-process memory otherwise)
REDIS_URL = os.getenv("REDIS_URL", "")
EMAIL_CACHE_TTL_SECS = int(os.getenv("EMAIL_CACHE_TTL_SECS", "900"))

# Debug console
DEBUG_CONSOLE_ENABLED = _env_bool("DEBUG_CONSOLE_ENABLED", "false")
DEBUG_EVENTS_MAX = int(os.getenv("DEBUG_EVENTS_MAX", "500"))

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
log = logging.getLogger("inboxchat")
if DEBUG and not IS_PRODUCTION:
    log.setLevel(logging.DEBUG)
