import os
import sys

import pytest

# Ensure api/ is on sys.path so imports like "services.*" work in tests.
API_DIR = os.path.dirname(os.path.dirname(__file__))
if API_DIR not in sys.path:
    sys.path.insert(0, API_DIR)

from schemas.email import Email  # noqa: E402
from storage import email_cache_store  # noqa: E402


def make_email(i, **overrides):
    fields = {
        "id": f"m{i}",
        "subject": f"Subject {i}",
        "sender": f"Sender {i} <s{i}@example.com>",
        "date": "Mon, 06 Jan 2025 09:30:00 +0000",
        "snippet": f"preview {i}",
        "body": f"body {i}",
        "is_unread": i % 2 == 0,
    }
    fields.update(overrides)
    return Email(**fields)


@pytest.fixture
def emails():
    return lambda n: [make_email(i) for i in range(n)]


@pytest.fixture(autouse=True)
def memory_cache(monkeypatch):
    """Every test gets a fresh in-memory cache backend."""
    backend = email_cache_store.MemoryCacheBackend()
    monkeypatch.setattr(email_cache_store, "_backend", backend)
    return backend
