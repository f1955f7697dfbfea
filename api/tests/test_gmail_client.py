import base64
import threading
import time

import pytest

from clients import gmail_client
from clients.gmail_client import fetch_emails, normalize_message
from schemas.email import BODY_MAX_CHARS
from utils.errors import MailboxError


def _b64(text):
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def _detail(mid, delay=0.0):
    return {
        "id": mid,
        "snippet": f"snippet {mid}",
        "labelIds": ["INBOX"],
        "payload": {
            "headers": [
                {"name": "Subject", "value": f"Subject {mid}"},
                {"name": "From", "value": "Alice <alice@example.com>"},
                {"name": "Date", "value": "Tue, 07 Jan 2025 10:00:00 +0000"},
            ],
            "body": {"data": _b64(f"body of {mid}")},
        },
        "_delay": delay,
    }


class _Request:
    def __init__(self, fn):
        self._fn = fn

    def execute(self):
        return self._fn()


class _StubGmail:
    """Mimics service.users().messages().list/get(...).execute()."""

    def __init__(self, pages, details, fail_ids=()):
        self.pages = pages
        self.details = details
        self.fail_ids = set(fail_ids)
        self.list_calls = []
        self.get_calls = []
        self._lock = threading.Lock()

    def users(self):
        return self

    def messages(self):
        return self

    def list(self, **kwargs):
        self.list_calls.append(kwargs)
        page = self.pages[len(self.list_calls) - 1]
        return _Request(lambda: page)

    def get(self, userId, id, format):
        def _run():
            with self._lock:
                self.get_calls.append(id)
            if id in self.fail_ids:
                raise RuntimeError(f"boom {id}")
            msg = self.details[id]
            time.sleep(msg.get("_delay", 0.0))
            return msg

        return _Request(_run)


def _page(ids, next_token=None):
    resp = {"messages": [{"id": i} for i in ids]}
    if next_token:
        resp["nextPageToken"] = next_token
    return resp


@pytest.fixture
def install(monkeypatch):
    def _install(stub):
        monkeypatch.setattr(gmail_client, "build_service", lambda token: stub)
        return stub

    return _install


def test_results_keep_list_order_despite_completion_order(install):
    ids = [f"id{i}" for i in range(12)]
    # Earlier ids finish last.
    details = {mid: _detail(mid, delay=0.005 * (12 - n)) for n, mid in enumerate(ids)}
    install(_StubGmail([_page(ids)], details))

    result = fetch_emails("tok", per_page=50, total_limit=50)

    assert [e.id for e in result.emails] == ids
    assert result.total == 12


def test_pagination_stops_at_total_limit(install):
    pages = [_page([f"p{p}-{i}" for i in range(100)], next_token=f"t{p + 1}") for p in range(5)]
    details = {m["id"]: _detail(m["id"]) for page in pages for m in page["messages"]}
    stub = install(_StubGmail(pages, details))

    result = fetch_emails("tok", query="is:unread", per_page=100, total_limit=250)

    assert len(stub.list_calls) == 3, "should stop listing once 250 ids are collected"
    assert stub.list_calls[1]["pageToken"] == "t1"
    assert all(c["q"] == "is:unread" and c["maxResults"] == 100 for c in stub.list_calls)
    assert len(result.emails) == 250
    assert result.total == 300, "total counts every id seen while listing"
    assert [e.id for e in result.emails] == [f"p{p}-{i}" for p in range(3) for i in range(100)][:250]


def test_limits_are_clamped(install):
    stub = install(_StubGmail([_page([])], {}))
    fetch_emails("tok", per_page=500, total_limit=5)
    assert stub.list_calls[0]["maxResults"] == 100
    assert stub.list_calls[0]["q"] == ""


def test_total_limit_floor_caps_detail_fetches(install):
    ids = [f"id{i}" for i in range(80)]
    stub = install(_StubGmail([_page(ids, next_token="more")], {m: _detail(m) for m in ids}))

    result = fetch_emails("tok", per_page=5, total_limit=5)

    assert stub.list_calls[0]["maxResults"] == 10
    assert len(result.emails) == 50, "total_limit is clamped up to 50"
    assert result.total == 80


def test_single_detail_failure_fails_batch(install):
    ids = ["a", "b", "c"]
    install(_StubGmail([_page(ids)], {m: _detail(m) for m in ids}, fail_ids={"b"}))

    with pytest.raises(MailboxError):
        fetch_emails("tok")


def test_list_failure_raises_mailbox_error(monkeypatch):
    def _broken(token):
        raise RuntimeError("invalid_grant")

    monkeypatch.setattr(gmail_client, "build_service", _broken)
    with pytest.raises(MailboxError):
        fetch_emails("tok")


def test_normalize_defaults_for_missing_headers():
    email = normalize_message({"id": "x", "payload": {}})
    assert email.subject == "No Subject"
    assert email.sender == "Unknown"
    assert email.date == ""
    assert email.snippet == ""
    assert email.body == ""
    assert email.is_unread is False


def test_normalize_reads_text_plain_part_and_unread_label():
    msg = {
        "id": "x",
        "labelIds": ["INBOX", "UNREAD"],
        "payload": {
            "headers": [],
            "parts": [
                {"mimeType": "text/html", "body": {"data": _b64("<p>html</p>")}},
                {"mimeType": "text/plain", "body": {"data": _b64("plain text ✓")}},
            ],
        },
    }
    email = normalize_message(msg)
    assert email.body == "plain text ✓"
    assert email.is_unread is True


def test_normalize_truncates_body():
    msg = {"id": "x", "payload": {"body": {"data": _b64("y" * (BODY_MAX_CHARS + 200))}}}
    assert len(normalize_message(msg).body) == BODY_MAX_CHARS
