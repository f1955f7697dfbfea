from services.query_service import build_gmail_query_from_message


def test_unread_sender_year_query():
    q = build_gmail_query_from_message("unread emails from alice@example.com in 2023").query
    assert q is not None
    for part in ("after:2023/01/01", "before:2024/01/01", "from:example.com", "is:unread"):
        assert part in q, f"expected {part!r} in {q!r}"
    assert "newer_than" not in q, "2023 alone must not add a recency window"


def test_parts_are_emitted_in_fixed_order():
    q = build_gmail_query_from_message("Unread emails from bob@corp.io about budget today in 2024").query
    assert q.index("after:") < q.index("from:") < q.index("{") < q.index("is:unread") < q.index("newer_than")


def test_no_rule_fired_returns_null_query():
    result = build_gmail_query_from_message("hi there")
    assert result.query is None
    assert result.reason is None


def test_reason_is_set_when_query_built():
    assert build_gmail_query_from_message("unread").reason == "derived from user message"


def test_sender_name_without_domain():
    assert build_gmail_query_from_message("emails from Alice").query == "from:alice"


def test_sender_dotted_token_used_as_domain():
    assert build_gmail_query_from_message("anything from github.com").query == "from:github.com"


def test_topic_collapses_whitespace():
    q = build_gmail_query_from_message("regarding   quarterly    report").query
    assert q == "{quarterly report}"


def test_recency_precedence():
    assert build_gmail_query_from_message("what came in yesterday and this week").query == "newer_than:2d"
    assert build_gmail_query_from_message("anything this week").query == "newer_than:7d"
    assert build_gmail_query_from_message("latest").query == "newer_than:1d"


def test_only_one_recency_token():
    q = build_gmail_query_from_message("latest recent today now").query
    assert q.count("newer_than") == 1
