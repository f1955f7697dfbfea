import pytest

from services.intent_service import (
    GENERAL,
    MAILBOX_RULE,
    READ_EMAIL,
    KeywordRule,
    classify_intent_text,
    is_gmail_query,
    parse_desired_email_count,
    wants_fresh_emails,
)


@pytest.mark.parametrize("keyword", MAILBOX_RULE.keywords)
def test_every_mailbox_keyword_triggers_gmail(keyword):
    assert is_gmail_query(f"Could you check {keyword.upper()} please"), f"{keyword!r} should be mailbox intent"


@pytest.mark.parametrize("message", ["hi there", "what is the capital of France?", "tell me a joke", ""])
def test_messages_without_keywords_are_general(message):
    assert is_gmail_query(message) is False
    assert classify_intent_text(message) == GENERAL


def test_keyword_match_is_substring():
    # "mailbox" contains "mail"
    assert is_gmail_query("is my mailbox full?")


def test_classifier_uses_first_matching_rule():
    rules = (KeywordRule("calendar", ("meeting",)), KeywordRule(READ_EMAIL, ("meeting", "email")))
    assert classify_intent_text("move my meeting", rules) == "calendar"
    assert classify_intent_text("any email?", rules) == READ_EMAIL


@pytest.mark.parametrize(
    "message",
    ["Refresh my inbox", "fetch again", "any UPDATE?", "check now", "get new mail", "most recent", "arrived just now"],
)
def test_wants_fresh_emails(message):
    assert wants_fresh_emails(message)


def test_does_not_want_fresh_emails():
    assert not wants_fresh_emails("summarize my inbox")


def test_parse_count_with_email_suffix():
    assert parse_desired_email_count("show me 37 emails") == (37, False)


def test_parse_count_show_more_uses_fallback():
    result = parse_desired_email_count("show more")
    assert result.count == 20
    assert result.wants_more is True


def test_parse_count_clamps_to_max_and_min():
    assert parse_desired_email_count("list 500 messages").count == 200
    assert parse_desired_email_count("give me 2 emails").count == 5


def test_parse_count_ignores_four_digit_numbers():
    assert parse_desired_email_count("emails from 2023").count == 20


def test_bare_number_is_accepted():
    # Known looseness: any standalone small number is read as a count.
    assert parse_desired_email_count("I have 2 kids", min_count=1).count == 2


def test_parse_count_bounds_are_capped():
    assert parse_desired_email_count("show 999 emails", max_count=900).count == 500
    assert parse_desired_email_count("show 0 emails", min_count=0).count == 1


@pytest.mark.parametrize("message", ["next page", "load more", "what else is more urgent"])
def test_wants_more(message):
    assert parse_desired_email_count(message).wants_more
