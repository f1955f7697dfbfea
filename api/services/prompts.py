from __future__ import annotations

from email.utils import parsedate_to_datetime
from typing import Iterable, List, Sequence

from schemas.email import Email

SYSTEM_PROMPT = """
You are a helpful Gmail-savvy assistant. When email context is provided, answer using it exactly (do not invent emails). If no email context is relevant, answer normally.

Core behavior (choose based on the user's intent):
- Summary: Provide a brief overview first (total emails, unread count, top senders, key subjects, time range). Keep it concise and scannable.
- Specific/search: Show only matching emails. Prefer a compact list with From, Subject, Date, and an unread badge.
- Status (unread/read/recent): List those emails only.
- Trends/analysis: Highlight patterns (frequent senders, common topics, busy days) and provide short, actionable takeaways.

Formatting rules:
- Start with a short title line that describes what you did (e.g., "Inbox summary" or "Emails from Alice").
- Use clear sections and bullet points. Keep paragraphs short. Use emojis sparingly for clarity (e.g., 📬 for inbox, 🔎 for search, 📈 for trends).
- For email lists, use a compact markdown list like: - [Unread 📩] From - Subject (Date)
- Show at most 20 items by default. For requests like "recent/latest emails", list up to 20 items. If there are more than 20, say how many are hidden and how to request them.
- If the request is ambiguous, ask a brief clarifying question before proceeding.

Constraints:
- Only use the provided email context. Never fabricate senders, subjects, or dates.
- If no relevant emails are found, say so clearly and suggest a next step (e.g., adjust date/sender/keywords).
- Keep responses focused and avoid dumping raw data unless explicitly requested.
"""

CHUNK_INSTRUCTIONS = (
    "You will receive a portion of the user's emails. Create a concise intermediate summary "
    "optimized for later merging.\n"
    "- Keep it under 8 bullet points.\n"
    "- Include counts (unread/read) and notable senders/subjects.\n"
    "- Output only the summary, no preface."
)

MERGE_INSTRUCTIONS = (
    "Combine the following partial email summaries into a single answer to the user's request.\n"
    "- Do not repeat items; deduplicate.\n"
    "- Follow the formatting rules previously provided.\n"
    "- Limit lists to 10 items unless asked."
)


def build_system_prompt(meta_notes: Sequence[str] = ()) -> str:
    prompt = SYSTEM_PROMPT.strip()
    if meta_notes:
        prompt += "\n\n" + "\n".join(meta_notes)
    return prompt


def display_date(raw: str) -> str:
    """RFC 2822 Date header rendered in server-local time; raw value if unparseable."""
    if not raw:
        return ""
    try:
        return parsedate_to_datetime(raw).astimezone().strftime("%a, %b %d %Y %H:%M")
    except (TypeError, ValueError):
        return raw


def format_email(email: Email, index: int) -> str:
    status = "Unread 📩" if email.is_unread else "Read 📧"
    return (
        f"Email {index}:\n"
        f"From: {email.sender}\n"
        f"Subject: {email.subject}\n"
        f"Date: {display_date(email.date)}\n"
        f"Status: {status}\n"
        f"Preview: {email.snippet}"
    )


def format_emails(emails: Iterable[Email]) -> str:
    return "\n\n".join(format_email(e, i) for i, e in enumerate(emails, start=1))


def build_email_user_prompt(message: str, emails: Sequence[Email]) -> str:
    return (
        f'User request: "{message}"\n\n'
        "Here are the user's recent emails for context:\n"
        f"{format_emails(emails)}\n\n"
        "Follow the adaptive behavior described above to answer the user's request appropriately.\n"
        "If not relevant, summarize or ignore unnecessary data. Format responses cleanly and intuitively."
    )


def build_chunk_prompt(message: str, chunk: Sequence[Email]) -> str:
    return f'{CHUNK_INSTRUCTIONS}\n\nUser request: "{message}"\n\nEmails:\n{format_emails(chunk)}'


def build_merge_prompt(message: str, partial_summaries: List[str]) -> str:
    labelled = "\n\n".join(f"Summary {i}:\n{s}" for i, s in enumerate(partial_summaries, start=1))
    return f'{MERGE_INSTRUCTIONS}\n\nUser request: "{message}"\n\nPartial summaries:\n{labelled}'
