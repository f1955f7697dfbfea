from __future__ import annotations

from functools import partial
from typing import Dict, List, Optional, Sequence

from clients.openai_client import chat_complete
from config import log
from schemas.email import Email
from services.prompts import build_chunk_prompt, build_merge_prompt
from utils.observability import log_event
from utils.pacing import SequentialTaskRunner

LARGE_EMAIL_THRESHOLD = 120
CHUNK_SIZE = 30
CHUNK_DELAY_SECS = 0.3

DIRECT_TEMPERATURE, DIRECT_MAX_TOKENS = 0.7, 1024
CHUNK_TEMPERATURE, CHUNK_MAX_TOKENS = 0.4, 400
MERGE_TEMPERATURE, MERGE_MAX_TOKENS = 0.5, 800


def needs_chunking(emails: Optional[Sequence[Email]]) -> bool:
    return bool(emails) and len(emails) > LARGE_EMAIL_THRESHOLD


def chunk_emails(emails: Sequence[Email], size: int = CHUNK_SIZE) -> List[List[Email]]:
    """Split into consecutive chunks of `size`; the last chunk holds the remainder."""
    if size < 1:
        raise ValueError("chunk size must be positive")
    return [list(emails[i:i + size]) for i in range(0, len(emails), size)]


def complete_direct(messages: List[Dict[str, str]]) -> str:
    return chat_complete(messages, temperature=DIRECT_TEMPERATURE, max_tokens=DIRECT_MAX_TOKENS)


def _summarize_chunk(chunk: Sequence[Email], message: str, system_prompt: str) -> str:
    messages = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": build_chunk_prompt(message, chunk)},
    ]
    return chat_complete(messages, temperature=CHUNK_TEMPERATURE, max_tokens=CHUNK_MAX_TOKENS).strip()


def _merge_summaries(partials: List[str], message: str, system_prompt: str) -> str:
    messages = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": build_merge_prompt(message, partials)},
    ]
    return chat_complete(messages, temperature=MERGE_TEMPERATURE, max_tokens=MERGE_MAX_TOKENS)


def summarize_in_chunks(
    emails: Sequence[Email],
    message: str,
    system_prompt: str,
    runner: Optional[SequentialTaskRunner] = None,
) -> str:
    """
    Map-reduce summary for email sets too large for one prompt.

    Each chunk is summarized on its own, one call at a time with a pause in
    between, then a final call merges the partial summaries in chunk order.
    """
    runner = runner or SequentialTaskRunner(CHUNK_DELAY_SECS)
    chunks = chunk_emails(emails)
    log.info("Summarizing %d emails in %d chunks", len(emails), len(chunks))
    log_event("summarize", "chunked", data={"emails": len(emails), "chunks": len(chunks)})

    partials = runner.run(partial(_summarize_chunk, chunk, message, system_prompt) for chunk in chunks)
    return _merge_summaries(partials, message, system_prompt)
