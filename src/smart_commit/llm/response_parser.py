"""
Turn raw AI output into a :class:`GeneratedCommitMessage`.

Models are asked for a JSON object ``{"title", "body", "footer"}`` but do
not always comply. Parsing therefore tries, in order:

1. the whole (trimmed) response as JSON,
2. JSON found inside a fenced code block, or between the first ``{``
   and the last ``}``,
3. free text: the first non-blank line is the title, the remaining
   non-blank lines are the body.

Only a blank response fails outright.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from smart_commit.generator.message import GeneratedCommitMessage


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


MAX_TITLE_CODEPOINTS = 200

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?\s*(\{[\s\S]*?\})\s*\n?\s*```")
_TITLE_LABEL_RE = re.compile(r"^(?:title|subject)\s*:\s*", re.IGNORECASE)
_WHITESPACE_RUN = re.compile(r"\s{2,}")


class ResponseParseError(Exception):
    """Raised when an AI response cannot be turned into a commit message."""

    pass


def parse_response(raw: Optional[str]) -> GeneratedCommitMessage:
    """Parse ``raw`` AI output.

    Raises
    ------
    ResponseParseError
        If ``raw`` is ``None`` or contains no usable text.
    """
    if raw is None:
        raise ResponseParseError("AI response is empty")
    trimmed = raw.strip()

    message = try_parse_json(trimmed)
    if message is not None:
        return message

    block = extract_json_block(trimmed)
    if block is not None:
        message = try_parse_json(block)
        if message is not None:
            logger.debug("Parsed AI response from embedded JSON block")
            return message

    message = parse_free_text(trimmed)
    if message is not None:
        logger.debug("AI response was not JSON; used free-text parsing")
        return message
    raise ResponseParseError("Unable to parse AI response into a commit message")


def try_parse_json(text: str) -> Optional[GeneratedCommitMessage]:
    """Decode ``text`` as a commit message object, or return ``None``."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        return None
    title = sanitize_title(title)
    if not title:
        return None
    return GeneratedCommitMessage(
        title=title,
        body=_optional_text(data.get("body")),
        footer=_optional_text(data.get("footer")),
    )


def extract_json_block(text: str) -> Optional[str]:
    """Find a JSON object inside a fenced block or between braces."""
    match = _FENCE_RE.search(text)
    if match is not None:
        return match.group(1).strip()
    start = text.find("{")
    end = text.rfind("}")
    if start >= 0 and end > start:
        return text[start : end + 1]
    return None


def parse_free_text(text: str) -> Optional[GeneratedCommitMessage]:
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return None
    title = sanitize_title(_TITLE_LABEL_RE.sub("", lines[0], count=1))
    if not title:
        return None
    body = "\n".join(lines[1:]) or None
    return GeneratedCommitMessage(title=title, body=body)


def sanitize_title(raw: str) -> str:
    """Single-line, whitespace-collapsed title capped at 200 code points."""
    clean = raw.replace("\n", " ").replace("\r", " ")
    clean = _WHITESPACE_RUN.sub(" ", clean).strip()
    return clean[:MAX_TITLE_CODEPOINTS]


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, list):
        items = [str(item).strip() for item in value if str(item).strip()]
        value = "\n".join(f"- {item}" for item in items)
    elif not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None
