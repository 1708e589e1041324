"""
Free-form convention: no prefix, the title just starts with a capital.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from smart_commit.convention.base import CommitConvention
from smart_commit.diff.models import ChangeCategory
from smart_commit.generator.message import GeneratedCommitMessage


PROMPT_HINT = """Convention: Free-form
- Write a clear, descriptive commit message in plain English.
- Start with an uppercase letter, imperative mood ("Add" not "Added").
- No required prefix, emoji, or structured format.
- Keep the title concise and specific (max 72 characters).
- Example: "Add user authentication with OAuth2 support"
- Example: "Fix crash when loading empty profile"
- The body should explain WHY the change was made if not obvious."""


class FreeFormConvention(CommitConvention):
    display_name = "Free-form"

    def format(
        self,
        message: GeneratedCommitMessage,
        category: ChangeCategory,
        scope: Optional[str] = None,
    ) -> GeneratedCommitMessage:
        title = message.title.strip()
        formatted = title[0].upper() + title[1:]
        if formatted == message.title:
            return message
        return replace(message, title=formatted)

    def prompt_hint(self) -> str:
        return PROMPT_HINT
