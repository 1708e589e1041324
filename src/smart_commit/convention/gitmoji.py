"""
Gitmoji convention: the title starts with an emoji naming the change type.

Mapping follows the most common entries on https://gitmoji.dev/.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Optional

from smart_commit.convention.base import CommitConvention
from smart_commit.diff.models import ChangeCategory
from smart_commit.generator.message import GeneratedCommitMessage


EMOJI_MAP: Dict[ChangeCategory, str] = {
    ChangeCategory.FEATURE: "✨",  # sparkles
    ChangeCategory.BUGFIX: "\U0001F41B",  # bug
    ChangeCategory.REFACTOR: "♻️",  # recycle
    ChangeCategory.TEST: "✅",  # check mark
    ChangeCategory.DOCS: "\U0001F4DD",  # memo
    ChangeCategory.STYLE: "\U0001F3A8",  # palette
    ChangeCategory.BUILD: "\U0001F4E6",  # package
    ChangeCategory.CI: "\U0001F477",  # construction worker
    ChangeCategory.CHORE: "\U0001F527",  # wrench
}

PROMPT_HINT = """Convention: Gitmoji
- Start the title with EXACTLY ONE gitmoji emoji followed by a space.
- Gitmoji mapping:
  ✨ new feature
  \U0001F41B bug fix
  ♻️  refactor
  ✅ tests
  \U0001F4DD documentation
  \U0001F3A8 style/formatting
  \U0001F4E6 build/dependencies
  \U0001F477 CI/CD
  \U0001F527 chore/config
  \U0001F525 remove code/files
  \U0001F680 deploy/release
  \U0001F512 security fix
- Do NOT include a type prefix like "feat:" after the emoji.
- Example: "✨ Add user authentication flow"
- Example: "\U0001F41B Fix null pointer in payment processing"
- The emoji IS the type indicator, no additional prefix needed."""


def emoji_for(category: ChangeCategory) -> str:
    return EMOJI_MAP[category]


def starts_with_known_emoji(title: str) -> bool:
    return any(title.startswith(emoji) for emoji in EMOJI_MAP.values())


class GitmojiConvention(CommitConvention):
    """Prefix the title with ``"<emoji> "``.

    A title that already starts with any emoji from :data:`EMOJI_MAP` is
    left alone, even if the emoji does not match ``category``.
    """

    display_name = "Gitmoji"

    def format(
        self,
        message: GeneratedCommitMessage,
        category: ChangeCategory,
        scope: Optional[str] = None,
    ) -> GeneratedCommitMessage:
        if starts_with_known_emoji(message.title):
            return message
        return replace(message, title=f"{emoji_for(category)} {message.title.lstrip()}")

    def prompt_hint(self) -> str:
        return PROMPT_HINT

    def emoji_for(self, category: ChangeCategory) -> str:
        return emoji_for(category)
