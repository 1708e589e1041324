"""
Conventional Commits convention (https://www.conventionalcommits.org/).

Titles take the form ``<type>[(scope)]: <description>`` with a lowercase
description, e.g. ``feat(auth): add login validation``.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Dict, Optional

from smart_commit.convention.base import CommitConvention
from smart_commit.diff.models import ChangeCategory
from smart_commit.generator.message import GeneratedCommitMessage


TYPE_MAP: Dict[ChangeCategory, str] = {
    ChangeCategory.FEATURE: "feat",
    ChangeCategory.BUGFIX: "fix",
    ChangeCategory.REFACTOR: "refactor",
    ChangeCategory.TEST: "test",
    ChangeCategory.DOCS: "docs",
    ChangeCategory.STYLE: "style",
    ChangeCategory.BUILD: "build",
    ChangeCategory.CI: "ci",
    ChangeCategory.CHORE: "chore",
}

_TYPES = "feat|fix|refactor|test|docs|style|build|ci|chore|perf|revert"
CONVENTIONAL_PATTERN = re.compile(r"^(" + _TYPES + r")(\(.+?\))?!?:\s.+$")
LOOSE_PREFIX_PATTERN = re.compile(r"^(" + _TYPES + r")(\(.+?\))?!?:\s*")

PROMPT_HINT = """Convention: Conventional Commits (https://www.conventionalcommits.org/)
- Title MUST follow the format: <type>[optional scope]: <description>
- Types: feat, fix, refactor, test, docs, style, build, ci, chore
- Scope is optional, in parentheses: feat(auth): add login
- Description starts with lowercase letter, imperative mood.
- Do NOT include emoji.
- Examples:
  feat: add user authentication flow
  fix(payment): resolve null pointer in checkout
  refactor(auth): extract validation logic to separate class
  docs: update API documentation
  chore: update dependencies
- For BREAKING CHANGES, add "!" before the colon: feat!: remove deprecated API
- Footer may include "BREAKING CHANGE: <description>" if applicable."""


def type_for(category: ChangeCategory) -> str:
    return TYPE_MAP[category]


def _strip_loose_prefix(text: str) -> str:
    match = LOOSE_PREFIX_PATTERN.match(text)
    if match is None:
        return text
    return text[match.end():].lstrip()


def _lowercase_first(text: str) -> str:
    stripped = _strip_loose_prefix(text)
    if not stripped:
        return text
    return stripped[0].lower() + stripped[1:]


class ConventionalCommitsConvention(CommitConvention):
    """Rewrite titles as ``type(scope): description``."""

    display_name = "Conventional Commits"

    def format(
        self,
        message: GeneratedCommitMessage,
        category: ChangeCategory,
        scope: Optional[str] = None,
    ) -> GeneratedCommitMessage:
        title = message.title
        if CONVENTIONAL_PATTERN.match(title):
            return message
        prefix = type_for(category)
        if scope and scope.strip():
            prefix = f"{prefix}({scope.strip()})"
        return replace(message, title=f"{prefix}: {_lowercase_first(title)}")

    def prompt_hint(self) -> str:
        return PROMPT_HINT

    def type_for(self, category: ChangeCategory) -> str:
        return type_for(category)
