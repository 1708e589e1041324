"""
Commit message conventions.

A convention rewrites the title of a generated message into a house
style (emoji prefix, ``type(scope):`` prefix, ...) and supplies a block of
rules for the AI system prompt so the model can produce the style
directly. Every convention is stateless and applying it twice gives the
same result as applying it once.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from smart_commit.diff.models import ChangeCategory
from smart_commit.generator.message import GeneratedCommitMessage


class CommitConvention(ABC):
    """Formatting rules for commit titles."""

    display_name: str = ""

    @abstractmethod
    def format(
        self,
        message: GeneratedCommitMessage,
        category: ChangeCategory,
        scope: Optional[str] = None,
    ) -> GeneratedCommitMessage:
        """Return ``message`` with its title rewritten for this convention.

        Parameters
        ----------
        message : GeneratedCommitMessage
            The raw message.
        category : ChangeCategory
            Dominant category of the changeset, used to pick the prefix.
        scope : Optional[str]
            Module or component name, if one was detected.
        """

    @abstractmethod
    def prompt_hint(self) -> str:
        """Rules to include in the AI system prompt (may be empty)."""


class ConventionType(Enum):
    """Conventions selectable from configuration."""

    GITMOJI = "gitmoji"
    CONVENTIONAL = "conventional"
    FREEFORM = "freeform"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    def __str__(self) -> str:
        return self.display_name

    def create_convention(self) -> CommitConvention:
        # Imported here: the implementations import this module.
        from smart_commit.convention.conventional import ConventionalCommitsConvention
        from smart_commit.convention.freeform import FreeFormConvention
        from smart_commit.convention.gitmoji import GitmojiConvention

        if self is ConventionType.GITMOJI:
            return GitmojiConvention()
        if self is ConventionType.CONVENTIONAL:
            return ConventionalCommitsConvention()
        return FreeFormConvention()

    @classmethod
    def from_value(cls, value: str) -> "ConventionType":
        """Look up a convention by its config value or display name.

        Raises
        ------
        ValueError
            If ``value`` names no known convention.
        """
        wanted = value.strip().lower()
        for member in cls:
            if wanted in (member.value, member.name.lower(), member.display_name.lower()):
                return member
        valid = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown convention {value!r} (expected one of: {valid})")


_DISPLAY_NAMES = {
    ConventionType.GITMOJI: "Gitmoji",
    ConventionType.CONVENTIONAL: "Conventional Commits",
    ConventionType.FREEFORM: "Free-form",
}
