"""
Contract shared by all commit message generators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from smart_commit.diff.models import DiffSummary
from smart_commit.generator.message import GeneratedCommitMessage


class EmptyChangesetError(Exception):
    """Raised when a generator is asked to describe an empty changeset."""

    pass


class CommitMessageGenerator(ABC):
    """Generate a :class:`GeneratedCommitMessage` from a :class:`DiffSummary`.

    Implementations must be safe to call from any thread.
    """

    display_name: str = "Generator"

    @abstractmethod
    def generate(self, summary: DiffSummary) -> GeneratedCommitMessage:
        """Generate a message with at least a title.

        Raises
        ------
        EmptyChangesetError
            If ``summary`` has no files and the generator cannot cope.
        """
