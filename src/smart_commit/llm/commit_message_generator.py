"""
Commit message generation using an LLM.

This module provides :class:`AiCommitMessageGenerator`, which sends a
diff summary to an :class:`AiProvider` and turns the reply into a commit
message. It never raises: every failure degrades to a fallback
generator (the template generator by default), and if that fails too,
to the fixed message ``"Update code"``.

The flow is a small state machine::

    START ──empty──────────────────────────────────────┐
      │                                                 │
    CALL_AI ─▶ PARSE ─▶ CONVENTION ─▶ FINALIZE ─▶ DONE  │
      │          │          │            │              │
      └──────────┴──────────┴────────────┴─▶ FALLBACK ──┴─▶ LAST_RESORT

Each run reports which exit it took via :class:`GenerationOutcome`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from smart_commit.convention.base import CommitConvention
from smart_commit.diff.models import DiffSummary
from smart_commit.generator.base import CommitMessageGenerator
from smart_commit.generator.message import GeneratedCommitMessage
from smart_commit.generator.template_generator import DEFAULT_MAX_TITLE_LENGTH, TemplateGenerator
from smart_commit.llm.prompt_builder import PromptBuilder
from smart_commit.llm.provider import AiProvider
from smart_commit.llm.response_parser import ResponseParseError, parse_response


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


LAST_RESORT_TITLE = "Update code"


class GenerationOutcome(Enum):
    """Which path produced the message."""

    SUCCESS = "success"
    FALLBACK_USED = "fallback"
    LAST_RESORT = "last_resort"


@dataclass(frozen=True)
class GenerationResult:
    """A generated message plus how it was obtained.

    ``reason`` explains why the AI path was abandoned; it is ``None`` on
    success and is meant for diagnostics only.
    """

    message: GeneratedCommitMessage
    outcome: GenerationOutcome
    reason: Optional[str] = None


class _AiStepFailed(Exception):
    """Internal signal: abandon the AI path and use the fallback."""


class AiCommitMessageGenerator(CommitMessageGenerator):
    """Generate commit messages with an AI provider.

    Parameters
    ----------
    provider : AiProvider
        The completion endpoint. Called at most once per generation,
        without retries.
    prompt_builder : Optional[PromptBuilder]
        Builds the prompt pair. Defaults to ``PromptBuilder()``.
    fallback : Optional[CommitMessageGenerator]
        Used whenever the AI path fails. Defaults to ``TemplateGenerator()``.
    max_title_length : int
        Subject lines are truncated to this many characters.
    convention : Optional[CommitConvention]
        Re-applied to the AI output, with the dominant category and no
        scope, even though the prompt already asks for it.
    """

    def __init__(
        self,
        provider: AiProvider,
        prompt_builder: Optional[PromptBuilder] = None,
        fallback: Optional[CommitMessageGenerator] = None,
        max_title_length: int = DEFAULT_MAX_TITLE_LENGTH,
        convention: Optional[CommitConvention] = None,
    ) -> None:
        self.provider = provider
        self.prompt_builder = prompt_builder if prompt_builder is not None else PromptBuilder()
        self.fallback = fallback if fallback is not None else TemplateGenerator()
        self.max_title_length = max_title_length
        self.convention = convention

    @property
    def display_name(self) -> str:  # type: ignore[override]
        return f"AI ({self.provider.name})"

    def generate(self, summary: DiffSummary) -> GeneratedCommitMessage:
        """Generate a message. Never raises."""
        return self.generate_with_outcome(summary).message

    def generate_with_outcome(self, summary: DiffSummary) -> GenerationResult:
        """Generate a message and report which path produced it. Never raises."""
        try:
            if summary.is_empty:
                return self._last_resort("Empty changeset")
            try:
                message = self._generate_from_ai(summary)
            except _AiStepFailed as exc:
                return self._use_fallback(summary, str(exc))
            except Exception as exc:  # noqa: BLE001
                return self._use_fallback(summary, f"Unexpected error: {exc}")
            return GenerationResult(message, GenerationOutcome.SUCCESS)
        except Exception as exc:  # noqa: BLE001
            return self._last_resort(f"Unexpected error: {exc}")

    # ------------------------------------------------------------------
    # AI path
    # ------------------------------------------------------------------
    def _generate_from_ai(self, summary: DiffSummary) -> GeneratedCommitMessage:
        system_prompt = self.prompt_builder.build_system_prompt()
        user_prompt = self.prompt_builder.build_user_prompt(summary)
        logger.debug(
            "Requesting commit message from %s (%d prompt chars)",
            self.provider.name,
            len(system_prompt) + len(user_prompt),
        )

        result = self.provider.complete(system_prompt, user_prompt)
        if not result.ok:
            raise _AiStepFailed(f"Provider error: {result.error}")
        raw = result.text
        if raw is None or not raw.strip():
            raise _AiStepFailed("Empty AI response")

        try:
            message = parse_response(raw)
        except ResponseParseError as exc:
            raise _AiStepFailed(f"Parse error: {exc}") from exc

        if self.convention is not None:
            # No scope here: the model chooses its own, if any.
            message = self.convention.format(message, summary.dominant_category)
        return message.sanitized().with_truncated_title(self.max_title_length)

    # ------------------------------------------------------------------
    # Degraded paths
    # ------------------------------------------------------------------
    def _use_fallback(self, summary: DiffSummary, reason: str) -> GenerationResult:
        logger.warning("AI generation failed (%s); using %s", reason, self.fallback.display_name)
        try:
            message = self.fallback.generate(summary)
        except Exception as exc:  # noqa: BLE001
            return self._last_resort(f"{reason}; fallback failed: {exc}")
        return GenerationResult(message, GenerationOutcome.FALLBACK_USED, reason)

    def _last_resort(self, reason: str) -> GenerationResult:
        logger.warning("Using last-resort commit message (%s)", reason)
        return GenerationResult(
            GeneratedCommitMessage.title_only(LAST_RESORT_TITLE),
            GenerationOutcome.LAST_RESORT,
            reason,
        )
