"""
Single entry point for commit message generation.

:class:`CommitMessageService` wires the configured generator (template
or AI), applies the commit style and records the result in the message
history.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from smart_commit.config.loader import CommitLanguage, CommitStyle, GeneratorMode, Settings
from smart_commit.convention.base import CommitConvention
from smart_commit.diff.analyzer import ChangeRecord, DiffAnalyzer
from smart_commit.diff.models import DiffSummary
from smart_commit.generator.base import CommitMessageGenerator
from smart_commit.generator.message import GeneratedCommitMessage
from smart_commit.generator.template_generator import TemplateGenerator
from smart_commit.history.store import HistorySink
from smart_commit.llm.commit_message_generator import LAST_RESORT_TITLE, AiCommitMessageGenerator
from smart_commit.llm.factory import create_provider
from smart_commit.llm.prompt_builder import PromptBuilder
from smart_commit.llm.provider import AiProvider


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class CommitMessageService:
    """Generate commit messages according to :class:`Settings`.

    Parameters
    ----------
    settings : Settings
        Effective configuration.
    history : Optional[HistorySink]
        Receives the formatted text of every generated message. Failures
        while recording are logged and otherwise ignored.
    provider : Optional[AiProvider]
        Overrides the provider built from ``settings`` (AI mode only).
    """

    def __init__(
        self,
        settings: Settings,
        history: Optional[HistorySink] = None,
        provider: Optional[AiProvider] = None,
    ) -> None:
        self.settings = settings
        self.history = history
        self._provider = provider
        self.convention: CommitConvention = settings.convention.create_convention()

    def generate(self, records: Iterable[ChangeRecord]) -> GeneratedCommitMessage:
        """Analyze change ``records`` and return the commit message."""
        summary = DiffAnalyzer(records).analyze()
        return self.generate_for_summary(summary)

    def generate_for_summary(self, summary: DiffSummary) -> GeneratedCommitMessage:
        if summary.is_empty:
            return GeneratedCommitMessage.title_only(LAST_RESORT_TITLE)

        generator = self.create_generator()
        logger.debug("Generating commit message with %s", generator.display_name)
        message = generator.generate(summary)
        if self.settings.commit_style is CommitStyle.ONE_LINE:
            message = message.without_details()
        self._record(message)
        return message

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    def create_generator(self) -> CommitMessageGenerator:
        template = self.create_template_generator()
        if self.settings.generator_mode is GeneratorMode.TEMPLATE:
            return template
        provider = self._provider if self._provider is not None else create_provider(self.settings)
        return AiCommitMessageGenerator(
            provider=provider,
            prompt_builder=self.create_prompt_builder(),
            fallback=template,
            max_title_length=self.settings.max_subject_length,
            convention=self.convention,
        )

    def create_template_generator(self) -> TemplateGenerator:
        s = self.settings
        return TemplateGenerator(
            title_template=s.custom_title_template if s.custom_title_template.strip() else None,
            body_template=s.custom_body_template if s.custom_body_template.strip() else None,
            max_title_length=s.max_subject_length,
            convention=self.convention,
        )

    def create_prompt_builder(self) -> PromptBuilder:
        s = self.settings
        language_hint = ""
        if s.commit_language is not CommitLanguage.ENGLISH:
            language_hint = s.commit_language.prompt_hint
        return PromptBuilder(
            max_diff_tokens=s.max_diff_tokens,
            convention_hint=self.convention.prompt_hint(),
            one_line_only=s.commit_style is CommitStyle.ONE_LINE,
            language_hint=language_hint,
            custom_system_prompt=s.custom_system_prompt,
        )

    def _record(self, message: GeneratedCommitMessage) -> None:
        if self.history is None:
            return
        try:
            self.history.append(message.format())
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not save commit message to history: %s", exc)
