import unittest
from typing import List
from unittest.mock import patch

from smart_commit.config.loader import (
    CommitLanguage,
    CommitStyle,
    GeneratorMode,
    Settings,
)
from smart_commit.convention.base import ConventionType
from smart_commit.diff.analyzer import ChangeRecord
from smart_commit.diff.models import DiffSummary
from smart_commit.generator.template_generator import TemplateGenerator
from smart_commit.llm.commit_message_generator import AiCommitMessageGenerator
from smart_commit.llm.openai_client import OpenAiClient
from smart_commit.llm.provider import AiProvider
from smart_commit.service import CommitMessageService


class StaticProvider(AiProvider):
    name = "Static"

    def __init__(self, text: str) -> None:
        self.text = text
        self.prompts: List[tuple] = []

    def _request(self, system_prompt, user_prompt):
        self.prompts.append((system_prompt, user_prompt))
        return self.text


class ListHistory:
    def __init__(self) -> None:
        self.messages: List[str] = []

    def append(self, message: str) -> None:
        self.messages.append(message)


class FailingHistory:
    def append(self, message: str) -> None:
        raise OSError("disk full")


def new_file_record(path="src/main/NewFeature.kt", text="class NewFeature\n"):
    return ChangeRecord(after_path=path, before_path=None, kind="new", load_after=lambda: text)


class TestCommitMessageService(unittest.TestCase):
    def test_template_mode(self) -> None:
        history = ListHistory()
        settings = Settings(generator_mode=GeneratorMode.TEMPLATE)
        message = CommitMessageService(settings, history=history).generate([new_file_record()])
        self.assertEqual(message.title, "✨ Add NewFeature.kt")
        self.assertEqual(history.messages, [message.format()])

    def test_ai_mode_uses_provider_and_convention(self) -> None:
        provider = StaticProvider('{"title": "Add feature flag", "body": "Rollout"}')
        settings = Settings(convention=ConventionType.CONVENTIONAL)
        message = CommitMessageService(settings, provider=provider).generate([new_file_record()])
        self.assertEqual(message.title, "feat: add feature flag")
        self.assertEqual(message.body, "Rollout")
        system_prompt = provider.prompts[0][0]
        self.assertIn("Conventional Commits", system_prompt)

    def test_one_line_style_drops_body(self) -> None:
        provider = StaticProvider('{"title": "Add x", "body": "why", "footer": "Refs #1"}')
        settings = Settings(commit_style=CommitStyle.ONE_LINE, convention=ConventionType.FREEFORM)
        service = CommitMessageService(settings, provider=provider)
        message = service.generate([new_file_record()])
        self.assertEqual(message.title, "Add x")
        self.assertIsNone(message.body)
        self.assertIsNone(message.footer)
        self.assertIn("ONE-LINE", provider.prompts[0][0])

    def test_history_failure_is_ignored(self) -> None:
        settings = Settings(generator_mode=GeneratorMode.TEMPLATE)
        message = CommitMessageService(settings, history=FailingHistory()).generate([new_file_record()])
        self.assertTrue(message.title)

    def test_empty_changeset(self) -> None:
        history = ListHistory()
        service = CommitMessageService(Settings(), history=history)
        self.assertEqual(service.generate_for_summary(DiffSummary.empty()).title, "Update code")
        self.assertEqual(history.messages, [])

    def test_create_generator(self) -> None:
        service = CommitMessageService(Settings(generator_mode=GeneratorMode.TEMPLATE))
        self.assertIsInstance(service.create_generator(), TemplateGenerator)

        with patch.dict("os.environ", {"OPENAI_API_KEY": ""}):
            generator = CommitMessageService(Settings(max_subject_length=50)).create_generator()
        self.assertIsInstance(generator, AiCommitMessageGenerator)
        self.assertIsInstance(generator.provider, OpenAiClient)
        self.assertIsInstance(generator.fallback, TemplateGenerator)
        self.assertEqual(generator.max_title_length, 50)

    def test_custom_templates(self) -> None:
        settings = Settings(
            generator_mode=GeneratorMode.TEMPLATE,
            convention=ConventionType.FREEFORM,
            custom_title_template="{{summary}} ({{files_changed}} files)",
            custom_body_template="   ",
        )
        template = CommitMessageService(settings).create_template_generator()
        self.assertEqual(template.title_template, "{{summary}} ({{files_changed}} files)")
        self.assertNotEqual(template.body_template, "   ")
        message = CommitMessageService(settings).generate([new_file_record()])
        self.assertEqual(message.title, "Add NewFeature.kt (1 files)")

    def test_prompt_builder_language(self) -> None:
        english = CommitMessageService(Settings()).create_prompt_builder()
        self.assertEqual(english.language_hint, "")
        korean = CommitMessageService(
            Settings(commit_language=CommitLanguage.KOREAN, max_diff_tokens=123)
        ).create_prompt_builder()
        self.assertIn("Korean", korean.language_hint)
        self.assertEqual(korean.max_diff_tokens, 123)


if __name__ == "__main__":
    unittest.main()
