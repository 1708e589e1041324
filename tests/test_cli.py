import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

import smart_commit.cli as cli
from smart_commit import __version__
from smart_commit.config.loader import (
    AiProviderType,
    CommitStyle,
    ConfigError,
    GeneratorMode,
    Settings,
)
from smart_commit.convention.base import ConventionType
from smart_commit.diff.analyzer import ChangeRecord
from smart_commit.vcs.git_client import GitError


class DummyGitClient:
    def __init__(self, records=None, fail_status=False, fail_commit=False):
        self.records = records or []
        self.fail_status = fail_status
        self.fail_commit = fail_commit
        self.commit_called = []

    def get_staged_changes(self):
        if self.fail_status:
            raise GitError("fatal: index corrupt")
        return self.records

    def commit(self, message):
        if self.fail_commit:
            raise GitError("nothing to commit")
        self.commit_called.append(message)


def modified_record(path="a.py"):
    return ChangeRecord(
        after_path=path,
        before_path=path,
        kind="modified",
        load_before=lambda: "x = 1\n",
        load_after=lambda: "x = 2\n",
    )


TEMPLATE_SETTINGS = Settings(
    generator_mode=GeneratorMode.TEMPLATE, convention=ConventionType.CONVENTIONAL
)


class TestCLI(unittest.TestCase):
    def invoke(self, dummy, args=(), settings=TEMPLATE_SETTINGS, repo_root=Path("/repo"), history=None):
        git_cls = MagicMock(return_value=dummy)
        git_cls.find_repo_root.return_value = repo_root
        history = history if history is not None else MagicMock()
        runner = CliRunner()
        with patch.object(cli, "GitClient", git_cls):
            with patch.object(cli, "load_config", return_value=settings):
                with patch.object(cli, "CommitMessageHistory", return_value=history):
                    return runner.invoke(cli.main, list(args))

    def test_cli_generates_message(self) -> None:
        history = MagicMock()
        result = self.invoke(DummyGitClient([modified_record()]), history=history)
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertIn("feat: update a.py", result.output)
        self.assertIn("1 file staged (+1/-1)", result.output)
        history.append.assert_called_once()

    def test_cli_not_a_repo(self) -> None:
        result = self.invoke(DummyGitClient(), repo_root=None)
        self.assertEqual(result.exit_code, cli.EXIT_NO_REPO)

    def test_cli_no_changes(self) -> None:
        result = self.invoke(DummyGitClient([]))
        self.assertEqual(result.exit_code, cli.EXIT_NO_CHANGES)
        self.assertIn("No staged changes", result.output)

    def test_cli_config_error(self) -> None:
        runner = CliRunner()
        git_cls = MagicMock()
        git_cls.find_repo_root.return_value = Path("/repo")
        with patch.object(cli, "GitClient", git_cls):
            with patch.object(cli, "load_config", side_effect=ConfigError("bad value")):
                result = runner.invoke(cli.main, [])
        self.assertEqual(result.exit_code, cli.EXIT_CONFIG_ERROR)

    def test_cli_git_failure(self) -> None:
        result = self.invoke(DummyGitClient(fail_status=True))
        self.assertEqual(result.exit_code, cli.EXIT_VCS_FAILURE)

    def test_cli_commit(self) -> None:
        dummy = DummyGitClient([modified_record()])
        result = self.invoke(dummy, ["--commit"])
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertEqual(len(dummy.commit_called), 1)
        self.assertTrue(dummy.commit_called[0].startswith("feat: update a.py\n\n"))
        self.assertIn("Step 5/5: Committing", result.output)

    def test_cli_commit_failure(self) -> None:
        result = self.invoke(DummyGitClient([modified_record()], fail_commit=True), ["--commit"])
        self.assertEqual(result.exit_code, cli.EXIT_VCS_FAILURE)

    def test_cli_one_line(self) -> None:
        dummy = DummyGitClient([modified_record()])
        result = self.invoke(dummy, ["--one-line", "--commit"])
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertEqual(dummy.commit_called, ["feat: update a.py"])

    def test_cli_convention_override(self) -> None:
        result = self.invoke(DummyGitClient([modified_record()]), ["--convention", "gitmoji"])
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertIn("✨ Update a.py", result.output)

    def test_cli_unexpected_error(self) -> None:
        result = self.invoke(MagicMock(get_staged_changes=MagicMock(side_effect=RuntimeError("boom"))))
        self.assertEqual(result.exit_code, cli.EXIT_GENERIC_ERROR)

    def test_cli_history(self) -> None:
        history = MagicMock()
        history.get_all.return_value = ["feat: add a", "fix: b"]
        runner = CliRunner()
        with patch.object(cli, "CommitMessageHistory", return_value=history):
            result = runner.invoke(cli.main, ["--history"])
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS)
        self.assertIn("#1", result.output)
        self.assertIn("fix: b", result.output)

    def test_cli_long_message_is_shown_in_full(self) -> None:
        name = "StripeWebhookSignatureVerificationMiddlewareFactory.kt"
        record = ChangeRecord(name, None, "new", load_after=lambda: "class Factory\n")
        settings = Settings(generator_mode=GeneratorMode.TEMPLATE)
        result = self.invoke(DummyGitClient([record]), settings=settings)
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        box_lines = [line for line in result.output.splitlines() if line.startswith("│")]
        shown = " ".join(line.strip("│ ").strip() for line in box_lines)
        self.assertIn(f"✨ Add {name}", shown)
        self.assertIn(f"- {name} (+1/-0)", shown)
        self.assertTrue(all(len(line) == 60 for line in box_lines))

    def test_cli_history_long_entry_wrapped(self) -> None:
        history = MagicMock()
        words = ["word%02d" % i for i in range(20)]
        history.get_all.return_value = [" ".join(words)]
        runner = CliRunner()
        with patch.object(cli, "CommitMessageHistory", return_value=history):
            result = runner.invoke(cli.main, ["--history"])
        for word in words:
            self.assertIn(word, result.output)

    def test_cli_history_empty(self) -> None:
        history = MagicMock()
        history.get_all.return_value = []
        runner = CliRunner()
        with patch.object(cli, "CommitMessageHistory", return_value=history):
            result = runner.invoke(cli.main, ["--history"])
        self.assertIn("No commit messages in history yet.", result.output)

    def test_cli_version(self) -> None:
        result = CliRunner().invoke(cli.main, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)


class TestApplyOverrides(unittest.TestCase):
    def test_no_overrides_returns_same_settings(self) -> None:
        settings = Settings()
        self.assertIs(cli.apply_overrides(settings, None, None, None, False), settings)

    def test_overrides(self) -> None:
        settings = cli.apply_overrides(Settings(), "template", "ollama", "freeform", True)
        self.assertIs(settings.generator_mode, GeneratorMode.TEMPLATE)
        self.assertIs(settings.ai_provider, AiProviderType.OLLAMA)
        self.assertIs(settings.convention, ConventionType.FREEFORM)
        self.assertIs(settings.commit_style, CommitStyle.ONE_LINE)

    def test_describe_settings(self) -> None:
        lines = cli.describe_settings(Settings(ai_provider=AiProviderType.OLLAMA))
        self.assertIn("Provider: Ollama at http://localhost:11434 (llama3)", lines)
        self.assertIn("Convention: Gitmoji", lines)


if __name__ == "__main__":
    unittest.main()
