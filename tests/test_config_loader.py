import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from smart_commit.config.loader import (
    AiProviderType,
    CommitLanguage,
    CommitStyle,
    ConfigError,
    GeneratorMode,
    Settings,
    get_config_path,
    load_config,
    parse_enum,
    settings_from_dict,
)
from smart_commit.convention.base import ConventionType


class TestConfigLoader(unittest.TestCase):
    """Tests for the configuration loader."""

    def test_load_config_success(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_dir = Path(tmp)
            config = {
                "generator_mode": "template",
                "ai_provider": "ollama",
                "ollama_model": "qwen2.5-coder",
                "convention": "conventional",
                "commit_style": "one-line",
                "commit_language": "German",
                "max_subject_length": 50,
                "request_timeout": 90,
            }
            (config_dir / "config.json").write_text(json.dumps(config))

            with patch("smart_commit.config.loader._get_config_directory", return_value=config_dir):
                self.assertEqual(get_config_path(), config_dir / "config.json")
                result = load_config()
                self.assertIs(result.generator_mode, GeneratorMode.TEMPLATE)
                self.assertIs(result.ai_provider, AiProviderType.OLLAMA)
                self.assertEqual(result.ollama_model, "qwen2.5-coder")
                self.assertIs(result.convention, ConventionType.CONVENTIONAL)
                self.assertIs(result.commit_style, CommitStyle.ONE_LINE)
                self.assertIs(result.commit_language, CommitLanguage.GERMAN)
                self.assertEqual(result.max_subject_length, 50)
                self.assertEqual(result.request_timeout, 90.0)
                self.assertEqual(result.max_diff_tokens, 4000)

    def test_load_config_missing_file_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with patch("smart_commit.config.loader._get_config_directory", return_value=Path(tmp)):
                self.assertEqual(load_config(), Settings())

    def test_load_config_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{invalid}")
            with self.assertRaises(ConfigError):
                load_config(path)

    def test_load_config_not_an_object(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("[1, 2]")
            with self.assertRaises(ConfigError):
                load_config(path)

    def test_invalid_values(self) -> None:
        bad = [
            {"convention": "angular"},
            {"generator_mode": 1},
            {"ollama_model": 3},
            {"max_diff_tokens": 0},
            {"max_diff_tokens": True},
            {"max_subject_length": 0},
            {"request_timeout": "slow"},
        ]
        for data in bad:
            with self.subTest(data=data):
                with self.assertRaises(ConfigError):
                    settings_from_dict(data)

    def test_short_subject_length_accepted(self) -> None:
        self.assertEqual(settings_from_dict({"max_subject_length": 3}).max_subject_length, 3)

    def test_unknown_keys_ignored(self) -> None:
        self.assertEqual(settings_from_dict({"colour": "blue"}), Settings())

    def test_parse_enum_accepts_names(self) -> None:
        self.assertIs(parse_enum(CommitStyle, "ONE_LINE", "commit_style"), CommitStyle.ONE_LINE)
        self.assertIs(parse_enum(CommitStyle, "detailed", "commit_style"), CommitStyle.DETAILED)
        self.assertIs(parse_enum(ConventionType, ConventionType.GITMOJI, "c"), ConventionType.GITMOJI)

    def test_resolved_api_key(self) -> None:
        with patch.dict("os.environ", {"OPENAI_API_KEY": "sk-env"}):
            self.assertEqual(Settings().resolved_api_key(), "sk-env")
            self.assertEqual(Settings(openai_api_key="sk-file").resolved_api_key(), "sk-file")

    def test_language_hint(self) -> None:
        self.assertEqual(
            CommitLanguage.FRENCH.prompt_hint, "Write the commit message in French (Français)."
        )


if __name__ == "__main__":
    unittest.main()
