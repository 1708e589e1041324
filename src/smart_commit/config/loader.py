"""
Configuration loader for smart_commit.

Settings are read from a JSON file named ``config.json`` in the
``~/.smart_commit/`` directory. Every key is optional; a missing file
simply yields the defaults. A file that is not valid JSON, or that holds
values of the wrong type or unknown enum names, raises
:class:`ConfigError`.

Example ``config.json``::

    {
        "generator_mode": "ai",
        "ai_provider": "ollama",
        "ollama_model": "qwen2.5-coder",
        "convention": "conventional",
        "commit_style": "detailed",
        "max_subject_length": 72
    }
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

from smart_commit.convention.base import ConventionType


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings in environments
# where logging is not configured. Messages still propagate so the CLI's
# configuration applies.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONFIG_FILE_NAME = "config.json"
API_KEY_ENV_VAR = "OPENAI_API_KEY"


class ConfigError(Exception):
    """Raised when the configuration file is malformed or invalid."""

    pass


class GeneratorMode(Enum):
    AI = "ai"
    TEMPLATE = "template"


class AiProviderType(Enum):
    OPENAI = "openai"
    OLLAMA = "ollama"


class CommitStyle(Enum):
    """How detailed the generated commit message should be."""

    ONE_LINE = "one-line"
    DETAILED = "detailed"


class CommitLanguage(Enum):
    """Language for the generated commit message.

    Each member's value is its config name; :attr:`prompt_hint` is the
    instruction added to the AI system prompt.
    """

    ENGLISH = "english"
    CHINESE = "chinese"
    JAPANESE = "japanese"
    KOREAN = "korean"
    SPANISH = "spanish"
    FRENCH = "french"
    GERMAN = "german"
    PORTUGUESE = "portuguese"
    RUSSIAN = "russian"
    ARABIC = "arabic"
    HINDI = "hindi"
    TURKISH = "turkish"

    @property
    def prompt_hint(self) -> str:
        return f"Write the commit message in {_LANGUAGE_NAMES[self]}."


_LANGUAGE_NAMES = {
    CommitLanguage.ENGLISH: "English",
    CommitLanguage.CHINESE: "Chinese (Simplified, 简体中文)",
    CommitLanguage.JAPANESE: "Japanese (日本語)",
    CommitLanguage.KOREAN: "Korean (한국어)",
    CommitLanguage.SPANISH: "Spanish (Español)",
    CommitLanguage.FRENCH: "French (Français)",
    CommitLanguage.GERMAN: "German (Deutsch)",
    CommitLanguage.PORTUGUESE: "Portuguese (Português)",
    CommitLanguage.RUSSIAN: "Russian (Русский)",
    CommitLanguage.ARABIC: "Arabic (العربية)",
    CommitLanguage.HINDI: "Hindi (हिन्दी)",
    CommitLanguage.TURKISH: "Turkish (Türkçe)",
}


@dataclass(frozen=True)
class Settings:
    """Validated configuration values with their defaults."""

    generator_mode: GeneratorMode = GeneratorMode.AI
    ai_provider: AiProviderType = AiProviderType.OPENAI
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_api_key: str = ""
    ollama_model: str = "llama3"
    ollama_url: str = "http://localhost:11434"
    convention: ConventionType = ConventionType.GITMOJI
    commit_style: CommitStyle = CommitStyle.DETAILED
    commit_language: CommitLanguage = CommitLanguage.ENGLISH
    max_diff_tokens: int = 4000
    max_subject_length: int = 72
    custom_system_prompt: str = ""
    custom_title_template: str = ""
    custom_body_template: str = ""
    request_timeout: Optional[float] = None

    def resolved_api_key(self) -> str:
        """The configured OpenAI key, or ``$OPENAI_API_KEY`` when blank."""
        if self.openai_api_key.strip():
            return self.openai_api_key
        return os.environ.get(API_KEY_ENV_VAR, "")


E = TypeVar("E", bound=Enum)

_ENUM_KEYS: Dict[str, Type[Enum]] = {
    "generator_mode": GeneratorMode,
    "ai_provider": AiProviderType,
    "convention": ConventionType,
    "commit_style": CommitStyle,
    "commit_language": CommitLanguage,
}
_STRING_KEYS = (
    "openai_model",
    "openai_base_url",
    "openai_api_key",
    "ollama_model",
    "ollama_url",
    "custom_system_prompt",
    "custom_title_template",
    "custom_body_template",
)
_POSITIVE_INT_KEYS = ("max_diff_tokens", "max_subject_length")


def _get_config_directory() -> Path:
    """Return the directory holding the smart_commit configuration (``~/.smart_commit``)."""
    return Path.home() / ".smart_commit"


def get_config_path() -> Path:
    return _get_config_directory() / CONFIG_FILE_NAME


def parse_enum(enum_cls: Type[E], value: Any, key: str) -> E:
    """Convert a config value to ``enum_cls``, accepting values and member names.

    Raises
    ------
    ConfigError
        If ``value`` is not a string or names no member.
    """
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string")
    wanted = value.strip().lower().replace("_", "-")
    for member in enum_cls:
        if wanted in (str(member.value).lower(), member.name.lower().replace("_", "-")):
            return member
    valid = ", ".join(str(m.value) for m in enum_cls)
    raise ConfigError(f"Invalid value {value!r} for '{key}' (expected one of: {valid})")


def settings_from_dict(data: Dict[str, Any]) -> Settings:
    """Validate a decoded configuration mapping and build :class:`Settings`.

    Unknown keys are ignored with a debug message.
    """
    values: Dict[str, Any] = {}
    for key, enum_cls in _ENUM_KEYS.items():
        if key in data:
            values[key] = parse_enum(enum_cls, data[key], key)
    for key in _STRING_KEYS:
        if key in data:
            if not isinstance(data[key], str):
                raise ConfigError(f"'{key}' must be a string")
            values[key] = data[key]
    for key in _POSITIVE_INT_KEYS:
        if key in data:
            value = data[key]
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"'{key}' must be an integer")
            if value <= 0:
                raise ConfigError(f"'{key}' must be positive")
            values[key] = value
    if data.get("request_timeout") is not None:
        timeout = data["request_timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ConfigError("'request_timeout' must be a number")
        values["request_timeout"] = float(timeout)

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.debug("Ignoring unknown configuration keys: %s", unknown)
    return Settings(**values)


def load_config(config_path: Optional[Path] = None) -> Settings:
    """Load settings from ``config_path`` (default ``~/.smart_commit/config.json``).

    Returns
    -------
    Settings
        Defaults when the file does not exist.

    Raises
    ------
    ConfigError
        If the file cannot be read, is not a JSON object, or contains
        invalid values.
    """
    path = config_path if config_path is not None else get_config_path()
    if not path.exists():
        logger.debug("No configuration file at %s; using defaults", path)
        return Settings()

    try:
        content = path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {path.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a JSON object")

    settings = settings_from_dict(data)
    logger.debug("Loaded configuration from: %s", path)
    return settings
