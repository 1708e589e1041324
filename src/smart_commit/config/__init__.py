"""
Configuration loading for smart_commit.

Provides the :class:`Settings` dataclass and a loader for the user's
``~/.smart_commit/config.json``. See :mod:`smart_commit.config.loader`
for details.
"""

from .loader import (  # noqa: F401
    AiProviderType,
    CommitLanguage,
    CommitStyle,
    ConfigError,
    GeneratorMode,
    Settings,
    load_config,
)
