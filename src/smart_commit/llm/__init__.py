"""
Language model integration for smart_commit.

This package contains the provider boundary (:class:`AiProvider` and
its OpenAI and Ollama clients), prompt construction, response parsing
and the :class:`AiCommitMessageGenerator` that ties them together with
a deterministic fallback.
"""

from .provider import AiProvider, CompletionResult, LLMError  # noqa: F401
from .ollama_client import OllamaClient  # noqa: F401
from .openai_client import OpenAiClient  # noqa: F401
from .prompt_builder import PromptBuilder  # noqa: F401
from .response_parser import ResponseParseError, parse_response  # noqa: F401
from .commit_message_generator import (  # noqa: F401
    AiCommitMessageGenerator,
    GenerationOutcome,
    GenerationResult,
)
from .factory import create_provider  # noqa: F401
