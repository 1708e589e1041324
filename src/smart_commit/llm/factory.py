"""
Build the configured :class:`AiProvider`.
"""

from __future__ import annotations

from smart_commit.config.loader import AiProviderType, Settings
from smart_commit.llm import ollama_client, openai_client
from smart_commit.llm.provider import AiProvider


def create_provider(settings: Settings) -> AiProvider:
    """Instantiate the provider selected by ``settings.ai_provider``.

    ``settings.request_timeout`` overrides the provider's own default
    (30 seconds for OpenAI, 60 for Ollama).
    """
    if settings.ai_provider is AiProviderType.OLLAMA:
        timeout = settings.request_timeout or ollama_client.DEFAULT_TIMEOUT
        return ollama_client.OllamaClient(
            model=settings.ollama_model,
            base_url=settings.ollama_url,
            request_timeout=timeout,
        )
    timeout = settings.request_timeout or openai_client.DEFAULT_TIMEOUT
    return openai_client.OpenAiClient(
        api_key=settings.resolved_api_key(),
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        request_timeout=timeout,
    )
