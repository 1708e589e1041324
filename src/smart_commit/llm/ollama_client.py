"""
Client for interacting with an Ollama LLM server.

This client wraps HTTP requests to the Ollama REST API. It makes
non-streaming text generation requests via the ``/api/generate``
endpoint, passing the system prompt in the dedicated ``system`` field.
On error conditions (HTTP errors, timeouts, unexpected bodies), a
:class:`LLMError` is raised by :meth:`OllamaClient.generate`;
:meth:`OllamaClient.complete` converts it into a failed
:class:`CompletionResult`.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict

import requests

from smart_commit.llm.provider import AiProvider, LLMError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_TIMEOUT = 60.0

_THINKING_PATTERNS = [
    r"<think>.*?</think>",
    r"<thinking>.*?</thinking>",
    r"<thought>.*?</thought>",
    r"<reasoning>.*?</reasoning>",
]


def strip_thinking_tags(text: str) -> str:
    """Remove thinking process tags from LLM responses.

    Many reasoning models output their thinking process in XML-like tags
    such as <think>, <thinking>, <thought>, or <reasoning>. This function
    strips these tags and their contents, leaving only the actual output.

    Parameters
    ----------
    text : str
        The raw LLM response text.

    Returns
    -------
    str
        The text with all thinking tags removed.

    Examples
    --------
    >>> strip_thinking_tags("<think>reasoning...</think>Answer")
    'Answer'
    >>> strip_thinking_tags("<thinking>thoughts</thinking>\\n\\nReal answer")
    'Real answer'
    """
    result = text
    for pattern in _THINKING_PATTERNS:
        result = re.sub(pattern, "", result, flags=re.DOTALL | re.IGNORECASE)
    return result.strip()


@dataclass
class OllamaClient(AiProvider):
    """Client for interacting with an Ollama server.

    Parameters
    ----------
    model : str
        Name of the model to use for generation, e.g. ``"llama3"``.
    base_url : str
        Base URL of the Ollama server including the port, e.g.
        ``"http://localhost:11434"``.
    request_timeout : float, optional
        Timeout in seconds for HTTP requests. Defaults to 60 seconds so a
        cold model has time to load.
    temperature : float, optional
        Sampling temperature.
    max_tokens : int, optional
        Maximum number of tokens to generate (``num_predict``).
    """

    model: str = "llama3"
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_TIMEOUT
    temperature: float = 0.3
    max_tokens: int = 512
    name: str = field(init=False, default="")

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        self.name = f"Ollama ({self.model})"

    def _endpoint(self) -> str:
        return f"{self.base_url}/api/generate"

    def build_payload(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "system": system_prompt,
            "prompt": user_prompt,
            "stream": False,
            "options": {
                "temperature": self.temperature,
                "num_predict": self.max_tokens,
            },
        }

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        """Generate a completion from the model.

        Returns
        -------
        str
            The generated response text with reasoning tags removed.

        Raises
        ------
        LLMError
            If the request fails or the server returns an error.
        """
        payload = self.build_payload(system_prompt, user_prompt)
        url = self._endpoint()
        logger.debug("Sending request to Ollama at %s (model %s)", url, self.model)
        try:
            response = requests.post(url, json=payload, timeout=self.request_timeout)
        except requests.RequestException as exc:
            logger.error("Failed to connect to Ollama: %s", exc)
            raise LLMError(f"Network error calling Ollama: {exc}") from exc
        if response.status_code != 200:
            logger.error(
                "Ollama returned non-200 status %s: %s", response.status_code, response.text
            )
            raise LLMError(f"Ollama API error {response.status_code}: {response.text}")
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            logger.error("Failed to parse Ollama response: %s", exc)
            raise LLMError("Failed to parse Ollama response") from exc
        if not isinstance(data, dict):
            raise LLMError("Unexpected response structure from Ollama")
        # /api/generate answers in 'response'; /api/chat style bodies use 'message'.
        if isinstance(data.get("response"), str):
            return strip_thinking_tags(data["response"])
        message = data.get("message")
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            return strip_thinking_tags(message["content"])
        raise LLMError("Unexpected response structure from Ollama")

    def _request(self, system_prompt: str, user_prompt: str) -> str:
        return self.generate(system_prompt, user_prompt)
