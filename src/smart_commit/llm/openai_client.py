"""
Client for the OpenAI Chat Completions API (and compatible servers).

Sends ``POST {base_url}/chat/completions`` with a system and a user
message and reads the reply from ``choices[0].message.content``. The
base URL can point at a proxy or any OpenAI-compatible endpoint.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from smart_commit.llm.provider import AiProvider, LLMError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TIMEOUT = 30.0


@dataclass
class OpenAiClient(AiProvider):
    """Chat Completions client.

    Parameters
    ----------
    api_key : str
        Bearer token. A blank key makes every request fail without
        touching the network.
    model : str
        Model id.
    base_url : str
        API root, without the ``/chat/completions`` suffix.
    request_timeout : float
        Timeout in seconds.
    """

    api_key: str
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_TIMEOUT
    temperature: float = 0.3
    max_tokens: int = 512
    name: str = field(init=False, default="")

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        self.name = f"OpenAI ({self.model})"

    def _endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def build_payload(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        """Return the assistant reply.

        Raises
        ------
        LLMError
            On a missing API key, network failure, non-2xx status or a
            body without content.
        """
        if not self.api_key or not self.api_key.strip():
            raise LLMError("OpenAI API key is not configured")
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        url = self._endpoint()
        logger.debug("Sending request to OpenAI at %s (model %s)", url, self.model)
        try:
            response = requests.post(
                url,
                json=self.build_payload(system_prompt, user_prompt),
                headers=headers,
                timeout=self.request_timeout,
            )
        except requests.RequestException as exc:
            logger.error("Failed to connect to OpenAI: %s", exc)
            raise LLMError(f"Network error calling OpenAI: {exc}") from exc
        if not 200 <= response.status_code < 300:
            logger.error("OpenAI returned status %s: %s", response.status_code, response.text)
            raise LLMError(f"OpenAI API error {response.status_code}: {response.text}")
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise LLMError("Failed to parse OpenAI response") from exc
        content = extract_content(data)
        if content is None:
            raise LLMError("No content in OpenAI response")
        return content

    def _request(self, system_prompt: str, user_prompt: str) -> str:
        return self.generate(system_prompt, user_prompt)


def extract_content(data: Any) -> Optional[str]:
    """Pull ``choices[0].message.content`` out of a decoded response body."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None
