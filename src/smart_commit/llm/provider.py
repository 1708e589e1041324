"""
The boundary between commit message generation and an AI service.

An :class:`AiProvider` sends one system prompt and one user prompt to a
model and hands back the raw completion text. Transport problems never
escape as exceptions: :meth:`AiProvider.complete` always returns a
:class:`CompletionResult`, which is either a success carrying text or a
failure carrying a reason.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class LLMError(Exception):
    """Raised when communication with the LLM server fails."""

    pass


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of a single completion request.

    Exactly one of ``text`` and ``error`` is set.
    """

    text: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, text: str) -> "CompletionResult":
        return cls(text=text)

    @classmethod
    def failure(cls, reason: str) -> "CompletionResult":
        return cls(error=reason or "unknown error")

    @property
    def ok(self) -> bool:
        return self.error is None


class AiProvider(ABC):
    """Abstract AI completion endpoint.

    Subclasses implement :meth:`_request`, raising :class:`LLMError` for
    any transport, HTTP or response-shape problem. Configuration (model,
    URL, credentials) is passed to the constructor, never read globally.
    """

    name: str = "AI provider"

    def complete(self, system_prompt: str, user_prompt: str) -> CompletionResult:
        """Request a completion. Never raises; failures become results."""
        try:
            text = self._request(system_prompt, user_prompt)
        except LLMError as exc:
            logger.warning("%s request failed: %s", self.name, exc)
            return CompletionResult.failure(str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Unexpected error calling %s: %s", self.name, exc)
            return CompletionResult.failure(f"Unexpected error calling {self.name}: {exc}")
        return CompletionResult.success(text)

    @abstractmethod
    def _request(self, system_prompt: str, user_prompt: str) -> str:
        """Perform the request and return the raw completion text."""
