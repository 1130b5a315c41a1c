from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional


class LLMProviderError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LLMProvider(ABC):
    @abstractmethod
    def prompt(self, prompt: str, temperature: float = 0.7, max_output_tokens: int = 500) -> str:
        """Send a raw prompt and return the response text."""
        raise NotImplementedError


class BaseLLMProvider(LLMProvider):
    """Base implementation with shared logging and response handling.

    Subclasses only need to implement _call_api() for their specific API client.
    """

    def __init__(self, logger_name: str = "meeting_assistant.llm") -> None:
        self._logger = logging.getLogger(logger_name)

    @abstractmethod
    def _call_api(
        self,
        prompt: str,
        temperature: float = 0.7,
        timeout: int = 60,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """Make an API call and return the raw response text.

        Args:
            prompt: The user prompt to send
            temperature: Sampling temperature (0.0-1.0)
            timeout: Request timeout in seconds
            max_output_tokens: Optional cap on generated tokens

        Returns:
            The response text content, empty if the model produced none
        """
        raise NotImplementedError

    def prompt(self, prompt_text: str, temperature: float = 0.7, max_output_tokens: int = 500) -> str:
        return self._call_api(
            prompt_text,
            temperature=temperature,
            timeout=60,
            max_output_tokens=max_output_tokens,
        )
