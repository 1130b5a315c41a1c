"""Gemini LLM provider using Google's Generative AI API."""
from __future__ import annotations

from typing import Optional

import requests

from meeting_assistant.services.llm.base import BaseLLMProvider, LLMProviderError


class GeminiProvider(BaseLLMProvider):
    """LLM provider for Google Gemini models."""

    def __init__(
        self, api_key: str, model: str, base_url: str = "https://generativelanguage.googleapis.com"
    ) -> None:
        super().__init__(logger_name="meeting_assistant.llm.gemini")
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")

    def _call_api(
        self,
        prompt: str,
        temperature: float = 0.7,
        timeout: int = 60,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """Make a call to the Gemini API and return the response text."""
        # Handle model name format (may include "models/" prefix)
        model_name = self._model
        if not model_name.startswith("models/"):
            model_name = f"models/{model_name}"

        url = f"{self._base_url}/v1beta/{model_name}:generateContent"

        generation_config: dict = {"temperature": temperature}
        if max_output_tokens:
            generation_config["maxOutputTokens"] = max_output_tokens

        try:
            response = requests.post(
                url,
                params={"key": self._api_key},
                headers={"Content-Type": "application/json"},
                json={
                    "contents": [{"parts": [{"text": prompt}]}],
                    "generationConfig": generation_config,
                },
                timeout=timeout,
            )
        except requests.RequestException as exc:
            raise LLMProviderError("Failed to reach Gemini API") from exc

        if response.status_code != 200:
            self._logger.error("Gemini error: %s - %s", response.status_code, response.text[:500])
            raise LLMProviderError(
                f"Gemini error: {response.status_code}", status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise LLMProviderError("Gemini returned non-JSON content") from exc

        candidates = data.get("candidates") or []
        if not candidates:
            self._logger.warning("Gemini response missing candidates")
            return ""

        parts = (candidates[0].get("content") or {}).get("parts") or []
        if not parts:
            self._logger.warning("Gemini response missing parts")
            return ""

        return (parts[0].get("text") or "").strip()
