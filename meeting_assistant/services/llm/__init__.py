from meeting_assistant.services.llm.base import BaseLLMProvider, LLMProvider, LLMProviderError
from meeting_assistant.services.llm.gemini_provider import GeminiProvider

__all__ = [
    "BaseLLMProvider",
    "LLMProvider",
    "LLMProviderError",
    "GeminiProvider",
]
