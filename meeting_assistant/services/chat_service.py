"""Chat service for AI-powered questions about a meeting."""

import logging
from typing import Any, Optional

from meeting_assistant.services.config import AppConfig
from meeting_assistant.services.llm import GeminiProvider, LLMProvider, LLMProviderError

TRANSCRIPT_EXCERPT_LIMIT = 10
EXCERPT_MAX_CHARS = 120
CHAT_EXCERPT_LIMIT = 5
FALLBACK_ANSWER = "Unable to generate response"

PROMPT_TEMPLATE = (
    "You are a helpful meeting assistant. You have access to the following meeting "
    "information:\n\n{context}\n\nThe user is asking: {question}\n\n"
    "Provide a helpful, natural response. Do not summarize the entire meeting unless "
    "asked. Just answer the specific question based on the meeting data available."
)


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


class ChatService:
    """Answers user questions with a bounded excerpt of meeting data as context.

    The UI echoes back the participants, transcript, chat messages and summary
    it already holds; only a truncated slice of each reaches the prompt.
    """

    def __init__(self, config: AppConfig, provider: Optional[LLMProvider] = None) -> None:
        self._config = config
        self._provider = provider
        self._logger = logging.getLogger("meeting_assistant.chat")

    @property
    def is_configured(self) -> bool:
        return self._provider is not None or bool(self._config.gemini_api_key)

    def _get_provider(self) -> LLMProvider:
        if self._provider is not None:
            return self._provider
        if not self._config.gemini_api_key:
            raise LLMProviderError("GEMINI_API_KEY is not configured")
        return GeminiProvider(
            api_key=self._config.gemini_api_key,
            model=self._config.gemini_model,
            base_url=self._config.gemini_base_url,
        )

    @staticmethod
    def _utterance_text(item: dict) -> str:
        words = _list(item.get("words"))
        if words:
            return " ".join(str(w.get("text", "")) for w in words if isinstance(w, dict))
        text = item.get("text")
        return text if isinstance(text, str) else ""

    @staticmethod
    def build_context(meeting_data: Optional[dict]) -> str:
        """Render participants, transcript excerpts, chat and keywords as prompt context."""
        meeting_data = meeting_data if isinstance(meeting_data, dict) else {}
        lines: list[str] = []

        participants = [p for p in _list(meeting_data.get("participants")) if isinstance(p, dict)]
        if participants:
            names = ", ".join(str(p.get("name") or "Unknown") for p in participants)
            lines.append(f"Meeting Participants: {names}")

        transcript = [t for t in _list(meeting_data.get("transcript")) if isinstance(t, dict)]
        if transcript:
            lines.append("Recent Transcript Excerpts:")
            for item in transcript[:TRANSCRIPT_EXCERPT_LIMIT]:
                text = ChatService._utterance_text(item)
                if not text:
                    continue
                participant = item.get("participant") if isinstance(item.get("participant"), dict) else {}
                speaker = participant.get("name") or "Unknown"
                if len(text) > EXCERPT_MAX_CHARS:
                    text = text[:EXCERPT_MAX_CHARS] + "..."
                lines.append(f"{speaker}: {text}")

        chat_messages = [m for m in _list(meeting_data.get("chat_messages")) if isinstance(m, dict)]
        if chat_messages:
            lines.append(f"Chat Messages ({len(chat_messages)} total):")
            for message in chat_messages[:CHAT_EXCERPT_LIMIT]:
                lines.append(f"{message.get('participant_name')}: {message.get('text')}")

        summary = meeting_data.get("summary") if isinstance(meeting_data.get("summary"), dict) else {}
        keywords = _list(summary.get("keywords"))
        if keywords:
            words = [str(k.get("word")) if isinstance(k, dict) else str(k) for k in keywords]
            lines.append(f"Key Topics Discussed: {', '.join(words)}")

        return "\n".join(lines)

    def build_prompt(self, question: str, meeting_data: Optional[dict]) -> str:
        return PROMPT_TEMPLATE.format(context=self.build_context(meeting_data), question=question)

    def ask(self, question: str, meeting_data: Optional[dict]) -> str:
        """Forward the question to the LLM and return its answer text.

        Raises:
            LLMProviderError: if the provider is unconfigured, unreachable or errors
        """
        provider = self._get_provider()
        prompt = self.build_prompt(question, meeting_data)
        self._logger.info(
            "Chat using provider=%s prompt_chars=%d", provider.__class__.__name__, len(prompt)
        )
        answer = provider.prompt(prompt, temperature=0.7, max_output_tokens=500)
        return answer or FALLBACK_ANSWER
