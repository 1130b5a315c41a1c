import logging
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from meeting_assistant.routers.errors import api_error
from meeting_assistant.services.chat_service import ChatService
from meeting_assistant.services.llm import LLMProviderError


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    meeting_data: dict = Field(default_factory=dict, alias="meetingData")


def create_chat_router(chat_service: ChatService) -> APIRouter:
    router = APIRouter(tags=["chat"])
    logger = logging.getLogger("meeting_assistant.api.chat")

    @router.post("/api/ai/chat")
    def chat(payload: ChatRequest) -> dict:
        if not chat_service.is_configured:
            logger.error("GEMINI_API_KEY is not configured")
            raise api_error(500, "GEMINI_API_KEY is not configured")
        if not (payload.message or "").strip():
            raise api_error(400, "Message is required")

        try:
            answer = chat_service.ask(payload.message, payload.meeting_data)
        except LLMProviderError as exc:
            logger.warning("Chat failed: %s", exc)
            raise api_error(
                exc.status_code or 502, "Failed to get response from Gemini"
            ) from exc
        except Exception as exc:
            logger.exception("AI chat error: %s", exc)
            raise api_error(500, str(exc) or "Failed to process AI request") from exc
        return {"response": answer}

    return router
