import logging
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from meeting_assistant.routers.errors import api_error
from meeting_assistant.services.bot_data import BotDataService
from meeting_assistant.services.config import AppConfig
from meeting_assistant.services.recall_client import RecallAPIError, RecallClient


class CreateBotRequest(BaseModel):
    meeting_url: Optional[str] = Field(None, description="Zoom, Google Meet or Teams meeting URL")
    bot_name: Optional[str] = Field(None, description="Display name for the bot in the meeting")


def create_bot_router(config: AppConfig, client: Optional[RecallClient]) -> APIRouter:
    router = APIRouter(tags=["bot"])
    logger = logging.getLogger("meeting_assistant.api.bot")

    def require_client() -> RecallClient:
        missing = config.missing_for("recall")
        if missing or client is None:
            name = missing[0] if missing else "RECALL_API_KEY"
            logger.error("%s is not configured", name)
            raise api_error(500, f"{name} is not configured")
        return client

    @router.post("/api/bot/create")
    def create_bot(payload: CreateBotRequest) -> dict:
        meeting_url = (payload.meeting_url or "").strip()
        if not meeting_url:
            raise api_error(400, "meeting_url is required")
        recall = require_client()

        logger.info("Creating bot for meeting: %s (region=%s)", meeting_url, config.recall_region)
        try:
            data = recall.create_bot(meeting_url, bot_name=payload.bot_name or config.recall_bot_name)
        except RecallAPIError as exc:
            logger.warning("Bot creation failed: %s", exc)
            raise api_error(
                exc.status_code or 502,
                "Failed to create bot",
                details=exc.payload if exc.payload is not None else str(exc),
                status=exc.status_code,
            ) from exc
        except Exception as exc:
            logger.exception("Bot creation error: %s", exc)
            raise api_error(500, "Failed to create bot", details=str(exc)) from exc

        data = data if isinstance(data, dict) else {}
        status_changes = data.get("status_changes") or []
        first = status_changes[0] if status_changes and isinstance(status_changes[0], dict) else {}
        status = first.get("code") or "created"
        logger.info("Bot created: bot_id=%s status=%s", data.get("id"), status)
        return {
            "success": True,
            "bot_id": data.get("id"),
            "status": status,
            "full_response": data,
        }

    @router.get("/api/bot/{bot_id}")
    def get_bot_data(bot_id: str) -> dict:
        service = BotDataService(require_client())
        try:
            return service.get_bot_data(bot_id)
        except RecallAPIError as exc:
            logger.warning("Bot data fetch failed for %s: %s", bot_id, exc)
            raise api_error(
                exc.status_code or 502,
                "Failed to fetch bot data",
                details=str(exc),
                bot_id=bot_id,
            ) from exc
        except Exception as exc:
            logger.exception("Bot data error for %s: %s", bot_id, exc)
            raise api_error(500, "Failed to fetch bot data", details=str(exc), bot_id=bot_id) from exc

    return router
