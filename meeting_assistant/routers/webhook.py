import json
import logging

from fastapi import APIRouter, Request

from meeting_assistant.routers.errors import api_error
from meeting_assistant.services.config import AppConfig
from meeting_assistant.services.webhook import log_event, verify_signature


def create_webhook_router(config: AppConfig) -> APIRouter:
    router = APIRouter(tags=["webhook"])
    logger = logging.getLogger("meeting_assistant.api.webhook")

    @router.post("/api/webhook")
    async def receive_webhook(request: Request) -> dict:
        body = await request.body()
        msg_id = request.headers.get("svix-id") or request.headers.get("svix-msg-id")
        timestamp = request.headers.get("svix-timestamp")
        signature = request.headers.get("svix-signature")

        if config.webhook_secret:
            if not verify_signature(config.webhook_secret, msg_id, timestamp, body, signature):
                logger.warning("Invalid webhook signature, msg_id=%s", msg_id)
                raise api_error(401, "Invalid signature")
            logger.debug("Webhook signature verified, msg_id=%s", msg_id)
        else:
            logger.warning("WEBHOOK_SECRET not configured; skipping signature verification")

        try:
            payload = json.loads(body.decode("utf-8", errors="replace"))
            if not isinstance(payload, dict):
                raise ValueError("webhook payload is not an object")
            log_event(payload, msg_id)
        except Exception as exc:
            logger.exception("Webhook processing failed: %s", exc)
            raise api_error(500, "Webhook processing failed") from exc
        return {"received": True}

    return router
