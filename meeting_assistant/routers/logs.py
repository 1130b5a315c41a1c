import logging
import os
from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from meeting_assistant.context import AppContext

_ERROR_MARKERS = ("error", "exception", "traceback", "warning")


class ClientLogRequest(BaseModel):
    level: str = "error"
    message: str = Field(..., min_length=1)
    bot_id: Optional[str] = None
    context: dict = Field(default_factory=dict)


def _latest_server_log(logs_dir: str) -> Optional[str]:
    if not os.path.isdir(logs_dir):
        return None
    log_files = [
        os.path.join(logs_dir, name)
        for name in os.listdir(logs_dir)
        if name.startswith("server_") and name.endswith(".log")
    ]
    return max(log_files, key=os.path.getmtime) if log_files else None


def create_logs_router(ctx: AppContext) -> APIRouter:
    """Lets the browser UI report its own failures into the server log."""
    router = APIRouter(tags=["logs"])
    logger = logging.getLogger("meeting_assistant.client")

    @router.get("/api/logs/errors")
    def error_log(limit: int = Query(200, ge=1, le=1000)) -> dict:
        latest = _latest_server_log(ctx.logs_dir)
        if latest is None:
            return {"log_file": None, "lines": []}
        try:
            with open(latest, "r", encoding="utf-8") as log_file:
                lines = [
                    line.rstrip("\n")
                    for line in log_file
                    if any(marker in line.lower() for marker in _ERROR_MARKERS)
                ]
        except OSError:
            return {"log_file": os.path.basename(latest), "lines": []}
        return {"log_file": os.path.basename(latest), "lines": lines[-limit:]}

    @router.post("/api/logs/client")
    def client_log(payload: ClientLogRequest) -> dict:
        message = payload.message
        if payload.bot_id:
            message = f"[bot {payload.bot_id}] {message}"
        if payload.context:
            message = f"{message} | context={payload.context}"
        level = payload.level.lower()
        if level == "warning":
            logger.warning(message)
        elif level == "info":
            logger.info(message)
        else:
            logger.error(message)
        return {"status": "ok"}

    return router
