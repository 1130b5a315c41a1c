import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from meeting_assistant.context import AppContext
from meeting_assistant.routers.bot import create_bot_router
from meeting_assistant.routers.chat import create_chat_router
from meeting_assistant.routers.errors import register_error_handlers
from meeting_assistant.routers.logs import create_logs_router
from meeting_assistant.routers.testing import create_testing_router
from meeting_assistant.routers.webhook import create_webhook_router
from meeting_assistant.services.chat_service import ChatService
from meeting_assistant.services.config import load_config
from meeting_assistant.services.crash_logging import enable_crash_logging
from meeting_assistant.services.logging_setup import configure_logging
from meeting_assistant.services.recall_client import RecallClient


def create_app() -> FastAPI:
    cwd = os.getcwd()
    ctx = AppContext(
        cwd=cwd,
        data_dir=os.path.join(cwd, "data"),
        config_path=os.path.join(cwd, "data", "config.json"),
    )
    ctx.ensure_dirs()

    configure_logging(ctx.logs_dir)
    logger = logging.getLogger("meeting_assistant.boot")
    logger.info("Boot: starting create_app cwd=%s", cwd)
    enable_crash_logging(ctx.logs_dir)

    config = load_config(ctx.config_path)
    for feature in ("recall", "chat"):
        for name in config.missing_for(feature):
            logger.warning("Boot: %s is not set; %s endpoints will return errors", name, feature)

    version_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), "VERSION.txt")
    version = "v0.0.0"
    if os.path.exists(version_path):
        with open(version_path, "r", encoding="utf-8") as version_file:
            version = version_file.read().strip() or version
    logger.info("Boot: version=%s", version)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        client = app.state.recall_client
        if client is not None:
            client.close()

    app = FastAPI(title="Meeting Assistant", version="0.1.0", lifespan=lifespan)
    app.state.version = version
    app.state.ctx = ctx
    app.state.config = config
    register_error_handlers(app)

    recall_client = None
    if config.recall_api_key:
        recall_client = RecallClient(
            api_key=config.recall_api_key,
            region=config.recall_region,
            timeout=config.recall_timeout,
        )
    app.state.recall_client = recall_client

    app.include_router(create_bot_router(config, recall_client))
    logger.info("Boot: bot router mounted")
    app.include_router(create_webhook_router(config))
    logger.info("Boot: webhook router mounted")
    app.include_router(create_chat_router(ChatService(config)))
    logger.info("Boot: chat router mounted")
    app.include_router(create_logs_router(ctx))
    logger.info("Boot: logs router mounted")
    app.include_router(create_testing_router(ctx))
    logger.info("Boot: testing router mounted")

    class NoCacheMiddleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next):
            response = await call_next(request)
            path = request.url.path
            if path.endswith((".html", ".js", ".css")) or path == "/":
                response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
                response.headers["Pragma"] = "no-cache"
                response.headers["Expires"] = "0"
            return response

    app.add_middleware(NoCacheMiddleware)

    @app.get("/")
    def root():
        index_path = os.path.join(ctx.static_dir, "index.html")
        if os.path.exists(index_path):
            return FileResponse(index_path)
        return {"message": "Meeting Assistant API running", "version": app.state.version}

    @app.get("/api/health")
    def health() -> dict:
        return {"status": "ok", "version": app.state.version}

    if os.path.exists(ctx.static_dir):
        app.mount("/static", StaticFiles(directory=ctx.static_dir), name="static")
        logger.info("Boot: static mounted at /static")
    else:
        logger.warning("Boot: static directory missing=%s", ctx.static_dir)

    logger.info("Boot: create_app complete")
    return app
