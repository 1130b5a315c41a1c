"""Entrypoint for uvicorn: ``uvicorn run:app --port 8000``."""

from meeting_assistant.main import create_app

app = create_app()
