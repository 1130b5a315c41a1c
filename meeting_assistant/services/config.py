"""Runtime configuration: provider keys, region and polling settings.

Values come from ``data/config.json`` when present; process environment
variables take precedence over the file.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

_logger = logging.getLogger("meeting_assistant.config")


@dataclass
class AppConfig:
    recall_api_key: Optional[str] = None
    recall_region: str = "us-west-2"
    recall_bot_name: str = "Meeting Assistant"
    recall_timeout: float = 30.0
    webhook_secret: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com"
    poll_interval: float = 5.0

    @property
    def recall_base_url(self) -> str:
        return f"https://{self.recall_region}.recall.ai/api/v1"

    def missing_for(self, feature: str) -> list[str]:
        """Names of required settings that are unset for ``feature``."""
        if feature == "recall" and not self.recall_api_key:
            return ["RECALL_API_KEY"]
        if feature == "chat" and not self.gemini_api_key:
            return ["GEMINI_API_KEY"]
        return []


def _read_config_file(config_path: Optional[str]) -> dict:
    if not config_path or not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        _logger.warning("Ignoring unreadable config file %s: %s", config_path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _float(name: str, value, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        _logger.warning("Invalid %s=%r, using default %s", name, value, default)
        return default


def load_config(config_path: Optional[str] = None, environ: Optional[dict] = None) -> AppConfig:
    env = os.environ if environ is None else environ
    data = _read_config_file(config_path)
    recall = data.get("recall") or {}
    webhook = data.get("webhook") or {}
    gemini = (data.get("providers") or {}).get("gemini") or {}
    defaults = AppConfig()

    def pick(env_name: str, file_value, default):
        value = env.get(env_name)
        if value:
            return value.strip()
        return file_value if file_value not in (None, "") else default

    config = AppConfig(
        recall_api_key=pick("RECALL_API_KEY", recall.get("api_key"), None),
        recall_region=pick("RECALL_REGION", recall.get("region"), defaults.recall_region),
        recall_bot_name=pick("RECALL_BOT_NAME", recall.get("bot_name"), defaults.recall_bot_name),
        recall_timeout=_float(
            "RECALL_TIMEOUT",
            pick("RECALL_TIMEOUT", recall.get("timeout"), None),
            defaults.recall_timeout,
        ),
        webhook_secret=pick("WEBHOOK_SECRET", webhook.get("secret"), None),
        gemini_api_key=pick("GEMINI_API_KEY", gemini.get("api_key"), None),
        gemini_model=pick("GEMINI_MODEL", gemini.get("model"), defaults.gemini_model),
        gemini_base_url=pick("GEMINI_BASE_URL", gemini.get("base_url"), defaults.gemini_base_url),
        poll_interval=_float(
            "POLL_INTERVAL",
            pick("POLL_INTERVAL", data.get("poll_interval"), None),
            defaults.poll_interval,
        ),
    )
    _logger.info(
        "Config loaded: region=%s recall_key=%s webhook_secret=%s gemini_key=%s model=%s",
        config.recall_region,
        bool(config.recall_api_key),
        bool(config.webhook_secret),
        bool(config.gemini_api_key),
        config.gemini_model,
    )
    return config
