"""Recall.ai recording-bot API client.

Handles authentication, bot creation, bot lookup and the media/artifact
endpoints used once a recording has finished.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

_logger = logging.getLogger("meeting_assistant.recall")

DEFAULT_BOT_NAME = "Meeting Assistant"


def default_recording_config() -> dict:
    """Recording config enabling transcript, participant events and all media."""
    return {
        "transcript": {
            "provider": {
                "recallai_streaming": {
                    "language_code": "auto",
                    "filter_profanity": False,
                    "mode": "prioritize_accuracy",
                }
            }
        },
        "participant_events": {},
        "video_mixed_mp4": {},
        "audio_mixed_mp3": {},
        "audio_separate_wav": {},
        "video_separate_mp4": {},
        "meeting_metadata": {},
    }


class RecallAPIError(Exception):
    """Raised for Recall API failures.

    ``status_code`` is the provider's HTTP status, or None when the provider
    could not be reached at all.
    """

    def __init__(
        self, message: str, status_code: Optional[int] = None, payload: Any = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class RecallClient:
    """Client for the Recall.ai v1 REST API."""

    def __init__(self, api_key: str, region: str = "us-west-2", timeout: float = 30.0) -> None:
        self.region = region
        self.base_url = f"https://{region}.recall.ai/api/v1"
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({
            "Authorization": api_key,
            "Accept": "application/json",
        })
        _logger.info("RecallClient initialized, base_url=%s", self.base_url)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            _logger.error("Recall request failed: %s %s: %s", method, path, exc)
            raise RecallAPIError(f"Failed to reach Recall API: {exc}") from exc

        if not response.ok:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text[:500]
            _logger.error(
                "Recall error: %s %s -> %s %s", method, path, response.status_code, payload
            )
            raise RecallAPIError(
                f"Recall API error: {response.status_code}",
                status_code=response.status_code,
                payload=payload,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise RecallAPIError("Recall API returned non-JSON content") from exc

    def create_bot(
        self,
        meeting_url: str,
        bot_name: str = DEFAULT_BOT_NAME,
        recording_config: Optional[dict] = None,
    ) -> dict:
        """Ask Recall to send a recording bot into ``meeting_url``."""
        payload = {
            "meeting_url": meeting_url,
            "bot_name": bot_name,
            "recording_config": recording_config or default_recording_config(),
        }
        data = self._request("POST", "/bot/", json=payload)
        _logger.info("Bot created, bot_id=%s", data.get("id") if isinstance(data, dict) else None)
        return data

    def get_bot(self, bot_id: str) -> dict:
        return self._request("GET", f"/bot/{bot_id}")

    def _list_media(self, kind: str, recording_id: str) -> list:
        data = self._request("GET", f"/{kind}/", params={"recording_id": recording_id})
        results = data.get("results") if isinstance(data, dict) else None
        return results if isinstance(results, list) else []

    def list_audio_mixed(self, recording_id: str) -> list:
        return self._list_media("audio_mixed", recording_id)

    def list_audio_separate(self, recording_id: str) -> list:
        return self._list_media("audio_separate", recording_id)

    def list_video_separate(self, recording_id: str) -> list:
        return self._list_media("video_separate", recording_id)

    def download_json(self, url: str) -> Any:
        """Fetch a pre-signed artifact URL. These carry their own auth, so no API key is sent."""
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            status = getattr(getattr(exc, "response", None), "status_code", None)
            raise RecallAPIError(f"Artifact download failed: {exc}", status_code=status) from exc
        try:
            return response.json()
        except ValueError as exc:
            raise RecallAPIError("Artifact download returned non-JSON content") from exc

    def close(self) -> None:
        self._session.close()
        _logger.info("RecallClient session closed")
