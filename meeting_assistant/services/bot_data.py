"""Assembles the unified meeting record for one bot.

Fetches the bot from Recall and, once its recording is done, downloads each
artifact independently. One failed artifact never aborts the others: every
fetch lands in an ``ArtifactResult`` slot that is ok, absent or error, and the
derived statistics run on whatever was obtained.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from meeting_assistant.services.meeting_stats import (
    build_timeline,
    calculate_duration,
    extract_participant_stats,
    format_duration,
    generate_summary,
)
from meeting_assistant.services.models import (
    MediaTrack,
    StatusChange,
    extract_chat_messages,
    parse_transcript,
)
from meeting_assistant.services.recall_client import RecallAPIError, RecallClient

_logger = logging.getLogger("meeting_assistant.bot_data")

TERMINAL_STATUSES = ("done", "fatal")

ARTIFACT_NAMES = (
    "transcript",
    "participant_events",
    "participants",
    "audio_mixed",
    "audio_separate",
    "video_separate",
)


class ArtifactState(Enum):
    OK = "ok"
    ABSENT = "absent"
    ERROR = "error"


@dataclass
class ArtifactResult:
    state: ArtifactState
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, value: Any) -> "ArtifactResult":
        return cls(ArtifactState.OK, value)

    @classmethod
    def absent(cls) -> "ArtifactResult":
        return cls(ArtifactState.ABSENT)

    @classmethod
    def failed(cls, error: str) -> "ArtifactResult":
        return cls(ArtifactState.ERROR, error=error)

    def value_or(self, default: Any) -> Any:
        return self.value if self.state is ArtifactState.OK else default

    def to_dict(self) -> dict:
        data = {"state": self.state.value}
        if self.error:
            data["error"] = self.error
        return data


def _dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def current_status(status_changes: list) -> str:
    if not status_changes:
        return "unknown"
    latest = status_changes[-1]
    if not isinstance(latest, dict):
        return "unknown"
    return latest.get("code") or "unknown"


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


class BotDataService:
    """Builds the unified record returned by ``GET /api/bot/{bot_id}``."""

    def __init__(self, client: RecallClient) -> None:
        self._client = client

    def _fetch(self, name: str, fn: Callable[[], Any]) -> ArtifactResult:
        """Run one best-effort artifact fetch."""
        try:
            value = fn()
        except RecallAPIError as exc:
            _logger.warning("%s not available: %s", name, exc)
            return ArtifactResult.failed(str(exc))
        except Exception as exc:
            _logger.exception("%s fetch error: %s", name, exc)
            return ArtifactResult.failed(str(exc))
        if value is None:
            return ArtifactResult.absent()
        return ArtifactResult.ok(value)

    def _download_list(self, url: str) -> Optional[list]:
        data = self._client.download_json(url)
        return data if isinstance(data, list) else None

    def _first_download_url(self, results: list) -> Optional[str]:
        if not results:
            return None
        return _dict(_dict(results[0]).get("data")).get("download_url") or None

    def _tracks(self, results: list) -> list[dict]:
        tracks = []
        for result in results:
            track = MediaTrack.from_result(result)
            if track is not None:
                tracks.append(track.to_dict())
        return tracks

    def fetch_artifacts(self, recording: dict) -> dict[str, ArtifactResult]:
        """Fetch every artifact of a finished recording into its own slot."""
        recording_id = recording.get("id")
        shortcuts = _dict(recording.get("media_shortcuts"))
        transcript_data = _dict(_dict(shortcuts.get("transcript")).get("data"))
        events_data = _dict(_dict(shortcuts.get("participant_events")).get("data"))

        slots: dict[str, ArtifactResult] = {}

        transcript_url = transcript_data.get("download_url")
        if transcript_url:
            slots["transcript"] = self._fetch("Transcript", lambda: self._download_list(transcript_url))
        else:
            _logger.info("No transcript available - was it enabled when creating the bot?")
            slots["transcript"] = ArtifactResult.absent()

        events_url = events_data.get("participant_events_download_url")
        slots["participant_events"] = (
            self._fetch("Participant events", lambda: self._download_list(events_url))
            if events_url
            else ArtifactResult.absent()
        )

        participants_url = events_data.get("participants_download_url")
        slots["participants"] = (
            self._fetch("Participants list", lambda: self._download_list(participants_url))
            if participants_url
            else ArtifactResult.absent()
        )

        slots["audio_mixed"] = self._fetch(
            "Audio mixed",
            lambda: self._first_download_url(self._client.list_audio_mixed(recording_id)),
        )
        slots["audio_separate"] = self._fetch(
            "Audio separate",
            lambda: self._tracks(self._client.list_audio_separate(recording_id)),
        )
        slots["video_separate"] = self._fetch(
            "Video separate",
            lambda: self._tracks(self._client.list_video_separate(recording_id)),
        )

        for name, slot in slots.items():
            if slot.state is ArtifactState.OK:
                size = len(slot.value) if isinstance(slot.value, list) else 1
                _logger.info("%s available (%d)", name, size)
        return slots

    def get_bot_data(self, bot_id: str) -> dict:
        """Fetch the bot and assemble the full record.

        Raises:
            RecallAPIError: if the bot itself cannot be fetched
        """
        _logger.info("Fetching complete bot data, bot_id=%s", bot_id)
        bot = _dict(self._client.get_bot(bot_id))
        raw_status_changes = bot.get("status_changes")
        if not isinstance(raw_status_changes, list):
            raw_status_changes = []
        status = current_status(raw_status_changes)
        _logger.info("Bot retrieved, status=%s", status)

        recordings = bot.get("recordings")
        recording = _dict(recordings[0]) if isinstance(recordings, list) and recordings else {}
        shortcuts = _dict(recording.get("media_shortcuts"))
        recording_done = _dict(recording.get("status")).get("code") == "done"

        slots = {name: ArtifactResult.absent() for name in ARTIFACT_NAMES}
        video_mixed_url = None
        meeting_metadata: dict = {}
        if recording and recording_done and shortcuts:
            video_mixed_url = _dict(_dict(shortcuts.get("video_mixed")).get("data")).get("download_url")
            meeting_metadata = _dict(_dict(shortcuts.get("meeting_metadata")).get("data"))
            slots.update(self.fetch_artifacts(recording))
        elif recording and not recording_done:
            _logger.info("Recording still processing, recording_id=%s", recording.get("id"))

        return self._assemble(bot, status, recording, slots, video_mixed_url, meeting_metadata)

    def _assemble(
        self,
        bot: dict,
        status: str,
        recording: dict,
        slots: dict[str, ArtifactResult],
        video_mixed_url: Optional[str],
        meeting_metadata: dict,
    ) -> dict:
        raw_transcript = slots["transcript"].value_or([])
        participant_events = slots["participant_events"].value_or([])
        participants = slots["participants"].value_or([])
        video_separate = slots["video_separate"].value_or([])
        audio_separate = slots["audio_separate"].value_or([])
        raw_status_changes = bot.get("status_changes") if isinstance(bot.get("status_changes"), list) else []

        transcript = parse_transcript(raw_transcript)
        chat_messages = extract_chat_messages(participant_events)
        stats = extract_participant_stats(transcript)
        duration = calculate_duration(StatusChange.from_dict(s) for s in raw_status_changes)
        summary = generate_summary(transcript, stats, chat_messages)
        timeline = build_timeline(transcript, chat_messages)
        stat_dicts = [s.to_dict() for s in stats]

        result = {
            "bot_id": bot.get("id"),
            "status": status,
            "is_complete": status == "done",
            "meeting_metadata": meeting_metadata,
            "meeting_url": bot.get("meeting_url") or None,
            "duration": {"milliseconds": duration, "formatted": format_duration(duration)},
            "participants": participants if participants else stat_dicts,
            "participant_count": len(participants) if participants else len(stats),
            "participant_stats": stat_dicts,
            "transcript": raw_transcript,
            "transcript_utterance_count": len(transcript),
            "transcript_word_count": sum(len(u.words) for u in transcript),
            "chat_messages": [m.to_dict() for m in chat_messages],
            "chat_message_count": len(chat_messages),
            "summary": summary,
            "timeline": [e.to_dict() for e in timeline],
            "media": {
                "video_mixed": video_mixed_url or None,
                "audio_mixed": slots["audio_mixed"].value_or(None),
                "video_separate": video_separate,
                "audio_separate": audio_separate,
                "video_separate_count": len(video_separate),
                "audio_separate_count": len(audio_separate),
            },
            "participant_events": participant_events,
            "participant_events_count": len(participant_events),
            "status_changes": raw_status_changes,
            "created_at": bot.get("created_at"),
            "recording_id": recording.get("id"),
            "artifacts": {name: slot.to_dict() for name, slot in slots.items()},
        }

        _logger.info(
            "Bot data summary: status=%s duration=%s participants=%d utterances=%d chat=%d "
            "video_mixed=%s audio_mixed=%s video_separate=%d audio_separate=%d",
            result["status"],
            result["duration"]["formatted"],
            result["participant_count"],
            result["transcript_utterance_count"],
            result["chat_message_count"],
            bool(result["media"]["video_mixed"]),
            bool(result["media"]["audio_mixed"]),
            len(video_separate),
            len(audio_separate),
        )
        return result
