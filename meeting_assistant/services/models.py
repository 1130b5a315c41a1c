"""Normalized records parsed from recording-provider payloads.

Provider JSON is untyped and fields come and go between API versions, so
every ``from_*`` constructor here is tolerant: missing or malformed fields
degrade to defaults instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

UNKNOWN_SPEAKER = "Unknown"


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_number(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return float(value)


@dataclass
class StatusChange:
    code: str
    sub_code: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "StatusChange":
        data = _as_dict(data)
        code = data.get("code")
        return cls(
            code=code if isinstance(code, str) else "unknown",
            sub_code=data.get("sub_code"),
            created_at=data.get("created_at"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Word:
    text: str
    start: Optional[float]
    end: Optional[float]

    @classmethod
    def from_dict(cls, data: Any) -> "Word":
        data = _as_dict(data)
        text = data.get("text")
        return cls(
            text=text if isinstance(text, str) else "",
            start=_as_number(_as_dict(data.get("start_timestamp")).get("relative")),
            end=_as_number(_as_dict(data.get("end_timestamp")).get("relative")),
        )


@dataclass
class Utterance:
    """One block of transcribed speech attributed to a single speaker."""

    speaker: str
    words: list[Word] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Utterance":
        data = _as_dict(data)
        speaker = _as_dict(data.get("participant")).get("name") or data.get("speaker")
        raw_words = data.get("words")
        words = [Word.from_dict(w) for w in raw_words] if isinstance(raw_words, list) else []
        return cls(
            speaker=speaker if isinstance(speaker, str) and speaker else UNKNOWN_SPEAKER,
            words=words,
        )

    @property
    def text(self) -> str:
        return " ".join(w.text for w in self.words)


def parse_transcript(raw: Any) -> list[Utterance]:
    if not isinstance(raw, list):
        return []
    return [Utterance.from_dict(item) for item in raw]


@dataclass
class ChatMessage:
    participant_name: str
    text: str
    participant_id: Optional[Any] = None
    to: Optional[Any] = None
    timestamp_absolute: Optional[str] = None
    timestamp_relative_seconds: Optional[float] = None

    @classmethod
    def from_participant_event(cls, event: Any) -> Optional["ChatMessage"]:
        """Build a chat message from a participant event, or None if it is not one.

        Chat events are the only participant events whose ``data`` carries a
        string ``text`` and a recipient in ``to``.
        """
        event = _as_dict(event)
        data = _as_dict(event.get("data"))
        if not isinstance(data.get("text"), str) or not data.get("to"):
            return None
        participant = _as_dict(event.get("participant"))
        timestamp = _as_dict(event.get("timestamp"))
        return cls(
            participant_name=participant.get("name") or UNKNOWN_SPEAKER,
            participant_id=participant.get("id"),
            text=data["text"],
            to=data["to"],
            timestamp_absolute=timestamp.get("absolute"),
            timestamp_relative_seconds=_as_number(timestamp.get("relative")),
        )

    @classmethod
    def from_dict(cls, data: Any) -> "ChatMessage":
        """Rebuild a chat message from its own ``to_dict`` form (as echoed by the UI)."""
        data = _as_dict(data)
        return cls(
            participant_name=data.get("participant_name") or UNKNOWN_SPEAKER,
            text=data.get("text") if isinstance(data.get("text"), str) else "",
            participant_id=data.get("participant_id"),
            to=data.get("to"),
            timestamp_absolute=data.get("timestamp_absolute"),
            timestamp_relative_seconds=_as_number(data.get("timestamp_relative_seconds")),
        )

    def to_dict(self) -> dict:
        return asdict(self)


def extract_chat_messages(participant_events: Any) -> list[ChatMessage]:
    if not isinstance(participant_events, list):
        return []
    messages = []
    for event in participant_events:
        message = ChatMessage.from_participant_event(event)
        if message is not None:
            messages.append(message)
    return messages


@dataclass
class MediaTrack:
    """A per-participant audio or video download."""

    url: str
    participant_id: Optional[Any]
    participant_name: str
    format: str
    created_at: Optional[str]

    @classmethod
    def from_result(cls, result: Any) -> Optional["MediaTrack"]:
        result = _as_dict(result)
        data = _as_dict(result.get("data"))
        url = data.get("download_url")
        if not url:
            return None
        metadata = _as_dict(result.get("metadata"))
        return cls(
            url=url,
            participant_id=metadata.get("participant_id"),
            participant_name=metadata.get("participant_name") or UNKNOWN_SPEAKER,
            format=data.get("format") or "unknown",
            created_at=result.get("created_at"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ParticipantStat:
    name: str
    speaking_time_seconds: float = 0.0
    word_count: int = 0
    utterances: int = 0
    speaking_time_formatted: str = "0m 0s"

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Keyword:
    word: str
    count: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TimelineEvent:
    """A speech run (``words``) or a single chat message (``text``)."""

    type: str
    speaker: str
    time: float
    words: list[str] = field(default_factory=list)
    text: Optional[str] = None

    def to_dict(self) -> dict:
        if self.type == "chat":
            return {"type": "chat", "speaker": self.speaker, "time": self.time, "text": self.text}
        return {"type": "speech", "speaker": self.speaker, "time": self.time, "words": list(self.words)}
