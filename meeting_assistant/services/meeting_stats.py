"""Derived meeting statistics: duration, speaker activity, keywords, timeline.

All functions here are total over malformed provider data. Bad entries
contribute nothing and the result degrades to zero/empty defaults.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from meeting_assistant.services.models import (
    ChatMessage,
    Keyword,
    ParticipantStat,
    StatusChange,
    TimelineEvent,
    Utterance,
    _as_number,
)

_logger = logging.getLogger("meeting_assistant.stats")

JOINED_CODES = ("in_call_not_recording", "in_call_recording")
ENDED_CODES = ("done", "fatal")

KEYWORD_LIMIT = 10
TOP_SPEAKER_LIMIT = 5
NO_TRANSCRIPT_MESSAGE = "No transcript available for summary generation"

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "is", "was", "are", "were", "been", "be", "have", "has", "had",
    "do", "does", "did", "will", "would", "could", "should", "may", "might",
    "can", "this", "that", "these", "those", "i", "you", "he", "she", "it",
    "we", "they", "what", "which", "who", "when", "where", "why", "how", "all",
    "each", "every", "both", "few", "more", "most", "other", "some", "such",
    "no", "nor", "not", "only", "own", "same", "so", "than", "too", "very",
    "just", "um", "uh", "yeah", "yes", "okay", "ok",
})

_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)
_FRACTION = re.compile(r"\.(\d+)(?=[+-]\d{2}:\d{2}$|$)")


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 accepts only 3 or 6 fractional digits
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def calculate_duration(status_changes: Iterable[StatusChange]) -> int:
    """Milliseconds from the first call-joined event to the first call-ended event.

    Returns 0 when either marker is missing or unparseable. The result is not
    clamped, so inconsistent provider clocks can yield a negative value.
    """
    changes = list(status_changes or [])
    joined = next((s for s in changes if s.code in JOINED_CODES), None)
    ended = next((s for s in changes if s.code in ENDED_CODES), None)
    if joined is None or ended is None:
        _logger.info(
            "Duration unavailable: joined_event=%s ended_event=%s",
            joined is not None,
            ended is not None,
        )
        return 0

    start = _parse_timestamp(joined.created_at)
    end = _parse_timestamp(ended.created_at)
    if start is None or end is None:
        _logger.warning(
            "Invalid status change timestamps: joined=%r ended=%r",
            joined.created_at,
            ended.created_at,
        )
        return 0
    return round((end - start).total_seconds() * 1000)


def format_duration(ms: Any) -> str:
    """Render milliseconds as ``1h 2m 5s`` / ``2m 5s`` / ``45s``."""
    value = _as_number(ms)
    if value is None or value <= 0:
        return "0m 0s"

    seconds = int(value // 1000)
    minutes = seconds // 60
    hours = minutes // 60
    if hours > 0:
        return f"{hours}h {minutes % 60}m {seconds % 60}s"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"


def extract_participant_stats(transcript: Iterable[Utterance]) -> list[ParticipantStat]:
    """Fold utterances into per-speaker totals, in first-seen speaker order.

    Speaking time per utterance is the span from the first word's start to the
    last word's end, so pauses inside an utterance count as speaking time.
    """
    stats: dict[str, ParticipantStat] = {}
    for utterance in transcript or []:
        stat = stats.get(utterance.speaker)
        if stat is None:
            stat = stats[utterance.speaker] = ParticipantStat(name=utterance.speaker)

        if utterance.words:
            start = utterance.words[0].start
            end = utterance.words[-1].end
            if start is not None and end is not None and end - start >= 0:
                stat.speaking_time_seconds += end - start
            stat.word_count += len(utterance.words)

        stat.utterances += 1

    for stat in stats.values():
        stat.speaking_time_formatted = format_duration(stat.speaking_time_seconds * 1000)
    return list(stats.values())


def normalize_token(text: Any) -> str:
    if not isinstance(text, str):
        return ""
    return _NON_WORD.sub("", text.lower())


def extract_keywords(transcript: Iterable[Utterance], limit: int = KEYWORD_LIMIT) -> list[Keyword]:
    """Most frequent content words, ties kept in first-encountered order."""
    counts: dict[str, int] = {}
    for utterance in transcript or []:
        for word in utterance.words:
            token = normalize_token(word.text)
            if len(token) <= 3 or token in STOP_WORDS:
                continue
            counts[token] = counts.get(token, 0) + 1

    # sorted() is stable, and dicts keep insertion order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [Keyword(word=word, count=count) for word, count in ranked[:limit]]


def generate_summary(
    transcript: list[Utterance],
    participant_stats: list[ParticipantStat],
    chat_messages: list[ChatMessage],
) -> dict:
    if not transcript:
        return {"available": False, "message": NO_TRANSCRIPT_MESSAGE}

    total_words = sum(len(u.words) for u in transcript)
    avg_words = int(total_words / len(transcript) + 0.5)

    most_active = sorted(participant_stats, key=lambda p: p.word_count, reverse=True)
    speakers = [
        {
            "name": p.name,
            "word_count": p.word_count,
            "speaking_time_formatted": p.speaking_time_formatted,
            "utterances": p.utterances,
        }
        for p in most_active[:TOP_SPEAKER_LIMIT]
    ]

    return {
        "available": True,
        "overview": {
            "total_utterances": len(transcript),
            "total_words": total_words,
            "avg_words_per_utterance": avg_words,
            "total_participants": len(participant_stats),
            "total_chat_messages": len(chat_messages),
        },
        "keywords": [k.to_dict() for k in extract_keywords(transcript)],
        "most_active_speakers": speakers,
        "chat_activity": {
            "total_messages": len(chat_messages),
            "participants_who_chatted": len({m.participant_name for m in chat_messages}),
        },
    }


def build_timeline(
    transcript: Iterable[Utterance], chat_messages: Iterable[ChatMessage]
) -> list[TimelineEvent]:
    """Merge transcript words and chat messages into speaker-grouped display events.

    Speech is enumerated before chat, so on equal times speech sorts first.
    Consecutive words from one speaker form a single group; a chat message
    always stands alone and breaks any open speech group.
    """
    events: list[TimelineEvent] = []
    for utterance in transcript or []:
        for word in utterance.words:
            events.append(
                TimelineEvent(
                    type="speech",
                    speaker=utterance.speaker,
                    time=word.start or 0,
                    words=[word.text],
                )
            )
    for message in chat_messages or []:
        events.append(
            TimelineEvent(
                type="chat",
                speaker=message.participant_name,
                time=message.timestamp_relative_seconds or 0,
                text=message.text,
            )
        )
    events.sort(key=lambda e: e.time)

    grouped: list[TimelineEvent] = []
    current: Optional[TimelineEvent] = None
    for event in events:
        if event.type == "chat":
            grouped.append(event)
            current = None
        elif current is not None and current.speaker == event.speaker:
            current.words.extend(event.words)
        else:
            current = event
            grouped.append(current)
    return grouped
