from meeting_assistant.services.models import (
    ChatMessage,
    MediaTrack,
    StatusChange,
    Utterance,
    extract_chat_messages,
    parse_transcript,
)
from meeting_assistant.tests.fakes import PARTICIPANT_EVENTS


def test_parse_transcript_tolerates_garbage():
    assert parse_transcript(None) == []
    assert parse_transcript({"words": []}) == []

    (utterance,) = parse_transcript([{"speaker": "Dana", "words": "nope"}])
    assert utterance.speaker == "Dana"
    assert utterance.words == []


def test_word_timestamps_reject_non_numbers():
    utterance = Utterance.from_dict({
        "participant": {"name": "Alice"},
        "words": [
            {"text": "a", "start_timestamp": {"relative": "1.0"}, "end_timestamp": {"relative": float("nan")}},
            {"text": "b", "start_timestamp": {"relative": True}, "end_timestamp": {"relative": 2}},
        ],
    })
    assert [(w.start, w.end) for w in utterance.words] == [(None, None), (None, 2.0)]
    assert utterance.text == "a b"


def test_status_change_defaults():
    assert StatusChange.from_dict(None).code == "unknown"
    change = StatusChange.from_dict({"code": "done", "created_at": "2024-05-01T10:00:00Z"})
    assert change.to_dict() == {"code": "done", "sub_code": None, "created_at": "2024-05-01T10:00:00Z"}


def test_chat_messages_are_only_events_with_text_and_recipient():
    events = PARTICIPANT_EVENTS + [
        {"participant": {"name": "Eve"}, "data": {"text": "no recipient"}},
        {"participant": {"name": "Eve"}, "data": {"text": 42, "to": "everyone"}},
        "not-an-event",
    ]
    messages = extract_chat_messages(events)

    assert len(messages) == 1
    assert messages[0].to_dict() == {
        "participant_name": "Bob",
        "text": "slides link?",
        "participant_id": 2,
        "to": "everyone",
        "timestamp_absolute": "2024-05-01T10:00:03Z",
        "timestamp_relative_seconds": 2.5,
    }


def test_chat_message_from_event_without_participant_name():
    message = ChatMessage.from_participant_event({"data": {"text": "hi", "to": "host"}})
    assert message.participant_name == "Unknown"
    assert message.timestamp_relative_seconds is None


def test_chat_message_round_trips_from_ui_echo():
    message = ChatMessage.from_dict({"participant_name": "Bob", "text": "ok", "timestamp_relative_seconds": 3})
    assert message.text == "ok"
    assert message.timestamp_relative_seconds == 3.0


def test_media_track_requires_download_url():
    assert MediaTrack.from_result({"data": {}}) is None
    track = MediaTrack.from_result({"data": {"download_url": "https://x/a.wav"}, "metadata": None})
    assert track.to_dict() == {
        "url": "https://x/a.wav",
        "participant_id": None,
        "participant_name": "Unknown",
        "format": "unknown",
        "created_at": None,
    }
