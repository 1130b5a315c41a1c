"""Meeting statistics test suite (runs in-process, no provider calls)."""
from __future__ import annotations

from meeting_assistant.services.meeting_stats import (
    NO_TRANSCRIPT_MESSAGE,
    STOP_WORDS,
    build_timeline,
    calculate_duration,
    extract_keywords,
    extract_participant_stats,
    format_duration,
    generate_summary,
)
from meeting_assistant.services.models import ChatMessage, StatusChange, parse_transcript
from meeting_assistant.tests.base import TestSuite

SAMPLE_TRANSCRIPT = [
    {
        "participant": {"name": "Alice"},
        "words": [
            {"text": "Budget", "start_timestamp": {"relative": 0.0}, "end_timestamp": {"relative": 0.5}},
            {"text": "review", "start_timestamp": {"relative": 0.6}, "end_timestamp": {"relative": 1.0}},
        ],
    },
    {
        "participant": {"name": "Bob"},
        "words": [
            {"text": "budget", "start_timestamp": {"relative": 2.0}, "end_timestamp": {"relative": 2.4}},
            {"text": "approved", "start_timestamp": {"relative": 2.5}, "end_timestamp": {"relative": 3.0}},
        ],
    },
]


class MeetingStatsSuite(TestSuite):
    """Checks duration, speaker stats, keywords, summary and timeline derivation."""

    suite_id = "meeting-stats"
    name = "Meeting Statistics"
    description = "Derivation of duration, participant stats, keywords and timeline"

    def _register_tests(self):
        self.add_test("MS-001", "Duration from status changes", self._test_duration)
        self.add_test("MS-002", "Duration formatting", self._test_format_duration)
        self.add_test("MS-003", "Participant stats", self._test_participant_stats)
        self.add_test("MS-004", "Keyword filtering", self._test_keywords)
        self.add_test("MS-005", "Empty transcript summary", self._test_empty_summary)
        self.add_test("MS-006", "Timeline preserves words and chats", self._test_timeline)

    async def setup(self):
        self.context["transcript"] = parse_transcript(SAMPLE_TRANSCRIPT)

    def _test_duration(self, ctx: dict):
        changes = [
            StatusChange("joining_call", created_at="2024-01-01T10:00:00Z"),
            StatusChange("in_call_recording", created_at="2024-01-01T10:00:05Z"),
            StatusChange("done", created_at="2024-01-01T10:02:10Z"),
        ]
        assert calculate_duration(changes) == 125_000
        assert calculate_duration(changes[:2]) == 0

    def _test_format_duration(self, ctx: dict):
        expected = {0: "0m 0s", 45_000: "45s", 125_000: "2m 5s", 3_725_000: "1h 2m 5s"}
        actual = {ms: format_duration(ms) for ms in expected}
        return {"passed": actual == expected, "message": "formatted", "details": actual}

    def _test_participant_stats(self, ctx: dict):
        stats = extract_participant_stats(ctx["transcript"])
        assert [s.name for s in stats] == ["Alice", "Bob"]
        assert sum(s.utterances for s in stats) == len(ctx["transcript"])
        assert stats[0].word_count == 2
        assert abs(stats[0].speaking_time_seconds - 1.0) < 1e-9

    def _test_keywords(self, ctx: dict):
        keywords = extract_keywords(ctx["transcript"])
        assert keywords[0].word == "budget" and keywords[0].count == 2
        assert all(len(k.word) > 3 and k.word not in STOP_WORDS for k in keywords)

    def _test_empty_summary(self, ctx: dict):
        summary = generate_summary([], [], [])
        return summary == {"available": False, "message": NO_TRANSCRIPT_MESSAGE}

    def _test_timeline(self, ctx: dict):
        chat = [ChatMessage(participant_name="Carol", text="link?", to="everyone")]
        timeline = build_timeline(ctx["transcript"], chat)
        speech_words = sum(len(e.words) for e in timeline if e.type == "speech")
        chats = [e for e in timeline if e.type == "chat"]
        assert speech_words == 4
        assert len(chats) == 1
        # chat without a timestamp sits at 0 and loses the tie to Alice's first word
        assert [e.type for e in timeline[:3]] == ["speech", "chat", "speech"]
