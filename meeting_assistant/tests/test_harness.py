import asyncio
import os

from meeting_assistant.tests import base
from meeting_assistant.tests.harness import TestHarness as Harness
from meeting_assistant.tests.suites.meeting_stats import MeetingStatsSuite


def test_meeting_stats_suite_passes():
    result = asyncio.run(MeetingStatsSuite().run())
    failures = [r.to_dict() for r in result.results if r.status is not base.TestStatus.PASSED]
    assert failures == []
    assert result.passed == len(result.results) == 6


def test_case_outcome_coercion():
    def returns_false(ctx):
        return False

    def raises_assertion(ctx):
        assert 1 == 2, "mismatch"

    def raises_error(ctx):
        raise KeyError("missing")

    async def returns_dict(ctx):
        return {"passed": True, "message": "fine", "details": {"n": 1}}

    statuses = [
        asyncio.run(base.TestCase("T-%d" % i, "case", fn).run({})).status
        for i, fn in enumerate((returns_false, raises_assertion, raises_error, returns_dict))
    ]
    assert statuses == [
        base.TestStatus.FAILED,
        base.TestStatus.FAILED,
        base.TestStatus.ERROR,
        base.TestStatus.PASSED,
    ]
    skipped = asyncio.run(base.TestCase("T-9", "skip", returns_false, skip=True, skip_reason="later").run({}))
    assert skipped.status is base.TestStatus.SKIPPED
    assert skipped.message == "later"


def test_harness_runs_suite_and_writes_log(tmp_path):
    harness = Harness(str(tmp_path))
    assert {s["suite_id"] for s in harness.get_available_suites()} == {"meeting-stats", "api-smoke"}

    outcome = asyncio.run(harness.run_suite("meeting-stats"))

    assert outcome["status"] == "ok"
    assert outcome["result"]["passed"] == 6
    assert os.path.exists(outcome["log_file"])
    assert asyncio.run(harness.run_suite("nope"))["status"] == "error"
