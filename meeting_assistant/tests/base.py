"""Base classes for the in-app test harness."""
from __future__ import annotations

import asyncio
import logging
import time
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional


class TestStatus(Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass
class TestResult:
    test_id: str
    name: str
    status: TestStatus
    duration_ms: float = 0.0
    message: str = ""
    details: dict = field(default_factory=dict)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "test_id": self.test_id,
            "name": self.name,
            "status": self.status.value,
            "duration_ms": self.duration_ms,
            "message": self.message,
            "details": self.details,
            "error": self.error,
        }


@dataclass
class SuiteResult:
    suite_id: str
    name: str
    started_at: str
    ended_at: str
    duration_ms: float
    results: list[TestResult] = field(default_factory=list)

    def count(self, status: TestStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    @property
    def passed(self) -> int:
        return self.count(TestStatus.PASSED)

    @property
    def failed(self) -> int:
        return self.count(TestStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self.count(TestStatus.SKIPPED)

    @property
    def error(self) -> int:
        return self.count(TestStatus.ERROR)

    def to_dict(self) -> dict:
        return {
            "suite_id": self.suite_id,
            "name": self.name,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
            "duration_ms": self.duration_ms,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "error": self.error,
            "results": [r.to_dict() for r in self.results],
        }


class TestCase:
    """A single harness check.

    ``fn`` receives the suite context and may return a TestResult, a bool, or
    a ``{"passed": bool, "message": str, "details": dict}`` dict. Returning
    nothing counts as a pass; an AssertionError counts as a failure.
    """

    def __init__(self, test_id: str, name: str, fn: Callable, skip: bool = False, skip_reason: str = ""):
        self.test_id = test_id
        self.name = name
        self.fn = fn
        self.skip = skip
        self.skip_reason = skip_reason

    def _result(self, status: TestStatus, message: str = "", **kwargs: Any) -> TestResult:
        return TestResult(test_id=self.test_id, name=self.name, status=status, message=message, **kwargs)

    def _coerce(self, outcome: Any) -> TestResult:
        if isinstance(outcome, TestResult):
            return outcome
        if isinstance(outcome, dict):
            status = TestStatus.PASSED if outcome.get("passed", False) else TestStatus.FAILED
            return self._result(status, outcome.get("message", ""), details=outcome.get("details", {}))
        if outcome is False:
            return self._result(TestStatus.FAILED, "Test failed")
        return self._result(TestStatus.PASSED, "Test passed")

    async def run(self, context: dict) -> TestResult:
        if self.skip:
            return self._result(TestStatus.SKIPPED, self.skip_reason or "Skipped")

        start = time.perf_counter()
        try:
            if asyncio.iscoroutinefunction(self.fn):
                result = self._coerce(await self.fn(context))
            else:
                result = self._coerce(self.fn(context))
        except AssertionError as exc:
            result = self._result(
                TestStatus.FAILED, str(exc) or "Assertion failed", error=traceback.format_exc()
            )
        except Exception as exc:
            result = self._result(TestStatus.ERROR, f"Error: {exc}", error=traceback.format_exc())
        result.duration_ms = (time.perf_counter() - start) * 1000
        return result


class TestSuite:
    """A collection of test cases."""

    suite_id: str = "base"
    name: str = "Base Test Suite"
    description: str = ""

    _SYMBOLS = {
        TestStatus.PASSED: "✓",
        TestStatus.FAILED: "✗",
        TestStatus.SKIPPED: "○",
        TestStatus.ERROR: "!",
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.tests: list[TestCase] = []
        self.logger = logger or logging.getLogger(f"meeting_assistant.test.{self.suite_id}")
        self.context: dict = {}
        self._register_tests()

    def _register_tests(self):
        """Override to register test cases."""

    def add_test(self, test_id: str, name: str, fn: Callable, skip: bool = False, skip_reason: str = ""):
        self.tests.append(TestCase(test_id, name, fn, skip, skip_reason))

    async def setup(self) -> None:
        """Override for suite setup."""

    async def teardown(self) -> None:
        """Override for suite teardown."""

    async def run(self) -> SuiteResult:
        started_at = datetime.now().isoformat()
        start_time = time.perf_counter()
        self.logger.info("SUITE: %s (%s)", self.name, self.suite_id)

        results: list[TestResult] = []
        try:
            await self.setup()
        except Exception as exc:
            self.logger.error("Suite setup failed: %s", exc)
            results.append(
                TestResult(
                    test_id="SETUP",
                    name="Suite Setup",
                    status=TestStatus.ERROR,
                    message=f"Setup failed: {exc}",
                    error=traceback.format_exc(),
                )
            )
        else:
            for test in self.tests:
                result = await test.run(self.context)
                results.append(result)
                self.logger.info(
                    "  [%s] %s %s (%.1fms) - %s",
                    self._SYMBOLS.get(result.status, "?"),
                    test.test_id,
                    result.status.value.upper(),
                    result.duration_ms,
                    result.message,
                )
                if result.error:
                    self.logger.error("  Error details:\n%s", result.error)
            try:
                await self.teardown()
            except Exception as exc:
                self.logger.error("Suite teardown failed: %s", exc)

        suite_result = SuiteResult(
            suite_id=self.suite_id,
            name=self.name,
            started_at=started_at,
            ended_at=datetime.now().isoformat(),
            duration_ms=(time.perf_counter() - start_time) * 1000,
            results=results,
        )
        self.logger.info(
            "SUMMARY: %d passed, %d failed, %d skipped, %d errors (%.1fms)",
            suite_result.passed,
            suite_result.failed,
            suite_result.skipped,
            suite_result.error,
            suite_result.duration_ms,
        )
        return suite_result

    def get_info(self) -> dict:
        return {
            "suite_id": self.suite_id,
            "name": self.name,
            "description": self.description,
            "test_count": len(self.tests),
            "tests": [{"test_id": t.test_id, "name": t.name, "skip": t.skip} for t in self.tests],
        }
