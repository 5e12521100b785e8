"""Run event entities and the in-process event bus."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar


class Outcome(str, Enum):
    """Result reported by the execution engine for one test case attempt."""

    PASSED = "passed"
    FAILED = "failed"
    PENDING = "pending"
    UNDEFINED = "undefined"
    SKIPPED = "skipped"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True, order=True)
class TestCaseKey:
    """Identity shared by every attempt at one scenario occurrence."""

    __test__ = False

    path: str
    line: int


@dataclass(frozen=True)
class TestCaseLocation:
    """Source position of an executed test case."""

    __test__ = False

    path: str
    line: int
    column: int | None = None

    @property
    def key(self) -> TestCaseKey:
        return TestCaseKey(path=self.path, line=self.line)

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


@dataclass(frozen=True)
class TestCaseStarted:
    """An attempt at a test case began."""

    __test__ = False

    location: TestCaseLocation
    attempt: int = 0


@dataclass(frozen=True)
class TestCaseFinished:
    """An attempt at a test case produced an outcome."""

    __test__ = False

    location: TestCaseLocation
    outcome: Outcome
    attempt: int = 0


@dataclass(frozen=True)
class TestRunFinished:
    """No further attempts will be reported for this run."""

    __test__ = False


RunEvent = TestCaseStarted | TestCaseFinished | TestRunFinished
_EventT = TypeVar("_EventT")


class EventBus:
    """Delivers run events to the handlers registered for their type."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = {}
        self._lock = threading.Lock()

    def on(self, event_type: type[_EventT], handler: Callable[[_EventT], None]) -> None:
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)

    def broadcast(self, event: RunEvent) -> None:
        with self._lock:
            handlers = tuple(self._handlers.get(type(event), ()))
        for handler in handlers:
            handler(event)

    def test_case_started(self, location: TestCaseLocation, attempt: int = 0) -> None:
        self.broadcast(TestCaseStarted(location=location, attempt=attempt))

    def test_case_finished(
        self, location: TestCaseLocation, outcome: Outcome, attempt: int = 0
    ) -> None:
        self.broadcast(TestCaseFinished(location=location, outcome=outcome, attempt=attempt))

    def test_run_finished(self) -> None:
        self.broadcast(TestRunFinished())
