"""Per-test-case outcome tracking across retries."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from simple_bdd_runner._logging import get_logger
from simple_bdd_runner.option_resolution.runtime_settings import StrictConfiguration

from .run_events import (
    EventBus,
    Outcome,
    TestCaseFinished,
    TestCaseKey,
    TestCaseLocation,
    TestCaseStarted,
    TestRunFinished,
)

_LOGGER = get_logger("tracking")


class Verdict(str, Enum):
    """Final classification of one test case after all its attempts."""

    PASSED = "passed"
    FAILED = "failed"
    FLAKY = "flaky"
    PENDING = "pending"
    UNDEFINED = "undefined"
    SKIPPED = "skipped"


class EventOrderingViolation(Exception):
    """Raised when run events arrive in an order the tracker cannot accept."""


@dataclass(frozen=True)
class CaseVerdict:
    """Folded state of one test case."""

    location: TestCaseLocation
    outcome: Verdict
    attempts: tuple[Outcome, ...]

    @property
    def key(self) -> TestCaseKey:
        return self.location.key


@dataclass
class _CaseRecord:
    location: TestCaseLocation
    attempts: list[Outcome] = field(default_factory=list)
    last_attempt: int = 0


def fold_attempts(attempts: Sequence[Outcome]) -> Verdict:
    """Collapse the attempt history of one test case into its verdict.

    A history holding both a failure and a pass is flaky whatever the order;
    otherwise the last attempt decides. Ambiguous attempts count as failures.
    """
    if not attempts:
        raise ValueError("A verdict needs at least one attempt.")
    normalized = [Outcome.FAILED if item is Outcome.AMBIGUOUS else item for item in attempts]
    if Outcome.FAILED in normalized and Outcome.PASSED in normalized:
        return Verdict.FLAKY
    return Verdict(normalized[-1].value)


def is_reportable(verdict: Verdict, strict: StrictConfiguration) -> bool:
    """Return True when *verdict* belongs in the rerun list under *strict*."""
    if verdict is Verdict.FAILED:
        return True
    if verdict in (Verdict.FLAKY, Verdict.PENDING, Verdict.UNDEFINED):
        return strict.is_strict(verdict.value)
    return False


class TestCaseOutcomeTracker:
    """Folds test case attempts from the event stream into one verdict per case.

    Cases are kept in the order they were first seen. Retries of one case must
    arrive in attempt order; attempt 0 starts a fresh execution of the case.
    After the run-finished event the verdicts are frozen and further attempts
    are rejected.
    """

    __test__ = False

    def __init__(
        self,
        strict: StrictConfiguration | None = None,
        *,
        event_bus: EventBus | None = None,
    ) -> None:
        self._strict = strict or StrictConfiguration()
        self._records: dict[TestCaseKey, _CaseRecord] = {}
        self._run_finished = False
        self._lock = threading.Lock()
        if event_bus is not None:
            self.subscribe(event_bus)

    def subscribe(self, event_bus: EventBus) -> None:
        event_bus.on(TestCaseStarted, self.on_test_case_started)
        event_bus.on(TestCaseFinished, self.on_test_case_finished)
        event_bus.on(TestRunFinished, self.on_test_run_finished)

    @property
    def run_finished(self) -> bool:
        return self._run_finished

    def on_test_case_started(self, event: TestCaseStarted) -> None:
        with self._lock:
            self._ensure_open(event.location)
            self._records.setdefault(event.location.key, _CaseRecord(location=event.location))

    def on_test_case_finished(self, event: TestCaseFinished) -> None:
        with self._lock:
            self._ensure_open(event.location)
            record = self._records.setdefault(
                event.location.key, _CaseRecord(location=event.location)
            )
            if 0 < event.attempt < record.last_attempt:
                raise EventOrderingViolation(
                    f"Attempt {event.attempt} for {event.location} arrived after attempt "
                    f"{record.last_attempt}."
                )
            record.last_attempt = event.attempt
            record.attempts.append(event.outcome)
            _LOGGER.debug(
                "%s attempt %d: %s", event.location, len(record.attempts), event.outcome.value
            )

    def on_test_run_finished(self, event: TestRunFinished | None = None) -> None:
        with self._lock:
            if self._run_finished:
                raise EventOrderingViolation("The run was already reported as finished.")
            self._run_finished = True

    def verdicts(self) -> tuple[CaseVerdict, ...]:
        """Return verdicts for every case with at least one finished attempt."""
        with self._lock:
            return tuple(
                CaseVerdict(
                    location=record.location,
                    outcome=fold_attempts(record.attempts),
                    attempts=tuple(record.attempts),
                )
                for record in self._records.values()
                if record.attempts
            )

    def reportable_verdicts(self) -> tuple[CaseVerdict, ...]:
        if not self._run_finished:
            raise EventOrderingViolation("Reportable cases are only known once the run finished.")
        return tuple(
            verdict for verdict in self.verdicts() if is_reportable(verdict.outcome, self._strict)
        )

    def reportable_locations(self) -> tuple[str, ...]:
        """Return one ``path:line[:line...]`` entry per file, in first-seen order."""
        lines_by_path: dict[str, list[int]] = {}
        for verdict in self.reportable_verdicts():
            lines = lines_by_path.setdefault(verdict.location.path, [])
            if verdict.location.line not in lines:
                lines.append(verdict.location.line)
        return tuple(
            ":".join([path, *(str(line) for line in lines)])
            for path, lines in lines_by_path.items()
        )

    def _ensure_open(self, location: TestCaseLocation) -> None:
        if self._run_finished:
            raise EventOrderingViolation(f"Attempt for {location} arrived after the run finished.")
