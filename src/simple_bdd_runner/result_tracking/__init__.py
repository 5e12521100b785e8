"""Result tracking domain exports."""

from .event_boundary_mappers import (
    RunEventFormatError,
    read_run_events,
    to_outcome,
    to_run_event,
    to_test_case_location,
)
from .outcome_tracker import (
    CaseVerdict,
    EventOrderingViolation,
    TestCaseOutcomeTracker,
    Verdict,
    fold_attempts,
    is_reportable,
)
from .run_events import (
    EventBus,
    Outcome,
    RunEvent,
    TestCaseFinished,
    TestCaseKey,
    TestCaseLocation,
    TestCaseStarted,
    TestRunFinished,
)

__all__ = [
    "CaseVerdict",
    "EventBus",
    "EventOrderingViolation",
    "Outcome",
    "RunEvent",
    "RunEventFormatError",
    "TestCaseFinished",
    "TestCaseKey",
    "TestCaseLocation",
    "TestCaseOutcomeTracker",
    "TestCaseStarted",
    "TestRunFinished",
    "Verdict",
    "fold_attempts",
    "is_reportable",
    "read_run_events",
    "to_outcome",
    "to_run_event",
    "to_test_case_location",
]
