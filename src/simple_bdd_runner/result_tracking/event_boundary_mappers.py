"""Adapters from untyped execution-engine payloads to run events."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from simple_bdd_runner._logging import get_logger

from .run_events import (
    Outcome,
    RunEvent,
    TestCaseFinished,
    TestCaseLocation,
    TestCaseStarted,
    TestRunFinished,
)

_LOGGER = get_logger("events")


class RunEventFormatError(Exception):
    """Raised when a payload cannot be interpreted as a run event."""


def to_outcome(raw: object) -> Outcome:
    """Map a raw outcome value; anything unrecognised counts as a failure."""
    if isinstance(raw, Outcome):
        return raw
    if isinstance(raw, str):
        try:
            return Outcome(raw.strip().lower())
        except ValueError:
            pass
    _LOGGER.warning("unknown test case outcome %r recorded as failed", raw)
    return Outcome.FAILED


def to_test_case_location(payload: Mapping[str, Any]) -> TestCaseLocation:
    """Read ``location: "path:line"`` or ``path``/``line``/``column`` fields."""
    location = payload.get("location")
    if isinstance(location, str):
        path, separator, line = location.rpartition(":")
        if not separator or not path:
            raise RunEventFormatError(f"Location '{location}' must use path:line form.")
        return TestCaseLocation(path=path, line=_require_line(line))
    path = payload.get("path")
    if not isinstance(path, str) or not path.strip():
        raise RunEventFormatError("Test case events require a path or location.")
    column = payload.get("column")
    return TestCaseLocation(
        path=path.strip(),
        line=_require_line(payload.get("line")),
        column=column if isinstance(column, int) and not isinstance(column, bool) else None,
    )


def to_run_event(payload: Mapping[str, Any]) -> RunEvent:
    """Convert one event payload into a typed run event."""
    event_name = payload.get("event")
    attempt = payload.get("attempt", 0)
    if not isinstance(attempt, int) or isinstance(attempt, bool):
        raise RunEventFormatError(f"Attempt must be an integer, got {attempt!r}.")
    if event_name == "test_case_started":
        return TestCaseStarted(location=to_test_case_location(payload), attempt=attempt)
    if event_name == "test_case_finished":
        return TestCaseFinished(
            location=to_test_case_location(payload),
            outcome=to_outcome(payload.get("outcome")),
            attempt=attempt,
        )
    if event_name == "test_run_finished":
        return TestRunFinished()
    raise RunEventFormatError(f"Unsupported run event: {event_name!r}")


def read_run_events(lines: Iterable[str]) -> Iterator[RunEvent]:
    """Parse newline-delimited JSON event payloads, skipping blank lines."""
    for number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            raise RunEventFormatError(f"Line {number} is not valid JSON: {exc}") from exc
        if not isinstance(payload, Mapping):
            raise RunEventFormatError(f"Line {number} must be a JSON object.")
        yield to_run_event(payload)


def _require_line(value: object) -> int:
    if isinstance(value, bool):
        raise RunEventFormatError("Line must be an integer.")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        raise RunEventFormatError(f"Line must be a positive integer, got {value!r}.")
    return value
