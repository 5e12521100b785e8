"""Event payload mapper tests."""

from __future__ import annotations

import logging

import pytest
from simple_bdd_runner.result_tracking import (
    Outcome,
    RunEventFormatError,
    TestCaseFinished,
    TestCaseLocation,
    TestCaseStarted,
    TestRunFinished,
    read_run_events,
    to_outcome,
    to_run_event,
    to_test_case_location,
)


def test_outcome_is_case_insensitive() -> None:
    assert to_outcome(" Passed ") is Outcome.PASSED


def test_unknown_outcome_counts_as_failed(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="simple_bdd_runner"):
        assert to_outcome("exploded") is Outcome.FAILED

    assert "exploded" in caplog.text


def test_location_string_splits_on_last_colon() -> None:
    assert to_test_case_location({"location": "c:/features/a.feature:12"}) == TestCaseLocation(
        path="c:/features/a.feature", line=12
    )


def test_location_fields_keep_column() -> None:
    location = to_test_case_location({"path": "a.feature", "line": "7", "column": 3})

    assert location == TestCaseLocation(path="a.feature", line=7, column=3)


@pytest.mark.parametrize(
    "payload",
    [
        {"location": "a.feature"},
        {"location": ":4"},
        {"location": "a.feature:0"},
        {"path": "", "line": 3},
        {"path": "a.feature", "line": True},
        {"path": "a.feature"},
    ],
)
def test_invalid_locations(payload: dict[str, object]) -> None:
    with pytest.raises(RunEventFormatError):
        to_test_case_location(payload)


def test_maps_each_event_type() -> None:
    assert to_run_event({"event": "test_case_started", "location": "a.feature:3"}) == (
        TestCaseStarted(location=TestCaseLocation("a.feature", 3))
    )
    finished = {
        "event": "test_case_finished",
        "location": "a.feature:3",
        "outcome": "failed",
        "attempt": 1,
    }
    assert to_run_event(finished) == TestCaseFinished(
        location=TestCaseLocation("a.feature", 3), outcome=Outcome.FAILED, attempt=1
    )
    assert to_run_event({"event": "test_run_finished"}) == TestRunFinished()


@pytest.mark.parametrize(
    "payload",
    [
        {"event": "test_step_finished"},
        {"event": "test_case_started", "location": "a.feature:3", "attempt": "1"},
    ],
)
def test_rejects_unsupported_payloads(payload: dict[str, object]) -> None:
    with pytest.raises(RunEventFormatError):
        to_run_event(payload)


def test_reads_ndjson_and_skips_blank_lines() -> None:
    lines = [
        '{"event": "test_case_finished", "location": "a.feature:3", "outcome": "passed"}\n',
        "\n",
        '{"event": "test_run_finished"}\n',
    ]

    assert list(read_run_events(lines)) == [
        TestCaseFinished(location=TestCaseLocation("a.feature", 3), outcome=Outcome.PASSED),
        TestRunFinished(),
    ]


@pytest.mark.parametrize("line", ["not json", "[1, 2]"])
def test_reports_bad_lines_by_number(line: str) -> None:
    with pytest.raises(RunEventFormatError, match="Line 2"):
        list(read_run_events(['{"event": "test_run_finished"}', line]))
