"""Rerun location formatter."""

from __future__ import annotations

from typing import TextIO

from simple_bdd_runner.option_resolution.runtime_settings import StrictConfiguration
from simple_bdd_runner.result_tracking.outcome_tracker import TestCaseOutcomeTracker
from simple_bdd_runner.result_tracking.run_events import EventBus, TestRunFinished


class RerunLocationFormatter:
    """Writes the locations to re-run once the run has finished.

    Output is one ``path:line[:line...]`` entry per file joined by newlines,
    without a trailing newline. Nothing is written when no case qualifies.
    """

    def __init__(
        self,
        event_bus: EventBus,
        out_stream: TextIO,
        *,
        strict: StrictConfiguration | None = None,
    ) -> None:
        self._out_stream = out_stream
        self.tracker = TestCaseOutcomeTracker(strict, event_bus=event_bus)
        event_bus.on(TestRunFinished, self._on_test_run_finished)

    def _on_test_run_finished(self, event: TestRunFinished) -> None:
        locations = self.tracker.reportable_locations()
        if locations:
            self._out_stream.write("\n".join(locations))
