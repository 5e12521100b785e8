"""Boundary tests for result_tracking internal dependencies."""

from __future__ import annotations

from pathlib import Path


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def test_tracking_core_does_not_import_resolution_or_writers() -> None:
    package_dir = _project_root() / "src" / "simple_bdd_runner"
    core_modules = (
        package_dir / "result_tracking" / "run_events.py",
        package_dir / "result_tracking" / "outcome_tracker.py",
    )
    forbidden_import_fragments = (
        "simple_bdd_runner.option_resolution.option_resolver",
        "simple_bdd_runner.option_resolution.argument_tokenizer",
        "simple_bdd_runner.option_resolution.profile_loading",
        "simple_bdd_runner.results_writing",
    )

    for module_path in core_modules:
        text = module_path.read_text(encoding="utf-8")
        for fragment in forbidden_import_fragments:
            assert fragment not in text, f"Forbidden core dependency in {module_path}: {fragment}"
