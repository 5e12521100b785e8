"""CLI orchestration integration tests."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner
from simple_bdd_runner.cli import cli, main

_CLEAN_ENV = {
    "CUCUMBER_PUBLISH_ENABLED": None,
    "CUCUMBER_PUBLISH_QUIET": None,
    "CUCUMBER_PUBLISH_TOKEN": None,
    "CUCUMBER_PUBLISH_URL": None,
}


def _write_events(path: Path, *payloads: dict[str, object]) -> Path:
    path.write_text("\n".join(json.dumps(payload) for payload in payloads), encoding="utf-8")
    return path


def _finished(location: str, outcome: str, attempt: int = 0) -> dict[str, object]:
    return {
        "event": "test_case_finished",
        "location": location,
        "outcome": outcome,
        "attempt": attempt,
    }


def test_generate_profiles_command_writes_scaffold(tmp_path: Path) -> None:
    output_path = tmp_path / "cucumber.yml"

    result = CliRunner().invoke(cli, ["generate-profiles", "--output", str(output_path)])

    assert result.exit_code == 0
    assert str(output_path.resolve()) in result.output
    assert output_path.read_text(encoding="utf-8").startswith("# Run profiles")


def test_generate_profiles_refuses_existing_file(tmp_path: Path) -> None:
    output_path = tmp_path / "cucumber.yml"
    output_path.write_text("default: -q\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["generate-profiles", "--output", str(output_path)])

    assert result.exit_code != 0
    assert output_path.read_text(encoding="utf-8") == "default: -q\n"


def test_resolve_applies_default_profile_from_directory(tmp_path: Path) -> None:
    (tmp_path / "cucumber.yml").write_text(
        "default: --format progress --retry 2 -t @smoke\n", encoding="utf-8"
    )
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["resolve", "--profiles-dir", str(tmp_path), "-f", "json", "-o", "out.json", "a.feature"],
        env=_CLEAN_ENV,
    )

    assert result.exit_code == 0, result.stderr
    assert "Using the default profile..." in result.stderr
    settings = json.loads(result.stdout)
    assert [spec["name"] for spec in settings["formats"]] == ["progress", "json"]
    assert settings["formats"][1]["destination"] == "out.json"
    assert settings["retry"] == 2
    assert settings["tag_expressions"] == ["@smoke"]
    assert settings["paths"] == ["a.feature"]
    assert settings["profiles"] == ["default"]
    assert settings["retry_total"] is None


def test_resolve_without_profiles(tmp_path: Path) -> None:
    (tmp_path / "cucumber.yml").write_text("default: --retry 2\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(
        cli, ["resolve", "--profiles-dir", str(tmp_path), "-P", "--strict"], env=_CLEAN_ENV
    )

    assert result.exit_code == 0, result.stderr
    assert "Disabling profiles..." in result.stderr
    settings = json.loads(result.stdout)
    assert settings["retry"] == 0
    assert settings["strict"] == ["flaky", "pending", "undefined"]
    assert settings["formats"] == [{"name": "pretty", "options": {}, "destination": None}]


def test_resolve_reports_unknown_profile(tmp_path: Path, capsys) -> None:
    (tmp_path / "cucumber.yml").write_text("default: -q\n", encoding="utf-8")

    exit_code = main(["resolve", "--profiles-dir", str(tmp_path), "-p", "ci"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Could not find profile: 'ci'" in captured.err
    assert "  * default" in captured.err
    assert "Traceback" not in captured.err


def test_rerun_prints_failing_locations(tmp_path: Path) -> None:
    events_path = _write_events(
        tmp_path / "events.ndjson",
        _finished("foo.feature:3", "failed"),
        _finished("foo.feature:6", "failed"),
        _finished("bar.feature:3", "failed"),
        _finished("bar.feature:9", "passed"),
        {"event": "test_run_finished"},
    )

    result = CliRunner().invoke(cli, ["rerun", "--events", str(events_path)])

    assert result.exit_code == 0
    assert result.output == "foo.feature:3:6\nbar.feature:3"


def test_rerun_treats_truncated_log_as_finished_run(tmp_path: Path) -> None:
    events_path = _write_events(
        tmp_path / "events.ndjson",
        _finished("foo.feature:3", "failed"),
        _finished("foo.feature:3", "passed", attempt=1),
    )

    lenient = CliRunner().invoke(cli, ["rerun", "--events", str(events_path)])
    strict = CliRunner().invoke(cli, ["rerun", "--events", str(events_path), "--strict-flaky"])

    assert lenient.exit_code == 0
    assert lenient.output == ""
    assert strict.output == "foo.feature:3"


def test_rerun_writes_output_file_without_trailing_newline(tmp_path: Path) -> None:
    events_path = _write_events(
        tmp_path / "events.ndjson",
        _finished("foo.feature:3", "undefined"),
        {"event": "test_run_finished"},
    )
    output_path = tmp_path / "rerun.txt"

    result = CliRunner().invoke(
        cli, ["rerun", "--events", str(events_path), "--output", str(output_path), "--strict"]
    )

    assert result.exit_code == 0
    assert output_path.read_text(encoding="utf-8") == "foo.feature:3"


def test_rerun_rejects_malformed_event_log(tmp_path: Path) -> None:
    events_path = tmp_path / "events.ndjson"
    events_path.write_text('{"event": "test_run_finished"}\nnot json\n', encoding="utf-8")

    result = CliRunner().invoke(cli, ["rerun", "--events", str(events_path)])

    assert result.exit_code != 0
    assert isinstance(result.exception, Exception)
