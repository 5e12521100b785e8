"""Command line interface entry point."""

from __future__ import annotations

import io
import json
import sys
from pathlib import Path

import click

from simple_bdd_runner._logging import setup_logging
from simple_bdd_runner.option_resolution import (
    DEFAULT_PROFILE_NAME,
    DEFAULT_PROFILES_FILENAME,
    ConfigurationError,
    OptionResolver,
    ProfileLoader,
    StrictConfiguration,
    file_profile_source,
    write_placeholder_profiles,
)
from simple_bdd_runner.option_resolution.runtime_settings import STRICT_CATEGORIES
from simple_bdd_runner.result_tracking import (
    EventBus,
    EventOrderingViolation,
    RunEventFormatError,
    read_run_events,
)
from simple_bdd_runner.results_writing import RerunLocationFormatter


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="simple-bdd-runner")
def cli() -> None:
    """Option resolution and rerun tracking for behavior-driven test runs."""
    setup_logging()


@cli.command(name="generate-profiles")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_PROFILES_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the profile file to write",
)
def generate_profiles(output_path: str) -> None:
    """Generate a commented profile file with example profiles."""
    try:
        resolved_output = write_placeholder_profiles(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(
    name="resolve",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.option(
    "--profiles-dir",
    "profiles_dir",
    required=False,
    default=".",
    show_default=True,
    type=click.Path(file_okay=False, path_type=str),
    help="Directory searched for the profile file",
)
@click.option(
    "--default-profile",
    "default_profile",
    required=False,
    default=DEFAULT_PROFILE_NAME,
    show_default=True,
    help="Profile applied when the run arguments name none",
)
@click.argument("run_args", nargs=-1, type=click.UNPROCESSED)
def resolve_options(profiles_dir: str, default_profile: str, run_args: tuple[str, ...]) -> None:
    """Resolve run arguments and profiles into settings printed as JSON."""
    notices = io.StringIO()
    resolver = OptionResolver(
        notices,
        profile_loader=ProfileLoader(file_profile_source(profiles_dir)),
    )
    try:
        settings = resolver.resolve(run_args, default_profile or None)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc
    if notices.getvalue():
        click.echo(notices.getvalue().rstrip("\n"), err=True)
    click.echo(json.dumps(settings.to_json(), indent=2))


@cli.command(name="rerun")
@click.option(
    "--events",
    "events_path",
    required=True,
    type=click.Path(dir_okay=False, path_type=str),
    help="Newline-delimited JSON log of run events",
)
@click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(dir_okay=False, path_type=str),
    help="Optional file for the rerun locations (defaults to stdout)",
)
@click.option(
    "--strict",
    "strict_all",
    is_flag=True,
    default=False,
    help="Treat flaky, pending and undefined cases as failures.",
)
@click.option("--strict-flaky", is_flag=True, default=False, help="Treat flaky cases as failures.")
def rerun(events_path: str, output_path: str | None, strict_all: bool, strict_flaky: bool) -> None:
    """Replay a run event log and print the locations to re-run.

    A log without a run-finished event is treated as an interrupted run.
    """
    strict_categories = STRICT_CATEGORIES if strict_all else ("flaky",) if strict_flaky else ()
    rendered = io.StringIO()
    event_bus = EventBus()
    formatter = RerunLocationFormatter(
        event_bus, rendered, strict=StrictConfiguration(frozenset(strict_categories))
    )
    try:
        with Path(events_path).open(encoding="utf-8") as events_file:
            for event in read_run_events(events_file):
                event_bus.broadcast(event)
        if not formatter.tracker.run_finished:
            event_bus.test_run_finished()
    except (OSError, RunEventFormatError, EventOrderingViolation) as exc:
        raise CliError(str(exc)) from exc
    if output_path:
        Path(output_path).write_text(rendered.getvalue(), encoding="utf-8")
        click.echo(str(Path(output_path).resolve()))
    elif rendered.getvalue():
        click.echo(rendered.getvalue(), nl=False)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
