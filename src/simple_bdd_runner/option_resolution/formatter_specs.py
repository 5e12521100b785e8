"""Formatter spec parsing and console-destination rules."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from .resolution_errors import ConfigurationConflictError, InvalidArgumentError
from .runtime_settings import DEFAULT_FORMATTER_NAME, FormatterSpec

CONSOLE_CONFLICT_MESSAGE = (
    "All but one formatter must use --out, only one can print to each stream (or STDOUT)"
)


class FormatterSpecBuilder:
    """Collects ``--format``/``--out`` pairs in argument order.

    ``add_output`` binds to the most recently added spec that still has no
    destination. With no such spec it declares an implied ``pretty`` formatter.
    """

    def __init__(self) -> None:
        self._specs: list[FormatterSpec] = []
        self._unbound: list[int] = []

    def add_format(self, value: str) -> None:
        name, options = parse_formatter_value(value)
        self._unbound.append(len(self._specs))
        self._specs.append(FormatterSpec(name=name, options=options))

    def add_output(self, destination: str) -> None:
        if not destination.strip():
            raise InvalidArgumentError("--out requires a file, directory or URL.")
        if not self._unbound:
            self._specs.append(FormatterSpec(name=DEFAULT_FORMATTER_NAME, destination=destination))
            return
        index = self._unbound.pop()
        self._specs[index] = replace(self._specs[index], destination=destination)

    def build(self) -> tuple[FormatterSpec, ...]:
        return tuple(self._specs)


def parse_formatter_value(value: str) -> tuple[str, dict[str, str]]:
    """Split ``NAME[,key=value...]`` into the formatter name and its options."""
    name, *option_segments = value.split(",")
    name = name.strip()
    if not name:
        raise InvalidArgumentError(f"Formatter name is missing in '{value}'.")
    options: dict[str, str] = {}
    for segment in option_segments:
        key, separator, option_value = segment.partition("=")
        key = key.strip()
        if not separator or not key:
            raise InvalidArgumentError(
                f"Formatter option '{segment}' in '{value}' must use key=value form."
            )
        options[key] = option_value
    return name, options


def merge_formatter_specs(
    cli_specs: Sequence[FormatterSpec], profile_specs: Sequence[FormatterSpec]
) -> tuple[FormatterSpec, ...]:
    """Combine command-line and profile formatters.

    A console formatter given on the command line replaces any console formatter
    from the profile. The result lists the profile console formatter (if kept),
    then the command-line formatters, then the profile's file formatters.
    """
    cli_prints_to_console = any(spec.prints_to_console for spec in cli_specs)
    profile_console = [
        spec for spec in profile_specs if spec.prints_to_console and not cli_prints_to_console
    ]
    profile_files = [spec for spec in profile_specs if not spec.prints_to_console]

    merged = (*profile_console, *cli_specs, *profile_files)
    ensure_single_console_destination(merged)
    return merged


def ensure_single_console_destination(specs: Sequence[FormatterSpec]) -> None:
    if sum(1 for spec in specs if spec.prints_to_console) > 1:
        raise ConfigurationConflictError(CONSOLE_CONFLICT_MESSAGE)
