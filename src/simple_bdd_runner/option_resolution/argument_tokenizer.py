"""Argument list tokenizer producing one option layer."""

from __future__ import annotations

import argparse
import re
from collections.abc import Sequence
from typing import NoReturn

from .formatter_specs import FormatterSpecBuilder
from .resolution_errors import InvalidArgumentError
from .runtime_settings import STRICT_CATEGORIES, OptionLayer
from .tag_limits import normalize_tag_expressions

_ENV_PAIR_PATTERN = re.compile(r"^(\w+)=(.*)$", re.DOTALL)
_ALL_STRICT = "*"
_VALUE_OPTIONS = frozenset(
    (
        "-r",
        "--require",
        "-f",
        "--format",
        "-o",
        "--out",
        "-t",
        "--tags",
        "-n",
        "--name",
        "-e",
        "--exclude",
        "-l",
        "--lines",
        "-p",
        "--profile",
        "--retry",
        "--retry-total",
        "--snippet-type",
    )
)


class _TokenizerArgumentParser(argparse.ArgumentParser):
    """Argument parser that raises instead of exiting the process."""

    def error(self, message: str) -> NoReturn:
        raise InvalidArgumentError(message)


def tokenize_arguments(arguments: Sequence[str]) -> OptionLayer:
    """Split *arguments* into flags, feature paths and ``NAME=VALUE`` pairs."""
    namespace = _build_parser().parse_intermixed_args(_attach_option_values(arguments))

    formatters = FormatterSpecBuilder()
    for kind, value in namespace.formatter_tokens or ():
        if kind == "format":
            formatters.add_format(value)
        else:
            formatters.add_output(value)

    tag_expressions, tag_limits = normalize_tag_expressions(namespace.tags or ())
    env_vars, paths = _split_positionals(namespace.positionals or (), namespace.lines)
    quiet = bool(namespace.quiet)

    return OptionLayer(
        require=tuple(namespace.require or ()),
        tag_expressions=tag_expressions,
        tag_limits=tag_limits,
        name_patterns=_validated_patterns(namespace.names or (), "--name"),
        exclude_patterns=_validated_patterns(namespace.excludes or (), "--exclude"),
        env_vars=env_vars,
        paths=paths,
        formats=formatters.build(),
        profiles=tuple(namespace.profiles or ()),
        disable_profiles=bool(namespace.disable_profiles),
        strict=_strict_flags(namespace.strict_tokens or ()),
        retry=namespace.retry,
        retry_total=namespace.retry_total,
        dry_run=namespace.dry_run,
        snippets=_quieted(namespace.snippets, quiet),
        snippet_type=namespace.snippet_type,
        source=_quieted(namespace.source, quiet),
        duration=_quieted(namespace.duration, quiet),
        publish_enabled=namespace.publish_enabled,
        publish_quiet=_quieted(namespace.publish_quiet, quiet, quieted_value=True),
        backtrace=namespace.backtrace,
        verbose=namespace.verbose,
        wip=namespace.wip,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = _TokenizerArgumentParser(prog="simple-bdd-runner", add_help=False, allow_abbrev=False)
    parser.add_argument("-r", "--require", action="append")
    parser.add_argument(
        "-f", "--format", dest="formatter_tokens", action="append", type=_format_token
    )
    parser.add_argument("-o", "--out", dest="formatter_tokens", action="append", type=_out_token)
    parser.add_argument("-t", "--tags", dest="tags", action="append")
    parser.add_argument("-n", "--name", dest="names", action="append")
    parser.add_argument("-e", "--exclude", dest="excludes", action="append")
    parser.add_argument("-l", "--lines", dest="lines")
    parser.add_argument("-p", "--profile", dest="profiles", action="append")
    parser.add_argument("-P", "--no-profile", dest="disable_profiles", action="store_true")
    parser.add_argument("--retry", type=_non_negative_int)
    parser.add_argument("--retry-total", dest="retry_total", type=_positive_int)
    parser.add_argument("-d", "--dry-run", dest="dry_run", action="store_const", const=True)
    parser.add_argument("--snippets", dest="snippets", action="store_const", const=True)
    parser.add_argument("-i", "--no-snippets", dest="snippets", action="store_const", const=False)
    parser.add_argument("--snippet-type", dest="snippet_type")
    parser.add_argument("-s", "--no-source", dest="source", action="store_const", const=False)
    parser.add_argument("--no-duration", dest="duration", action="store_const", const=False)
    parser.add_argument("-q", "--quiet", dest="quiet", action="store_true")
    parser.add_argument("--publish", dest="publish_enabled", action="store_const", const=True)
    parser.add_argument("--publish-quiet", dest="publish_quiet", action="store_const", const=True)
    parser.add_argument("-b", "--backtrace", dest="backtrace", action="store_const", const=True)
    parser.add_argument("-v", "--verbose", dest="verbose", action="store_const", const=True)
    parser.add_argument("-w", "--wip", dest="wip", action="store_const", const=True)
    for flag, token in (("--strict", (_ALL_STRICT, True)), ("--no-strict", (_ALL_STRICT, False))):
        parser.add_argument(flag, dest="strict_tokens", action="append_const", const=token)
    for category in STRICT_CATEGORIES:
        parser.add_argument(
            f"--strict-{category}",
            dest="strict_tokens",
            action="append_const",
            const=(category, True),
        )
        parser.add_argument(
            f"--no-strict-{category}",
            dest="strict_tokens",
            action="append_const",
            const=(category, False),
        )
    parser.add_argument("positionals", nargs="*")
    return parser


def _attach_option_values(arguments: Sequence[str]) -> list[str]:
    """Join each value-taking flag with the token after it.

    A value such as ``-x`` in ``--name -x`` would otherwise be read as a flag.
    """
    attached: list[str] = []
    remaining = iter(arguments)
    for argument in remaining:
        value = next(remaining, None) if argument in _VALUE_OPTIONS else None
        attached.append(argument if value is None else f"{argument}={value}")
    return attached


def _format_token(value: str) -> tuple[str, str]:
    return ("format", value)


def _out_token(value: str) -> tuple[str, str]:
    return ("out", value)


def _non_negative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{value}' is not an integer") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError(f"'{value}' must not be negative")
    return parsed


def _positive_int(value: str) -> int:
    parsed = _non_negative_int(value)
    if parsed == 0:
        raise argparse.ArgumentTypeError(f"'{value}' must be greater than zero")
    return parsed


def _split_positionals(
    positionals: Sequence[str], lines: str | None
) -> tuple[dict[str, str], tuple[str, ...]]:
    env_vars: dict[str, str] = {}
    paths: list[str] = []
    for positional in positionals:
        match = _ENV_PAIR_PATTERN.match(positional)
        if match:
            env_vars[match.group(1)] = match.group(2)
        else:
            paths.append(f"{positional}:{lines}" if lines else positional)
    return env_vars, tuple(paths)


def _validated_patterns(patterns: Sequence[str], flag: str) -> tuple[str, ...]:
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as exc:
            raise InvalidArgumentError(
                f"{flag} '{pattern}' is not a valid regular expression: {exc}"
            ) from exc
    return tuple(patterns)


def _strict_flags(tokens: Sequence[tuple[str, bool]]) -> dict[str, bool]:
    flags: dict[str, bool] = {}
    for category, enabled in tokens:
        if category == _ALL_STRICT:
            flags.update({name: enabled for name in STRICT_CATEGORIES})
        else:
            flags[category] = enabled
    return flags


def _quieted(value: bool | None, quiet: bool, *, quieted_value: bool = False) -> bool | None:
    if value is None and quiet:
        return quieted_value
    return value
