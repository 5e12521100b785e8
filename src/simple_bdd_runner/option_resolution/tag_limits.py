"""Tag expression normalization and tag limit bookkeeping."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

from .resolution_errors import ConfigurationConflictError, InvalidArgumentError

_TAG_LIMIT_PATTERN = re.compile(r"(@[^\s():,]+):(\d+)(?=[\s(),]|$)")
_LEGACY_NEGATION = "~"


def normalize_tag_expressions(
    raw_expressions: Sequence[str],
) -> tuple[tuple[str, ...], dict[str, int]]:
    """Strip ``@tag:N`` limit suffixes and collect the limits by tag.

    Returns the limit-free expressions in input order and a ``{"@tag": N}``
    mapping. The same tag declared with two different limits anywhere in
    *raw_expressions* is a conflict.
    """
    expressions: list[str] = []
    limits: dict[str, int] = {}
    for raw_expression in raw_expressions:
        if _LEGACY_NEGATION in raw_expression:
            raise InvalidArgumentError(
                f"Found tags option '{raw_expression}'. "
                "'~@tag' is no longer supported, use 'not @tag' instead."
            )
        for tag, raw_limit in _TAG_LIMIT_PATTERN.findall(raw_expression):
            _record_limit(limits, tag, _parse_limit(tag, raw_limit))
        expressions.append(_TAG_LIMIT_PATTERN.sub(r"\1", raw_expression))
    return tuple(expressions), limits


def merge_tag_limits(
    primary: Mapping[str, int], secondary: Mapping[str, int]
) -> dict[str, int]:
    """Union two limit maps; a tag present in both must carry the same limit."""
    merged = dict(primary)
    for tag, limit in secondary.items():
        _record_limit(merged, tag, limit)
    return merged


def _record_limit(limits: dict[str, int], tag: str, limit: int) -> None:
    existing = limits.get(tag)
    if existing is not None and existing != limit:
        raise ConfigurationConflictError(
            f"Inconsistent tag limits for {tag}: {existing} and {limit}"
        )
    limits[tag] = limit


def _parse_limit(tag: str, raw_limit: str) -> int:
    limit = int(raw_limit)
    if limit <= 0:
        raise InvalidArgumentError(f"Tag limit for {tag} must be greater than zero.")
    return limit
