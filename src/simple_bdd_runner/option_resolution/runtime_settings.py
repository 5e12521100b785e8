"""Option resolution domain entities."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

STRICT_CATEGORIES: tuple[str, ...] = ("undefined", "pending", "flaky")
DEFAULT_FORMATTER_NAME = "pretty"
PUBLISH_FORMATTER_NAME = "message"


@dataclass(frozen=True)
class StrictConfiguration:
    """Result categories that count as failures for the run."""

    strict_categories: frozenset[str] = frozenset()

    def is_strict(self, category: str) -> bool:
        """Return True when *category* results are treated as failures."""
        return category in self.strict_categories

    @classmethod
    def from_flags(cls, flags: Mapping[str, bool]) -> StrictConfiguration:
        return cls(frozenset(name for name, enabled in flags.items() if enabled))


@dataclass(frozen=True)
class FormatterSpec:
    """One requested formatter and where it writes.

    A ``destination`` of None means the formatter prints to the console stream.
    """

    name: str
    options: Mapping[str, str] = field(default_factory=dict)
    destination: str | None = None

    @property
    def prints_to_console(self) -> bool:
        return self.destination is None


@dataclass(frozen=True)
class OptionLayer:  # pylint: disable=too-many-instance-attributes
    """Options collected from one argument source before merging.

    Scalars are None when the source did not set them.
    """

    require: tuple[str, ...] = ()
    tag_expressions: tuple[str, ...] = ()
    tag_limits: Mapping[str, int] = field(default_factory=dict)
    name_patterns: tuple[str, ...] = ()
    exclude_patterns: tuple[str, ...] = ()
    env_vars: Mapping[str, str] = field(default_factory=dict)
    paths: tuple[str, ...] = ()
    formats: tuple[FormatterSpec, ...] = ()
    profiles: tuple[str, ...] = ()
    disable_profiles: bool = False
    strict: Mapping[str, bool] = field(default_factory=dict)
    retry: int | None = None
    retry_total: int | None = None
    dry_run: bool | None = None
    snippets: bool | None = None
    snippet_type: str | None = None
    source: bool | None = None
    duration: bool | None = None
    publish_enabled: bool | None = None
    publish_quiet: bool | None = None
    backtrace: bool | None = None
    verbose: bool | None = None
    wip: bool | None = None


@dataclass(frozen=True)
class Settings:  # pylint: disable=too-many-instance-attributes
    """Fully resolved, read-only run configuration."""

    formats: tuple[FormatterSpec, ...]
    require: tuple[str, ...] = ()
    tag_expressions: tuple[str, ...] = ()
    tag_limits: Mapping[str, int] = field(default_factory=dict)
    name_regexps: tuple[re.Pattern[str], ...] = ()
    excludes: tuple[re.Pattern[str], ...] = ()
    env_vars: Mapping[str, str] = field(default_factory=dict)
    paths: tuple[str, ...] = ()
    profiles: tuple[str, ...] = ()
    profiles_disabled: bool = False
    strict: StrictConfiguration = field(default_factory=StrictConfiguration)
    retry: int = 0
    retry_total: float = math.inf
    dry_run: bool = False
    snippets: bool = True
    snippet_type: str | None = None
    source: bool = True
    duration: bool = True
    publish_enabled: bool = False
    publish_quiet: bool = False
    backtrace: bool = False
    verbose: bool = False
    wip: bool = False

    def to_json(self) -> dict[str, object]:
        return {
            "formats": [
                {
                    "name": spec.name,
                    "options": dict(spec.options),
                    "destination": spec.destination,
                }
                for spec in self.formats
            ],
            "require": list(self.require),
            "tag_expressions": list(self.tag_expressions),
            "tag_limits": dict(self.tag_limits),
            "name_regexps": [pattern.pattern for pattern in self.name_regexps],
            "excludes": [pattern.pattern for pattern in self.excludes],
            "env_vars": dict(self.env_vars),
            "paths": list(self.paths),
            "profiles": list(self.profiles),
            "profiles_disabled": self.profiles_disabled,
            "strict": sorted(self.strict.strict_categories),
            "retry": self.retry,
            "retry_total": None if math.isinf(self.retry_total) else self.retry_total,
            "dry_run": self.dry_run,
            "snippets": self.snippets,
            "snippet_type": self.snippet_type,
            "source": self.source,
            "duration": self.duration,
            "publish_enabled": self.publish_enabled,
            "publish_quiet": self.publish_quiet,
            "backtrace": self.backtrace,
            "verbose": self.verbose,
            "wip": self.wip,
        }
