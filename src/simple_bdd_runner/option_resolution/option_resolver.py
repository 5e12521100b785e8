"""Option resolution service merging command-line, profile and environment sources."""

from __future__ import annotations

import math
import os
import re
from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import TextIO, TypeVar

from simple_bdd_runner._logging import get_logger

from .argument_tokenizer import tokenize_arguments
from .formatter_specs import ensure_single_console_destination, merge_formatter_specs
from .profile_loading import ProfileLoader
from .runtime_settings import (
    DEFAULT_FORMATTER_NAME,
    PUBLISH_FORMATTER_NAME,
    FormatterSpec,
    OptionLayer,
    Settings,
    StrictConfiguration,
)
from .tag_limits import merge_tag_limits

DEFAULT_PROFILE_NAME = "default"
DEFAULT_PUBLISH_URL = "https://messages.cucumber.io/api/reports -X GET"
PUBLISH_ENABLED_ENV_VAR = "CUCUMBER_PUBLISH_ENABLED"
PUBLISH_QUIET_ENV_VAR = "CUCUMBER_PUBLISH_QUIET"
PUBLISH_TOKEN_ENV_VAR = "CUCUMBER_PUBLISH_TOKEN"
PUBLISH_URL_ENV_VAR = "CUCUMBER_PUBLISH_URL"

_TRUTHY_PATTERN = re.compile(r"^(true|t|yes|y|1)$", re.IGNORECASE)
_LOGGER = get_logger("options")
_T = TypeVar("_T")


class OptionResolver:
    """Resolves one run's settings from the command line and its profiles."""

    def __init__(
        self,
        out_stream: TextIO,
        *,
        profile_loader: ProfileLoader | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._out_stream = out_stream
        self._profile_loader = profile_loader or ProfileLoader()
        self._environ = os.environ if environ is None else environ

    def resolve(
        self, cli_args: Sequence[str], profile_name: str | None = DEFAULT_PROFILE_NAME
    ) -> Settings:
        """Build settings from *cli_args*.

        *profile_name* is applied when the arguments name no profile, and only if
        the profile file defines it. Profiles named with ``-p`` must exist.
        """
        cli_layer = tokenize_arguments(cli_args)
        profile_names = self._profiles_to_apply(cli_layer, profile_name)
        profile_layers = [self._profile_layer(name) for name in profile_names]
        if profile_names:
            self._notify(f"Using the {_profiles_sentence(profile_names)} profile...")

        merged = merge_layers(cli_layer, *profile_layers)
        return build_settings(replace(merged, profiles=profile_names), environ=self._environ)

    def _profiles_to_apply(
        self, cli_layer: OptionLayer, default_profile: str | None
    ) -> tuple[str, ...]:
        if cli_layer.disable_profiles:
            self._notify("Disabling profiles...")
            return ()
        if cli_layer.profiles:
            return cli_layer.profiles
        if default_profile and self._profile_loader.has_profile(default_profile):
            return (default_profile,)
        return ()

    def _profile_layer(self, name: str) -> OptionLayer:
        layer = tokenize_arguments(self._profile_loader.arguments_for(name))
        if layer.profiles or layer.disable_profiles:
            _LOGGER.debug("ignoring profile selection flags inside profile %r", name)
        return replace(layer, profiles=(), disable_profiles=False)

    def _notify(self, message: str) -> None:
        self._out_stream.write(f"{message}\n")


def merge_layers(cli_layer: OptionLayer, *profile_layers: OptionLayer) -> OptionLayer:
    """Fold profile layers under the command-line layer, highest precedence first."""
    merged = cli_layer
    for profile_layer in profile_layers:
        merged = _merge_pair(merged, profile_layer)
    return merged


def _merge_pair(higher: OptionLayer, lower: OptionLayer) -> OptionLayer:
    _LOGGER.debug("merging option layer with %d formatter(s)", len(lower.formats))
    return OptionLayer(
        require=higher.require + lower.require,
        tag_expressions=higher.tag_expressions + lower.tag_expressions,
        tag_limits=merge_tag_limits(higher.tag_limits, lower.tag_limits),
        name_patterns=higher.name_patterns + lower.name_patterns,
        exclude_patterns=higher.exclude_patterns + lower.exclude_patterns,
        env_vars={**lower.env_vars, **higher.env_vars},
        paths=higher.paths or lower.paths,
        formats=merge_formatter_specs(higher.formats, lower.formats),
        profiles=higher.profiles,
        disable_profiles=higher.disable_profiles,
        strict={**lower.strict, **higher.strict},
        retry=_first_set(higher.retry, lower.retry),
        retry_total=_first_set(higher.retry_total, lower.retry_total),
        dry_run=_first_set(higher.dry_run, lower.dry_run),
        snippets=_first_set(higher.snippets, lower.snippets),
        snippet_type=_first_set(higher.snippet_type, lower.snippet_type),
        source=_first_set(higher.source, lower.source),
        duration=_first_set(higher.duration, lower.duration),
        publish_enabled=_first_set(higher.publish_enabled, lower.publish_enabled),
        publish_quiet=_first_set(higher.publish_quiet, lower.publish_quiet),
        backtrace=_first_set(higher.backtrace, lower.backtrace),
        verbose=_first_set(higher.verbose, lower.verbose),
        wip=_first_set(higher.wip, lower.wip),
    )


def build_settings(layer: OptionLayer, *, environ: Mapping[str, str]) -> Settings:
    """Apply defaults, the implied formatter and publishing to a merged layer."""
    ensure_single_console_destination(layer.formats)
    formats = layer.formats or (FormatterSpec(name=DEFAULT_FORMATTER_NAME),)

    publish_token = environ.get(PUBLISH_TOKEN_ENV_VAR, "").strip()
    publish_enabled = bool(
        layer.publish_enabled or _is_truthy(environ.get(PUBLISH_ENABLED_ENV_VAR)) or publish_token
    )
    if publish_enabled:
        formats = _with_publish_formatter(formats, environ, publish_token)

    publish_quiet = _first_set(layer.publish_quiet, _is_truthy(environ.get(PUBLISH_QUIET_ENV_VAR)))
    return Settings(
        formats=formats,
        require=layer.require,
        tag_expressions=layer.tag_expressions,
        tag_limits=dict(layer.tag_limits),
        name_regexps=tuple(re.compile(pattern) for pattern in layer.name_patterns),
        excludes=tuple(re.compile(pattern) for pattern in layer.exclude_patterns),
        env_vars=dict(layer.env_vars),
        paths=layer.paths,
        profiles=layer.profiles,
        profiles_disabled=layer.disable_profiles,
        strict=StrictConfiguration.from_flags(layer.strict),
        retry=_first_set(layer.retry, 0),
        retry_total=math.inf if layer.retry_total is None else layer.retry_total,
        dry_run=_first_set(layer.dry_run, False),
        snippets=_first_set(layer.snippets, True),
        snippet_type=layer.snippet_type,
        source=_first_set(layer.source, True),
        duration=_first_set(layer.duration, True),
        publish_enabled=publish_enabled,
        publish_quiet=bool(publish_quiet),
        backtrace=_first_set(layer.backtrace, False),
        verbose=_first_set(layer.verbose, False),
        wip=_first_set(layer.wip, False),
    )


def _with_publish_formatter(
    formats: tuple[FormatterSpec, ...], environ: Mapping[str, str], publish_token: str
) -> tuple[FormatterSpec, ...]:
    publish_url = environ.get(PUBLISH_URL_ENV_VAR, "").strip() or DEFAULT_PUBLISH_URL
    if any(spec.destination and spec.destination.startswith(publish_url) for spec in formats):
        return formats
    destination = publish_url
    if publish_token:
        destination = f'{publish_url} -H "Authorization: Bearer {publish_token}"'
    return (*formats, FormatterSpec(name=PUBLISH_FORMATTER_NAME, destination=destination))


def _first_set(value: _T | None, fallback: _T) -> _T:
    return fallback if value is None else value


def _is_truthy(value: str | None) -> bool:
    return bool(value) and _TRUTHY_PATTERN.match(value.strip()) is not None


def _profiles_sentence(names: Sequence[str]) -> str:
    if len(names) == 1:
        return names[0]
    quoted = [f"'{name}'" for name in names]
    return f"{', '.join(quoted[:-1])} and {quoted[-1]}"
