"""Profile file loading with a read-once cache."""

from __future__ import annotations

import shlex
import threading
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import yaml

from simple_bdd_runner._logging import get_logger

from .resolution_errors import ProfileFileError, ProfileNotFoundError

DEFAULT_PROFILES_FILENAME = "cucumber.yml"
PROFILE_FILE_CANDIDATES: tuple[str, ...] = (
    "cucumber.yml",
    "cucumber.yaml",
    ".config/cucumber.yml",
    ".config/cucumber.yaml",
    "config/cucumber.yml",
    "config/cucumber.yaml",
)

ProfileSource = Callable[[], str | None]

_LOGGER = get_logger("profiles")


def file_profile_source(base_dir: Path | str = ".") -> ProfileSource:
    """Return a source reading the first existing profile file under *base_dir*."""
    base_path = Path(base_dir)

    def read_profile_file() -> str | None:
        for candidate in PROFILE_FILE_CANDIDATES:
            path = base_path / candidate
            if path.is_file():
                _LOGGER.debug("reading profiles from %s", path)
                return path.read_text(encoding="utf-8")
        return None

    return read_profile_file


class ProfileLoader:
    """Looks up profile argument lists, reading the backing source at most once.

    Concurrent first lookups share one read: the source call runs under a lock
    and its parsed result, or the parse error, is kept for the lifetime of the
    loader.
    """

    def __init__(self, source: ProfileSource | None = None) -> None:
        self._source = source or file_profile_source()
        self._lock = threading.Lock()
        self._loaded = False
        self._profiles: dict[str, Any] | None = None
        self._load_error: ProfileFileError | None = None

    def has_profile_file(self) -> bool:
        return self._load() is not None

    def profile_names(self) -> tuple[str, ...]:
        return tuple(self._load() or {})

    def has_profile(self, name: str) -> bool:
        return name in (self._load() or {})

    def arguments_for(self, name: str) -> tuple[str, ...]:
        """Return the argument list stored under profile *name*."""
        profiles = self._load()
        if profiles is None:
            raise ProfileNotFoundError(
                f"{DEFAULT_PROFILES_FILENAME} was not found. "
                f"Please define the '{name}' profile in {DEFAULT_PROFILES_FILENAME}."
            )
        if name not in profiles:
            defined = "\n".join(f"  * {profile}" for profile in profiles)
            raise ProfileNotFoundError(
                f"Could not find profile: '{name}'\n\n"
                f"Defined profiles in {DEFAULT_PROFILES_FILENAME}:\n{defined}"
            )
        return _profile_arguments(name, profiles[name])

    def _load(self) -> dict[str, Any] | None:
        with self._lock:
            if not self._loaded:
                self._loaded = True
                text = self._source()
                try:
                    self._profiles = None if text is None else _parse_profiles(text)
                except ProfileFileError as exc:
                    self._load_error = exc
            if self._load_error is not None:
                raise self._load_error
            return self._profiles


def _parse_profiles(text: str) -> dict[str, Any]:
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ProfileFileError(f"Failed to parse {DEFAULT_PROFILES_FILENAME}: {exc}") from exc
    if parsed is None:
        raise ProfileFileError(
            f"{DEFAULT_PROFILES_FILENAME} was found, but was blank or malformed."
        )
    if not isinstance(parsed, Mapping):
        raise ProfileFileError(f"{DEFAULT_PROFILES_FILENAME} root must be a mapping of profiles.")
    return {str(name): value for name, value in parsed.items()}


def _profile_arguments(name: str, value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        try:
            arguments = tuple(shlex.split(value))
        except ValueError as exc:
            raise ProfileFileError(f"The '{name}' profile could not be split: {exc}") from exc
    elif isinstance(value, list) and all(isinstance(item, str) for item in value):
        arguments = tuple(value)
    else:
        raise ProfileFileError(
            f"The '{name}' profile must be defined as a string or a list of strings."
        )
    if not arguments:
        raise ProfileFileError(
            f"The '{name}' profile in {DEFAULT_PROFILES_FILENAME} was blank. "
            f"Please define the command line arguments for the '{name}' profile."
        )
    return arguments
