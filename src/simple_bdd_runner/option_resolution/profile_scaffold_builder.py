"""Profile file scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

from .profile_loading import DEFAULT_PROFILES_FILENAME

_PROFILES_SCAFFOLD_TEMPLATE = """# Run profiles for simple-bdd-runner.
# Each profile maps a name to the command line arguments it stands for,
# written either as one string or as a list of arguments.
# The 'default' profile applies whenever no --profile is given; use
# --no-profile (-P) to skip profiles for one run.

default: --format progress --strict-undefined

# Write a rerun file next to the console output.
rerun: >-
  --format pretty
  --format rerun --out rerun.txt

# Retry failing scenarios up to twice, at most ten retries per run.
# ci:
#   - --retry
#   - "2"
#   - --retry-total
#   - "10"
#   - --format
#   - junit,fileattribute=true
#   - --out
#   - reports/junit
"""


def build_placeholder_profiles() -> str:
    """Build a commented profile file with example profiles."""
    return _PROFILES_SCAFFOLD_TEMPLATE


def write_placeholder_profiles(output_path: Path | str = DEFAULT_PROFILES_FILENAME) -> Path:
    """Write the profile scaffold to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Profile file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_profiles(), encoding="utf-8")
    return destination.resolve()
