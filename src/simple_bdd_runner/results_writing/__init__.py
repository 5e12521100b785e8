"""Results writing domain exports."""

from .rerun_formatter import RerunLocationFormatter

__all__ = [
    "RerunLocationFormatter",
]
