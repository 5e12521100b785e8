"""Logger naming and opt-in handler setup for simple_bdd_runner."""

from __future__ import annotations

import logging
import os

_ROOT_LOGGER_NAME = "simple_bdd_runner"
_STREAM_HANDLER_ID = "simple_bdd_runner_stream"
_FORMAT = "%(levelname)s %(name)s: %(message)s"
LOG_LEVEL_ENV_VAR = "SIMPLE_BDD_RUNNER_LOG_LEVEL"


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the ``simple_bdd_runner`` namespace."""
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")


def setup_logging(*, level: int | None = None) -> None:
    """Attach one stream handler to the package logger.

    The level comes from *level* or the ``SIMPLE_BDD_RUNNER_LOG_LEVEL``
    environment variable and defaults to WARNING. Calling this repeatedly
    reconfigures the same handler instead of stacking new ones.
    """
    resolved_level = _resolve_level(level)
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    handler = _find_handler(root)
    if handler is None:
        handler = logging.StreamHandler()
        setattr(handler, "_simple_bdd_runner_handler_id", _STREAM_HANDLER_ID)
        root.addHandler(handler)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler.setLevel(resolved_level)
    root.setLevel(resolved_level)


def _resolve_level(level: int | None) -> int:
    if level is not None:
        return level
    env_level = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip().upper()
    resolved = getattr(logging, env_level, None) if env_level else None
    if not isinstance(resolved, int):
        return logging.WARNING
    return resolved


def _find_handler(root: logging.Logger) -> logging.Handler | None:
    for handler in root.handlers:
        if getattr(handler, "_simple_bdd_runner_handler_id", None) == _STREAM_HANDLER_ID:
            return handler
    return None
