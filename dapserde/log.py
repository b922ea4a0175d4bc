"""Logging setup for dapserde.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves; ``setup_logging()`` is called by the CLI.
"""

import logging
import os
from typing import Final

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV: Final[str] = "DAPSERDE_LOG_LEVEL"

_LEVEL_NAMES: Final[dict[str, int]] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "NOTSET": logging.NOTSET,
}


def resolve_env_log_level() -> int | None:
    """Return a logging level from the environment or None if unset.

    Honors DAPSERDE_LOG_LEVEL (e.g. "DEBUG", "info", numeric "10").
    """
    val = os.environ.get(LOG_LEVEL_ENV)
    if not val:
        return None
    v = val.strip().upper()
    if v.isdigit():
        return int(v)
    return _LEVEL_NAMES.get(v)


def setup_logging(level: int | None = None) -> None:
    """Configure the package logger with rich output on stderr.

    If level is None the environment is consulted; the default is WARNING.
    """
    if level is None:
        level = resolve_env_log_level() or logging.WARNING

    logger = logging.getLogger("dapserde")
    logger.setLevel(level)

    # Remove handlers from a previous call to avoid duplicate output
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = RichHandler(console=Console(stderr=True), show_path=level <= logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
