"""
Logging for the crawler simulator.

Everything the engine logs goes through the ``crawler_sim`` logger. The
library never configures logging on import; the command line front end (or
the host application) calls ``setup_logging`` to attach a rich handler.

Messages carry an optional context that is rendered as ``key=value`` pairs,
so search phases, worker failures and stale runs read the same everywhere.
"""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel
from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "crawler_sim"

logger = logging.getLogger(LOGGER_NAME)


def setup_logging(level: int = logging.INFO) -> None:
    """
    Attaches a rich handler to the ``crawler_sim`` logger.

    Calling it again replaces the previous handler instead of stacking a new
    one, so the level can be changed at any time.

    Args:
        level (int): The logging level. Defaults to logging.INFO.

    """
    handler = RichHandler(
        console=Console(width=120, stderr=True),
        show_time=True,
        show_level=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s", datefmt="[%X]"))

    for existing in list(logger.handlers):
        if isinstance(existing, RichHandler):
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Returns a child of the ``crawler_sim`` logger."""
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logger.getChild(name)


def _render(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.4g}"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    return str(value)


def format_context(message: str, context: dict[str, Any] | None) -> str:
    """Appends ``[key=value ...]`` to ``message`` when there is context."""
    if not context:
        return message
    pairs = " ".join(f"{key}={_render(value)}" for key, value in context.items())
    return f"{message} [{pairs}]"


def _log(level: int, message: str, context: dict[str, Any] | None) -> None:
    # Skip formatting entirely for the hot debug calls of the search loops.
    if logger.isEnabledFor(level):
        logger.log(level, format_context(message, context))


def log_error(message: str, context: dict[str, Any] | None = None) -> None:
    _log(logging.ERROR, message, context)


def log_warning(message: str, context: dict[str, Any] | None = None) -> None:
    _log(logging.WARNING, message, context)


def log_info(message: str, context: dict[str, Any] | None = None) -> None:
    _log(logging.INFO, message, context)


def log_debug(message: str, context: dict[str, Any] | None = None) -> None:
    _log(logging.DEBUG, message, context)
