"""
Centralized error handling for the engine.

Every public entry point either returns a well-defined empty result or lets a
domain exception propagate. Failures that are recovered from (a worker chunk
crashing, a sampling routine blowing up) are recorded through the
``ErrorHandler`` the caller hands in, so they are logged in one place and
can be inspected afterwards. Components that get no handler create a
private one.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from crawler_sim.core.logging import LOGGER_NAME, format_context

T = TypeVar("T")


class CrawlerSimError(Exception):
    """Base class for errors raised by the engine."""


class SimulationOverflowError(CrawlerSimError):
    """Raised when the exact combat solver exceeds its state budget."""

    def __init__(
        self, message: str = "Combat simulation exceeded safe complexity threshold."
    ) -> None:
        super().__init__(message)


class WorkerPoolError(CrawlerSimError):
    """Raised when the worker pool cannot accept work."""


class ErrorSeverity(Enum):
    """Enumeration of error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class EngineError:
    """Represents a recorded error with severity, context and exception."""

    message: str
    severity: ErrorSeverity
    context: dict[str, Any]
    exception: Optional[Exception] = None


class ErrorHandler:
    """
    Records recovered errors and logs them by severity.

    Args:
        max_history (int): Number of errors kept, oldest dropped first.

    """

    def __init__(self, max_history: int = 256) -> None:
        self.logger = logging.getLogger(f"{LOGGER_NAME}.errors")
        self.max_history = max_history
        self.error_history: list[EngineError] = []

    def handle(
        self,
        message: str,
        severity: ErrorSeverity,
        context: Optional[dict[str, Any]] = None,
        exception: Optional[Exception] = None,
    ) -> None:
        """Record an error and log it according to its severity."""
        error = EngineError(
            message=message,
            severity=severity,
            context=context or {},
            exception=exception,
        )
        self.error_history.append(error)
        if len(self.error_history) > self.max_history:
            del self.error_history[0]

        text = format_context(error.message, error.context)

        if error.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(text, exc_info=error.exception)
        elif error.severity == ErrorSeverity.HIGH:
            self.logger.error(text)
        elif error.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(text)
        else:
            self.logger.info(text)

    def safe_execute(
        self,
        operation: Callable[[], T],
        default: T,
        error_message: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[dict[str, Any]] = None,
    ) -> T:
        """Run an operation, returning ``default`` if it raises."""
        try:
            return operation()
        except Exception as e:
            self.handle(
                f"{error_message}: {e}",
                severity,
                context,
                e,
            )
            return default

    def clear(self) -> None:
        self.error_history.clear()


