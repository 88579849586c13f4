import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Callable

from utils.errors import NotFoundError

logger = logging.getLogger(__name__)

# Failures of the store itself; anything else is a bug and propagates.
STORE_ERRORS = (sqlite3.Error, NotFoundError)


@dataclass(frozen=True)
class Result:
    """Outcome of a store mutation or point read: a value or an error message."""
    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception | str) -> "Result":
        message = str(error) or type(error).__name__
        return cls(error=message)


@dataclass
class BatchResult:
    """Per-item outcome counts for a non-atomic batch operation."""
    success_count: int = 0
    failure_count: int = 0
    errors: list[str] = field(default_factory=list)

    def record(self, result: Result):
        if result.ok:
            self.success_count += 1
        else:
            self.failure_count += 1
            self.errors.append(result.error)


def capture(action: str, fn: Callable, *args, **kwargs) -> Result:
    """Run a store call, wrapping store failures into Result.failure."""
    try:
        return Result.success(fn(*args, **kwargs))
    except STORE_ERRORS as e:
        logger.warning("%s failed: %s", action, e)
        return Result.failure(e)
