from dataclasses import dataclass
from functools import wraps
from typing import Any

from core.exceptions import PipelineError


@dataclass(frozen=True)
class Result:
    """Success value or one pipeline error kind, never both."""

    value: Any = None
    error: PipelineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value=None):
        return cls(value=value)

    @classmethod
    def failure(cls, error: PipelineError):
        return cls(error=error)

    def unwrap(self):
        """Return the value or re-raise the error (handy in scripts and tests)."""
        if self.error is not None:
            raise self.error
        return self.value


def returns_result(func):
    """Wrap a service function so PipelineErrors come back as ``Result.failure``.

    Anything else (including DatabaseError) propagates unchanged.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return Result.success(func(*args, **kwargs))
        except PipelineError as exc:
            return Result.failure(exc)

    return wrapper
