"""Error taxonomy for srcmap.

Every precondition violation raises a subclass of ``InvalidArgument`` so
callers can either catch the whole family or branch on the specific kind.
``Result`` wraps the same errors as values for callers that prefer not to
use exceptions for control flow.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class InvalidArgument(ValueError):
    """Raised when an argument violates a precondition."""

    def __init__(self, message: str, value: Any = None):
        self.value = value
        super().__init__(message)


class EmptyBaseDirError(InvalidArgument):
    """Base directory name was empty."""


class InvalidBaseDirError(InvalidArgument):
    """Base directory name contained a character other than [A-Za-z0-9_]."""


class InvalidPathError(InvalidArgument):
    """Path could not be syntactically parsed."""


class InvalidLengthError(InvalidArgument):
    """Byte sequence had the wrong length for a fixed-width conversion."""


class InvalidHexError(InvalidArgument):
    """String was not a valid sequence of hexadecimal digit pairs."""


class InvalidIdentifierError(InvalidArgument):
    """Source file identifier does not fit its identifier type."""


class InvalidBoundsError(InvalidArgument):
    """Line bounds were negative or inverted."""


class InvalidRecordError(InvalidArgument):
    """A processor definition record was malformed."""

    def __init__(self, message: str, value: Any = None, record_id: Optional[str] = None):
        self.record_id = record_id
        super().__init__(message, value)


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of an operation: either ``value`` or ``error`` is set."""
    value: Optional[T] = None
    error: Optional[InvalidArgument] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def err(cls, error: InvalidArgument) -> "Result[T]":
        return cls(error=error)


def capture(func: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T]:
    """Call ``func`` and fold any ``InvalidArgument`` into a ``Result``."""
    try:
        return Result.ok(func(*args, **kwargs))
    except InvalidArgument as e:
        return Result.err(e)
