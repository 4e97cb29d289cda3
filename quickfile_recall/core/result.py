"""Result types for explicit error handling.

History operations never raise into interactive flows. Instead they return
one of three outcomes and the caller decides whether to recover or surface:

- Ok: the operation succeeded and carries a value
- Err: the operation failed; carries a message and an ``ErrorCode``
- Pass: nothing to do (untracked resource, empty history, dismissed picker)
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from quickfile_recall.core.exceptions import ErrorCode

T = TypeVar("T")


class Result(ABC, Generic[T]):
    """Base class for Ok, Err and Pass."""

    @abstractmethod
    def is_ok(self) -> bool:
        """Return True if this is an Ok result."""

    @abstractmethod
    def is_err(self) -> bool:
        """Return True if this is an Err result."""

    @abstractmethod
    def is_pass(self) -> bool:
        """Return True if this is a Pass result."""

    @abstractmethod
    def unwrap(self) -> T:
        """Return the value from Ok, or raise ValueError.

        Raises:
            ValueError: If this is not an Ok result.
        """

    @abstractmethod
    def unwrap_or(self, default: T) -> T:
        """Return the value from Ok, or default otherwise."""


class Ok(Result[T]):
    """Success result containing a value."""

    def __init__(self, value: T):
        self._value = value

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def is_pass(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self._value

    def unwrap_or(self, default: T) -> T:
        return self._value

    def __repr__(self) -> str:
        return f"Ok({self._value!r})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Ok):
            return False
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(("Ok", repr(self._value)))


class Err(Result[T]):
    """Error result containing error information."""

    def __init__(
        self,
        error: str,
        code: Optional[ErrorCode] = None,
        retryable: bool = False,
    ):
        """Initialize Err with error information.

        Args:
            error: Error message describing what went wrong.
            code: Optional error code for categorization.
            retryable: Whether trying again could succeed (default: False).
        """
        self.error = error
        self.code = code
        self.retryable = retryable

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def is_pass(self) -> bool:
        return False

    def unwrap(self) -> T:
        raise ValueError(self.error)

    def unwrap_or(self, default: T) -> T:
        return default

    def __repr__(self) -> str:
        if self.code:
            return f"Err({self.error!r}, code={self.code.value!r}, retryable={self.retryable})"
        return f"Err({self.error!r})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Err):
            return False
        return (
            self.error == other.error
            and self.code == other.code
            and self.retryable == other.retryable
        )

    def __hash__(self) -> int:
        return hash(("Err", self.error, self.code, self.retryable))


class Pass(Result[T]):
    """Neutral result: the request was valid but there was nothing to do."""

    def __init__(self, message: Optional[str] = None):
        self.message = message

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return False

    def is_pass(self) -> bool:
        return True

    def unwrap(self) -> T:
        raise ValueError("Cannot unwrap Pass result")

    def unwrap_or(self, default: T) -> T:
        return default

    def __repr__(self) -> str:
        if self.message:
            return f"Pass({self.message!r})"
        return "Pass()"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Pass):
            return False
        return self.message == other.message

    def __hash__(self) -> int:
        return hash(("Pass", self.message))

