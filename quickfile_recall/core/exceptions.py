"""Exception hierarchy and error codes for QuickFile Recall."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Codes carried by ``Err`` results so callers can pick a recovery."""

    NOT_FOUND = "not_found"
    STAT_FAILED = "stat_failed"
    UNSUPPORTED_SCHEME = "unsupported_scheme"
    STORE_READ_FAILED = "store_read_failed"
    STORE_WRITE_FAILED = "store_write_failed"
    HISTORY_UNAVAILABLE = "history_unavailable"
    OPEN_FAILED = "open_failed"


class QuickFileRecallError(Exception):
    """Base class for all QuickFile Recall errors."""


class InvalidResourceError(QuickFileRecallError, ValueError):
    """A resource string could not be parsed into a ResourceUri."""

    def __init__(self, value: object, reason: str) -> None:
        super().__init__(f"Invalid resource identifier {value!r}: {reason}")
        self.value = value
        self.reason = reason


class HistoryUnavailableError(QuickFileRecallError):
    """The in-memory history is no longer a sequence of entries."""


class StorageKeyError(QuickFileRecallError):
    """A storage key contained path separators or traversal segments."""


class ConfigError(QuickFileRecallError):
    """A project configuration file exists but could not be read."""
