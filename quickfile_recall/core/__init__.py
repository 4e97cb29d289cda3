"""Core types for QuickFile Recall: resources, results, errors and settings."""

from quickfile_recall.core.exceptions import (
    ConfigError,
    ErrorCode,
    HistoryUnavailableError,
    InvalidResourceError,
    QuickFileRecallError,
    StorageKeyError,
)
from quickfile_recall.core.result import Err, Ok, Pass, Result

__all__ = [
    "ConfigError",
    "ErrorCode",
    "HistoryUnavailableError",
    "InvalidResourceError",
    "QuickFileRecallError",
    "StorageKeyError",
    "Err",
    "Ok",
    "Pass",
    "Result",
]
