"""QuickFile Recall - Core data models"""

from __future__ import annotations

import math
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Optional, Union
from urllib.parse import quote, unquote, urlsplit

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from quickfile_recall.core.exceptions import InvalidResourceError

FILE_SCHEME = "file"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")
_PATH_SAFE = "/:@!$&'()*+,;=~"

Timestamp = Union[int, float]


def now_ms() -> int:
    """Wall clock in milliseconds since the epoch"""
    return int(time.time() * 1000)


def is_representable(timestamp: Timestamp) -> bool:
    """Whether a millisecond timestamp maps to a calendar date"""
    try:
        datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return False
    return True


@dataclass(frozen=True)
class ResourceUri:
    """Canonical identifier of an addressable file-like resource.

    Two resources are the same resource exactly when their canonical strings
    are equal; ``parse`` normalizes the scheme so value equality and string
    equality agree.
    """

    scheme: str
    path: str
    authority: str = ""
    query: str = ""
    fragment: str = ""

    @classmethod
    def parse(cls, value: Any) -> "ResourceUri":
        """Parse a resource string strictly.

        Raises:
            InvalidResourceError: If the value has no valid scheme or no path.
        """
        if not isinstance(value, str) or not value:
            raise InvalidResourceError(value, "expected a non-empty string")

        try:
            parts = urlsplit(value)
        except ValueError as e:
            raise InvalidResourceError(value, str(e)) from e
        if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
            raise InvalidResourceError(value, "missing or invalid scheme")

        path = unquote(parts.path)
        if not path:
            raise InvalidResourceError(value, "empty path")

        return cls(
            scheme=parts.scheme.lower(),
            path=path,
            authority=parts.netloc,
            query=parts.query,
            fragment=parts.fragment,
        )

    @classmethod
    def file(cls, path: Union[str, Path]) -> "ResourceUri":
        """Build a file resource from a local path"""
        resolved = Path(path).expanduser().resolve()
        return cls(scheme=FILE_SCHEME, path=resolved.as_posix())

    @property
    def fs_path(self) -> Path:
        return Path(self.path)

    @property
    def basename(self) -> str:
        return PurePosixPath(self.path).name

    @property
    def is_file(self) -> bool:
        return self.scheme == FILE_SCHEME

    def __str__(self) -> str:
        text = f"{self.scheme}:"
        if self.authority or self.scheme == FILE_SCHEME or self.path.startswith("//"):
            text += f"//{self.authority}"
        text += quote(self.path, safe=_PATH_SAFE)
        if self.query:
            text += f"?{self.query}"
        if self.fragment:
            text += f"#{self.fragment}"
        return text


@dataclass
class HistoryEntry:
    """One resource and the last time it was the active one"""

    resource: ResourceUri
    timestamp: Timestamp

    def to_record(self) -> Dict[str, Any]:
        return {"resourceString": str(self.resource), "timestamp": self.timestamp}


class PersistedEntry(BaseModel):
    """Stored shape of a single history entry.

    ``uriString`` is the key written by older releases and is still accepted.
    A timestamp that is not a finite number, or that lies outside the range
    of calendar dates, validates to None so the loader can stamp it instead
    of dropping the entry.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    resource_string: str = Field(
        validation_alias=AliasChoices("resourceString", "uriString", "resource_string"),
        serialization_alias="resourceString",
    )
    timestamp: Optional[Timestamp] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _finite_number_or_none(cls, value: Any) -> Optional[Timestamp]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if isinstance(value, float) and not math.isfinite(value):
            return None
        if not is_representable(value):
            return None
        return value


@dataclass(frozen=True)
class RecallItem:
    """One row offered by the recall picker"""

    label: str
    description: str
    detail: str
    resource: ResourceUri
