"""QuickFile Recall - Storage layer with JSON persistence"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles
import aiofiles.os

from quickfile_recall.core.exceptions import ErrorCode, StorageKeyError
from quickfile_recall.core.result import Err, Ok, Result


logger = logging.getLogger(__name__)


class Storage:
    """JSON storage layer keyed by path segments"""

    def __init__(self, base_dir: Path):
        """Initialize storage with base directory"""
        self.base_dir = Path(base_dir)
        self.storage_dir = self.base_dir / "storage"

    def _get_path(self, *keys: str) -> Path:
        """Get full path for a key with path traversal protection"""
        for key in keys:
            if not key or ".." in key or "/" in key or "\\" in key or "\x00" in key:
                raise StorageKeyError(f"Invalid storage key: {key!r}")

        path = self.storage_dir.joinpath(*keys)
        if not path.suffix:
            path = path.with_suffix(".json")
        return path

    async def read(self, key: List[str]) -> Optional[Dict[str, Any]]:
        """Read JSON data by key.

        Returns None when nothing is stored or the stored document is not a
        UTF-8 JSON object. Other I/O errors propagate.
        """
        path = self._get_path(*key)
        try:
            async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
                content = await f.read()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError:
            logger.warning(f"Ignoring non UTF-8 document at {path}")
            return None

        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring corrupt JSON document at {path}")
            return None
        return data if isinstance(data, dict) else None

    async def write(self, key: List[str], data: Dict[str, Any]) -> None:
        """Replace the JSON document stored under key.

        The document is written to a sibling temp file first and then moved
        over the target, so readers never see a partial write.
        """
        path = self._get_path(*key)
        await aiofiles.os.makedirs(path.parent, exist_ok=True)

        content = json.dumps(data, indent=2, ensure_ascii=False)
        tmp_path = path.with_name(f".{path.name}.tmp")
        async with aiofiles.open(tmp_path, mode="w", encoding="utf-8") as f:
            await f.write(content)
        await aiofiles.os.replace(tmp_path, path)


def workspace_id(workspace_dir: Path) -> str:
    """Stable identifier for a workspace directory"""
    resolved = str(Path(workspace_dir).expanduser().resolve())
    return hashlib.sha256(resolved.encode("utf-8")).hexdigest()[:16]


class WorkspaceState(Storage):
    """Durable key/value slots scoped to one workspace.

    All keys of a workspace live in a single JSON document; ``set`` is a
    read-modify-write of that whole document.
    """

    def __init__(self, base_dir: Path, workspace_dir: Path):
        super().__init__(base_dir)
        self.workspace_dir = Path(workspace_dir)
        self.workspace_id = workspace_id(self.workspace_dir)

    @property
    def _key(self) -> List[str]:
        return ["workspace", self.workspace_id, "state"]

    async def get(self, key: str) -> Result[Any]:
        """Read one value. Ok(None) means nothing is stored under key."""
        try:
            document = await self.read(self._key)
        except (OSError, ValueError, StorageKeyError) as e:
            return Err(f"Failed to read workspace state: {e}", code=ErrorCode.STORE_READ_FAILED)
        return Ok((document or {}).get(key))

    async def set(self, key: str, value: Any) -> Result[None]:
        """Overwrite one value"""
        try:
            document = await self.read(self._key) or {}
            document[key] = value
            await self.write(self._key, document)
        except (OSError, TypeError, ValueError, StorageKeyError) as e:
            return Err(
                f"Failed to write workspace state: {e}",
                code=ErrorCode.STORE_WRITE_FAILED,
                retryable=isinstance(e, OSError),
            )
        return Ok(None)
