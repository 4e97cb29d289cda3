"""Startup reconciliation of stored history against the live host.

Runs once per activation: prune entries whose files are gone, add the files
the host already has open, then cap to the configured size.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List

from quickfile_recall.core.exceptions import ErrorCode
from quickfile_recall.core.models import FILE_SCHEME, HistoryEntry, ResourceUri, Timestamp, now_ms
from quickfile_recall.history.persistence import HistoryPersistence
from quickfile_recall.history.store import EditorHistory
from quickfile_recall.interfaces.host import FileSystem, Workspace


logger = logging.getLogger(__name__)

TRACKED_SCHEMES = frozenset({FILE_SCHEME})


@dataclass
class ReconcileReport:
    """What a startup reconciliation changed.

    ``merged`` holds the added entries that survived the cap; entries dropped
    by the cap, old or newly merged, are in ``evicted``.
    """

    pruned: List[HistoryEntry] = field(default_factory=list)
    merged: List[HistoryEntry] = field(default_factory=list)
    evicted: List[HistoryEntry] = field(default_factory=list)


async def find_missing(history: EditorHistory, fs: FileSystem) -> List[ResourceUri]:
    """Resources in history that failed the existence check, in history order.

    A check that errors (permission denied, I/O failure) counts as missing.
    """
    missing: List[ResourceUri] = []
    for resource in history.resources():
        result = await fs.stat(resource)
        if result.is_ok():
            continue
        code = getattr(result, "code", None)
        if code != ErrorCode.NOT_FOUND:
            logger.warning(f"Existence check failed for {resource}, pruning it: {result}")
        missing.append(resource)
    return missing


async def prune_missing(
    history: EditorHistory, fs: FileSystem, persistence: HistoryPersistence
) -> List[HistoryEntry]:
    """Remove entries for resources that no longer exist.

    The pruned history is saved right away when anything was removed.
    """
    missing = await find_missing(history, fs)
    removed = history.remove_nonexistent(missing)
    for entry in removed:
        logger.info(f"Pruned non-existent file from history: {entry.resource.path}")

    if removed:
        await persistence.save(history)
    return removed


def merge_open_resources(
    history: EditorHistory,
    resources: Iterable[ResourceUri],
    timestamp: Timestamp,
) -> List[HistoryEntry]:
    """Add open resources that history does not know about yet.

    Only tracked schemes are merged and every added entry gets the same
    timestamp.
    """
    tracked = [resource for resource in resources if resource.scheme in TRACKED_SCHEMES]
    added = history.merge(tracked, timestamp)
    if added:
        logger.info(f"Added {len(added)} files to history that were already open")
    return added


async def reconcile_on_startup(
    history: EditorHistory,
    fs: FileSystem,
    workspace: Workspace,
    persistence: HistoryPersistence,
    clock: Callable[[], int] = now_ms,
) -> ReconcileReport:
    """Prune, merge externally-open resources, then cap."""
    report = ReconcileReport()
    report.pruned = await prune_missing(history, fs, persistence)

    before = history.entries
    now = clock()
    added = merge_open_resources(history, workspace.open_resources(), now)
    history.evict_overflow()

    remaining = set(history.resources())
    report.merged = [entry for entry in added if entry.resource in remaining]
    report.evicted = [entry for entry in before + added if entry.resource not in remaining]

    logger.debug(
        f"Startup reconciliation done: {len(report.pruned)} pruned, "
        f"{len(report.merged)} merged, {len(report.evicted)} evicted, "
        f"{len(history)} in history"
    )
    return report
