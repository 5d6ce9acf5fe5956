"""Lint-result cache invalidation.

Two mutually exclusive modes run once per lint pass, in a fixed order:

1. Bulk bust: if any file matched by the cache-bust globs (build and type
   configuration by default) is newer than the cache file, delete the whole
   cache.
2. Selective: otherwise evict only the direct importers of the edited file.
"""

from __future__ import annotations

__all__ = [
    'clear_cache',
    'invalidate_cache_entries',
    'refresh_cache',
    'resolve_bust_files',
    'should_bust_cache',
]

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from sentinel_lib.dependency_graph import find_importers
from sentinel_lib.result_cache import FileEntryCache
from sentinel_lib.system import FileSystem, ProcessRunner
from sentinel_lib.types import InvalidationMode

logger = logging.getLogger(__name__)


def resolve_bust_files(patterns: Sequence[str], root: Path, fs: FileSystem) -> list[Path]:
    """Expand bust globs, minus anything matched by a ``!``-negated glob."""
    positive = [pattern for pattern in patterns if not pattern.startswith('!')]
    negative = [pattern[1:] for pattern in patterns if pattern.startswith('!')]

    matched = list(dict.fromkeys(path for pattern in positive for path in fs.glob(pattern, root)))
    if not negative:
        return matched

    excluded = {path for pattern in negative for path in fs.glob(pattern, root)}
    return [path for path in matched if path not in excluded]


def should_bust_cache(patterns: Sequence[str], root: Path, cache_path: Path, fs: FileSystem) -> bool:
    """True when some bust file was modified after the cache was written."""
    if not patterns or not fs.exists(cache_path):
        return False

    files = resolve_bust_files(patterns, root, fs)
    if not files:
        return False

    cache_mtime = fs.mtime(cache_path)
    return any(fs.mtime(path) > cache_mtime for path in files)


def clear_cache(cache_path: Path, fs: FileSystem) -> None:
    fs.remove(cache_path)


def invalidate_cache_entries(file_paths: Iterable[Path], cache_path: Path, fs: FileSystem) -> None:
    """Evict `file_paths` from the cache and reconcile it.

    No-op without paths or without a cache. An unparseable cache is deleted.
    """
    keys = [str(path) for path in file_paths]
    if not keys or not fs.exists(cache_path):
        return

    cache = FileEntryCache.load(cache_path, fs)
    if cache is None:
        clear_cache(cache_path, fs)
        return

    for key in keys:
        cache.remove_entry(key)
    cache.reconcile()


def refresh_cache(
    file_path: Path,
    *,
    root: Path,
    cache_path: Path,
    patterns: Sequence[str],
    fs: FileSystem,
    runner: ProcessRunner,
    runner_prefix: str,
) -> InvalidationMode:
    """Run one invalidation pass ahead of linting `file_path`.

    Returns:
        Which mode ran: 'bust', 'selective' or 'skipped' (nothing to evict)
    """
    if should_bust_cache(patterns, root, cache_path, fs):
        logger.info('Cache-bust file changed, clearing %s', cache_path)
        clear_cache(cache_path, fs)
        return 'bust'

    importers = find_importers(file_path, fs, runner, runner_prefix)
    if not importers or not fs.exists(cache_path):
        return 'skipped'

    invalidate_cache_entries(importers, cache_path, fs)
    return 'selective'
