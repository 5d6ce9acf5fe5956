"""Adapter over ESLint's persistent result cache (``.eslintcache``).

ESLint writes the cache through flat-cache, which serializes a JSON array:
element 0 maps each cached file path to the index of its descriptor
elsewhere in the array. Older caches (and simple fixtures) are a plain
``{path: descriptor}`` object. Both layouts are keyed by absolute path at
the top level, which is all eviction needs; descriptors are never read.

Eviction leaves orphaned descriptors in place; flat-cache drops them on its
next save.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from sentinel_lib.system import FileSystem

__all__ = [
    'FileEntryCache',
    'ResultCache',
]

logger = logging.getLogger(__name__)


class ResultCache(Protocol):
    """The slice of the result cache contract lint-sentinel relies on."""

    def remove_entry(self, key: str) -> None: ...

    def reconcile(self) -> None:
        """Drop entries for files that no longer exist and persist."""
        ...


class FileEntryCache:
    """ResultCache backed by an ESLint cache file.

    Use `load`, which returns None for a cache it cannot parse.
    """

    def __init__(self, path: Path, data: Any, fs: FileSystem) -> None:
        self._path = path
        self._data = data
        self._fs = fs

    @classmethod
    def load(cls, path: Path, fs: FileSystem) -> FileEntryCache | None:
        try:
            data = json.loads(fs.read_text(path))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning('Unreadable lint cache %s: %s', path, e)
            return None

        if isinstance(data, list) and data and isinstance(data[0], dict):
            return cls(path, data, fs)
        if isinstance(data, dict):
            return cls(path, data, fs)

        logger.warning('Unrecognized lint cache layout in %s', path)
        return None

    @property
    def keys(self) -> list[str]:
        return list(self._entries)

    def remove_entry(self, key: str) -> None:
        self._entries.pop(key, None)

    def reconcile(self) -> None:
        for key in [key for key in self._entries if not self._fs.exists(Path(key))]:
            del self._entries[key]
        self._fs.write_text(self._path, json.dumps(self._data, separators=(',', ':')))

    @property
    def _entries(self) -> dict[str, Any]:
        # flat-cache layout keeps the key table in slot 0
        return self._data[0] if isinstance(self._data, list) else self._data
