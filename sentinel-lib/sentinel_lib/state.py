"""Persisted hook state: per-file lint attempts and stop counters.

All files live under ``.claude/state/`` in the project. There is no
locking: hooks are short one-shot processes, and if two run at once the
last writer wins. Corrupt or unreadable state is treated as empty so a bad
file can never wedge the agent.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path

import pydantic

from sentinel_lib.paths import LINT_ATTEMPTS, STOP_ATTEMPTS, TSCONFIG_CACHE, TYPECHECK_STOP_ATTEMPTS
from sentinel_lib.schemas.hooks import StrictModel
from sentinel_lib.system import FileSystem
from sentinel_lib.types import AttemptsMap, CheckKind

__all__ = [
    'AttemptsLedger',
    'StateStore',
    'StopCounter',
    'TsconfigCache',
    'ends_with_segment',
]

logger = logging.getLogger(__name__)

_attempts_adapter: pydantic.TypeAdapter[AttemptsMap] = pydantic.TypeAdapter(dict[str, pydantic.PositiveInt])
_counter_adapter: pydantic.TypeAdapter[int] = pydantic.TypeAdapter(pydantic.NonNegativeInt)


class TsconfigCache(StrictModel):
    """Persisted file -> tsconfig resolutions, keyed by tsconfig content hash."""

    model_config = pydantic.ConfigDict(frozen=False, populate_by_name=True)

    project_root: str = pydantic.Field(alias='projectRoot')
    mappings: dict[str, str] = {}
    hashes: dict[str, str] = {}


def ends_with_segment(path: str, suffix: str) -> bool:
    """True if `suffix` is `path` or a whole-segment tail of it.

    A bare file name is never treated as a tail: `b.ts` only matches `b.ts`.
    """
    if path == suffix:
        return True
    if '/' not in suffix:
        return False
    return path.endswith('/' + suffix)


class AttemptsLedger:
    """Consecutive failed lint attempts per file.

    Writes use the path exactly as given. Lookups are forgiving because
    edit hooks see absolute paths while the change set is repo-relative.
    """

    def __init__(self, attempts: Mapping[str, int] | None = None) -> None:
        self._attempts: AttemptsMap = dict(attempts or {})
        self.dirty = False

    def find(self, file_path: str) -> int:
        """Attempt count for `file_path`, or 0.

        Matches on the exact key first, then on segment-aligned suffixes in
        either direction. A bare file name only ever matches exactly.
        """
        normalized = file_path.replace('\\', '/')
        if normalized in self._attempts:
            return self._attempts[normalized]

        for key, count in self._attempts.items():
            key = key.replace('\\', '/')
            if ends_with_segment(key, normalized) or ends_with_segment(normalized, key):
                return count
        return 0

    def record_failure(self, file_path: str) -> int:
        """Bump the count for `file_path` and return the new value."""
        count = self._attempts.get(file_path, 0) + 1
        self._attempts[file_path] = count
        self.dirty = True
        return count

    def record_pass(self, file_path: str) -> None:
        if self._attempts.pop(file_path, None) is not None:
            self.dirty = True

    def as_dict(self) -> AttemptsMap:
        return dict(self._attempts)


class StopCounter:
    """How many times a Stop event has been blocked in a row."""

    def __init__(self, value: int = 0) -> None:
        self.value = value
        self.dirty = False

    def increment(self) -> int:
        self.value += 1
        self.dirty = True
        return self.value

    def reset(self) -> None:
        if self.value:
            self.value = 0
            self.dirty = True


class StateStore:
    """Unit of work over the state directory.

    Loads everything once on entry and writes back only what changed, once,
    on a clean exit. An exception inside the block discards the changes.

    Usage:
        with StateStore(project_dir, fs) as state:
            state.ledger.record_failure('src/a.ts')
            state.stop_counter('lint').increment()
    """

    def __init__(self, project_dir: Path, fs: FileSystem) -> None:
        self.project_dir = project_dir
        self._fs = fs
        self.ledger = AttemptsLedger()
        self._counters: dict[CheckKind, StopCounter] = {}
        self._tsconfig_cache: TsconfigCache | None = None
        self._tsconfig_dirty = False

    def __enter__(self) -> StateStore:
        self.ledger = AttemptsLedger(self._load_attempts())
        self._counters = {
            'lint': StopCounter(self._load_counter(STOP_ATTEMPTS)),
            'type-check': StopCounter(self._load_counter(TYPECHECK_STOP_ATTEMPTS)),
        }
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        if exc_type is None:
            self.flush()

    def stop_counter(self, kind: CheckKind) -> StopCounter:
        return self._counters[kind]

    def flush(self) -> None:
        if self.ledger.dirty:
            self._write_json(LINT_ATTEMPTS, self.ledger.as_dict())
            self.ledger.dirty = False

        for kind, path in (('lint', STOP_ATTEMPTS), ('type-check', TYPECHECK_STOP_ATTEMPTS)):
            counter = self._counters.get(kind)
            if counter is not None and counter.dirty:
                self._write_json(path, counter.value)
                counter.dirty = False

        if self._tsconfig_dirty and self._tsconfig_cache is not None:
            self._fs.write_text(
                self.project_dir / TSCONFIG_CACHE,
                self._tsconfig_cache.model_dump_json(by_alias=True),
            )
            self._tsconfig_dirty = False

    def clear(self) -> None:
        """Forget all attempts and stop counts, on disk and in memory."""
        for path in (LINT_ATTEMPTS, STOP_ATTEMPTS, TYPECHECK_STOP_ATTEMPTS):
            self._fs.remove(self.project_dir / path)
        self.ledger = AttemptsLedger()
        self._counters = {'lint': StopCounter(), 'type-check': StopCounter()}

    # -- tsconfig cache --

    @property
    def tsconfig_cache(self) -> TsconfigCache:
        """Loaded lazily, since only the type-check hooks need it."""
        if self._tsconfig_cache is None:
            self._tsconfig_cache = self._load_tsconfig_cache()
        return self._tsconfig_cache

    def replace_tsconfig_cache(self, cache: TsconfigCache) -> None:
        self._tsconfig_cache = cache
        self._tsconfig_dirty = True

    def mark_tsconfig_cache_dirty(self) -> None:
        self._tsconfig_dirty = True

    # -- persistence --

    def _load_attempts(self) -> AttemptsMap:
        raw = self._read(LINT_ATTEMPTS)
        if raw is None:
            return {}
        try:
            return _attempts_adapter.validate_json(raw, strict=True)
        except pydantic.ValidationError as e:
            logger.warning('Discarding corrupt %s: %s', LINT_ATTEMPTS, e)
            return {}

    def _load_counter(self, path: Path) -> int:
        raw = self._read(path)
        if raw is None:
            return 0
        try:
            return _counter_adapter.validate_json(raw, strict=True)
        except pydantic.ValidationError as e:
            logger.warning('Discarding corrupt %s: %s', path, e)
            return 0

    def _load_tsconfig_cache(self) -> TsconfigCache:
        empty = TsconfigCache(project_root=str(self.project_dir))
        raw = self._read(TSCONFIG_CACHE)
        if raw is None:
            return empty
        try:
            cache = TsconfigCache.model_validate_json(raw)
        except pydantic.ValidationError as e:
            logger.warning('Discarding corrupt %s: %s', TSCONFIG_CACHE, e)
            return empty
        # Mappings from another checkout of the project are meaningless here
        return cache if cache.project_root == str(self.project_dir) else empty

    def _read(self, relative: Path) -> str | None:
        path = self.project_dir / relative
        if not self._fs.exists(path):
            return None
        try:
            return self._fs.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning('Cannot read %s: %s', path, e)
            return None

    def _write_json(self, relative: Path, value: object) -> None:
        self._fs.write_text(self.project_dir / relative, json.dumps(value, indent=2))
