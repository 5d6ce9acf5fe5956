"""Per-invocation hook context."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from sentinel_lib.changes import ChangeSource, GitChangeSource
from sentinel_lib.paths import ESLINT_CACHE
from sentinel_lib.settings import Settings, load_settings
from sentinel_lib.state import StateStore
from sentinel_lib.system import FileSystem, LocalFileSystem, ProcessRunner, SubprocessRunner

__all__ = [
    'HookContext',
    'open_context',
]


@dataclass
class HookContext:
    """Everything a handler needs, built once per hook process."""

    project_dir: Path
    settings: Settings
    fs: FileSystem
    runner: ProcessRunner
    changes: ChangeSource
    state: StateStore

    @property
    def eslint_cache(self) -> Path:
        return self.project_dir / ESLINT_CACHE

    def resolve(self, file_path: str) -> Path:
        """Absolute path for a file named relative to the project."""
        path = Path(file_path)
        return path if path.is_absolute() else self.project_dir / path


@contextmanager
def open_context(
    project_dir: Path,
    *,
    fs: FileSystem | None = None,
    runner: ProcessRunner | None = None,
    changes: ChangeSource | None = None,
    settings: Settings | None = None,
) -> Iterator[HookContext]:
    """Build a context and hold its state open for the duration of the block.

    State changes are written back when the block exits cleanly.
    """
    fs = fs or LocalFileSystem()
    with StateStore(project_dir, fs) as state:
        yield HookContext(
            project_dir=project_dir,
            settings=settings or load_settings(project_dir, fs),
            fs=fs,
            runner=runner or SubprocessRunner(),
            changes=changes or GitChangeSource(project_dir),
            state=state,
        )
