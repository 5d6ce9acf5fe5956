"""Capability interfaces for filesystem and process access.

Everything in lint-sentinel that touches the disk or spawns a process goes
through one of these protocols. Hooks construct the production
implementations once at startup; tests substitute in-memory fakes.
"""

from __future__ import annotations

import contextlib
import glob
import os
import subprocess
import tempfile
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Protocol

__all__ = [
    'FileSystem',
    'LocalFileSystem',
    'ProcessResult',
    'ProcessRunner',
    'SubprocessRunner',
]

# Never descend into these when expanding recursive globs
_PRUNED_DIRS = frozenset({'node_modules', '.git'})


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of a finished child process."""

    returncode: int
    stdout: str
    stderr: str


class FileSystem(Protocol):
    """Filesystem operations used by the hooks."""

    def exists(self, path: Path) -> bool: ...

    def read_text(self, path: Path) -> str:
        """Decode as UTF-8. Undecodable bytes become U+FFFD."""
        ...

    def write_text(self, path: Path, content: str) -> None:
        """Write atomically, creating parent directories."""
        ...

    def remove(self, path: Path) -> None:
        """Delete a file. Missing files are ignored."""
        ...

    def mtime(self, path: Path) -> float: ...

    def glob(self, pattern: str, root: Path) -> Sequence[Path]:
        """Expand a glob relative to `root`. `**` spans directories."""
        ...


class ProcessRunner(Protocol):
    """Child process execution."""

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        """Run to completion and capture output, decoded leniently as UTF-8.

        Raises:
            OSError: If the program cannot be started
            subprocess.TimeoutExpired: If `timeout` elapses first
        """
        ...

    def spawn_detached(self, args: Sequence[str], *, env: Mapping[str, str] | None = None) -> None:
        """Start a process without waiting for it. Failures are ignored."""
        ...


class LocalFileSystem:
    """FileSystem backed by the real disk."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding='utf-8', errors='replace')

    def write_text(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)

        # Temp file in the same directory so the rename stays on one filesystem
        with tempfile.NamedTemporaryFile(
            mode='w', encoding='utf-8', dir=path.parent, delete=False, suffix='.tmp'
        ) as f:
            temp_path = Path(f.name)
            f.write(content)

        temp_path.replace(path)

    def remove(self, path: Path) -> None:
        path.unlink(missing_ok=True)

    def mtime(self, path: Path) -> float:
        return path.stat().st_mtime

    def glob(self, pattern: str, root: Path) -> Sequence[Path]:
        if '**' not in pattern:
            return [root / match for match in sorted(glob.glob(pattern, root_dir=root))]

        matches: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = [name for name in dirnames if name not in _PRUNED_DIRS]
            for name in filenames:
                path = Path(dirpath, name)
                if PurePosixPath(path.relative_to(root).as_posix()).full_match(pattern):
                    matches.append(path)
        return sorted(matches)


class SubprocessRunner:
    """ProcessRunner backed by the subprocess module."""

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        completed = subprocess.run(
            list(args),
            cwd=cwd,
            env=_merged_env(env),
            capture_output=True,
            encoding='utf-8',
            errors='replace',
            timeout=timeout,
        )
        return ProcessResult(completed.returncode, completed.stdout, completed.stderr)

    def spawn_detached(self, args: Sequence[str], *, env: Mapping[str, str] | None = None) -> None:
        with contextlib.suppress(OSError):
            subprocess.Popen(
                list(args),
                env=_merged_env(env),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )


def _merged_env(overrides: Mapping[str, str] | None) -> dict[str, str] | None:
    if not overrides:
        return None
    return {**os.environ, **overrides}
