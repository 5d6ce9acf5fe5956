"""One-hop importer resolution for lint cache invalidation.

ESLint's cache keys only on each file's own contents, so files importing a
changed module are evicted explicitly. Only direct importers are returned;
importers of importers stay cached.

Every step is fail-open. No manifest, no entry point, or any failure of the
graph tool yields an empty importer set, and the caller skips eviction for
that file.
"""

from __future__ import annotations

__all__ = [
    'ENTRY_CANDIDATES',
    'GRAPH_TIMEOUT_SECONDS',
    'find_entry_points',
    'find_importers',
    'find_source_root',
    'get_dependency_graph',
    'invert_graph',
]

import logging
import os
import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path

import pydantic

from sentinel_lib.errors import DependencyGraphError
from sentinel_lib.system import FileSystem, ProcessRunner
from sentinel_lib.types import DependencyGraph

logger = logging.getLogger(__name__)

MANIFEST = 'package.json'
SOURCE_DIR = 'src'
ENTRY_CANDIDATES = ('index.ts', 'cli.ts', 'main.ts')
GRAPH_TIMEOUT_SECONDS = 30

_graph_adapter: pydantic.TypeAdapter[DependencyGraph] = pydantic.TypeAdapter(dict[str, list[str]])


def find_source_root(file_path: Path, fs: FileSystem) -> Path | None:
    """Locate the source tree that owns `file_path`.

    Walks up from the file's directory to the nearest directory holding a
    package manifest. Its ``src`` subdirectory wins when present.

    Returns:
        The source root, or None when no manifest exists above the file
    """
    current = file_path.parent
    while current != current.parent:
        if fs.exists(current / MANIFEST):
            source_dir = current / SOURCE_DIR
            return source_dir if fs.exists(source_dir) else current
        current = current.parent
    return None


def find_entry_points(source_root: Path, fs: FileSystem) -> list[Path]:
    """Existing entry-point candidates inside `source_root`, in candidate order."""
    return [source_root / name for name in ENTRY_CANDIDATES if fs.exists(source_root / name)]


def get_dependency_graph(
    source_root: Path,
    entry_points: Sequence[Path],
    runner: ProcessRunner,
    runner_prefix: str,
) -> DependencyGraph:
    """Build the static import graph reachable from `entry_points` with madge.

    Raises:
        DependencyGraphError: If madge cannot run, exits non-zero, times out,
            or prints something other than a ``{file: [imports]}`` object
    """
    args = [*shlex.split(runner_prefix), 'madge', '--json', *(str(entry) for entry in entry_points)]
    try:
        result = runner.run(args, cwd=source_root, timeout=GRAPH_TIMEOUT_SECONDS)
    except (OSError, subprocess.SubprocessError) as e:
        raise DependencyGraphError(f'madge failed to run: {e}') from e

    if result.returncode != 0:
        raise DependencyGraphError(f'madge exited {result.returncode}: {result.stderr.strip()}')

    try:
        return _graph_adapter.validate_json(result.stdout)
    except pydantic.ValidationError as e:
        raise DependencyGraphError(f'madge printed an unexpected graph: {e}') from e


def invert_graph(graph: DependencyGraph, target: str) -> list[str]:
    """Files whose direct imports include `target`, in graph order."""
    return [file for file, dependencies in graph.items() if target in dependencies]


def find_importers(
    file_path: Path,
    fs: FileSystem,
    runner: ProcessRunner,
    runner_prefix: str,
) -> list[Path]:
    """Absolute paths of the files that directly import `file_path`.

    An empty list means "cannot determine" as well as "no importers"; both
    lead the caller to skip selective invalidation.
    """
    source_root = find_source_root(file_path, fs)
    if source_root is None:
        return []

    entry_points = find_entry_points(source_root, fs)
    if not entry_points:
        return []

    try:
        graph = get_dependency_graph(source_root, entry_points, runner, runner_prefix)
    except DependencyGraphError as e:
        logger.warning('Skipping importer invalidation for %s: %s', file_path, e)
        return []

    target = os.path.relpath(file_path, source_root).replace('\\', '/')
    importers = [source_root / importer for importer in invert_graph(graph, target)]
    logger.debug('%s is imported by %d file(s)', target, len(importers))
    return importers
