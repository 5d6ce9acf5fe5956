"""TypeScript type checking with tsgo.

A file is checked through the tsconfig that owns it: the nearest
``tsconfig.json`` above it, or, for a solution-style config with
``references``, the first referenced project whose file set covers it.
Resolutions are cached in the state directory and trusted only while the
resolved config's content hash is unchanged.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path, PurePosixPath
from typing import Any

from sentinel_lib.classify import is_type_checkable
from sentinel_lib.context import HookContext
from sentinel_lib.formatting import build_type_check_output, partition_type_errors, select_type_error_lines
from sentinel_lib.schemas.hooks import PostToolUseHookOutput
from sentinel_lib.state import StateStore
from sentinel_lib.system import FileSystem
from sentinel_lib.tools import run_type_check

__all__ = [
    'TSCONFIG',
    'file_covered_by',
    'find_tsconfig_for_file',
    'find_type_error_files',
    'resolve_tsconfig',
    'resolve_via_references',
    'type_check_file',
]

logger = logging.getLogger(__name__)

TSCONFIG = 'tsconfig.json'

# TypeScript's implicit include when neither files nor include is set
_DEFAULT_INCLUDE = ('**/*',)


def find_tsconfig_for_file(file_path: Path, project_root: Path, fs: FileSystem) -> Path | None:
    """Owning tsconfig for `file_path`, searching no higher than `project_root`."""
    directory = file_path.parent
    while directory == project_root or project_root in directory.parents:
        candidate = directory / TSCONFIG
        if fs.exists(candidate):
            return resolve_via_references(candidate, file_path, fs) or candidate
        directory = directory.parent
    return None


def resolve_via_references(tsconfig: Path, file_path: Path, fs: FileSystem) -> Path | None:
    """First project referenced by `tsconfig` whose file set includes `file_path`."""
    config = _read_config(tsconfig, fs)
    references = config.get('references') if config else None
    if not isinstance(references, list):
        return None

    for reference in references:
        if not isinstance(reference, dict) or not isinstance(reference.get('path'), str):
            continue
        target = tsconfig.parent / reference['path']
        if target.suffix != '.json':
            target = target / TSCONFIG
        if fs.exists(target) and file_covered_by(target, file_path, fs):
            return target
    return None


def file_covered_by(tsconfig: Path, file_path: Path, fs: FileSystem) -> bool:
    """Whether `tsconfig`'s files/include/exclude select `file_path`."""
    config = _read_config(tsconfig, fs)
    if config is None:
        return False

    relative = os.path.relpath(file_path, tsconfig.parent).replace('\\', '/')
    if relative.startswith('../'):
        return False

    files = config.get('files')
    include = config.get('include')
    exclude = config.get('exclude') or []

    if isinstance(files, list) and relative in {_normalize_pattern(entry) for entry in files if isinstance(entry, str)}:
        return True
    if include is None:
        include = [] if files is not None else _DEFAULT_INCLUDE

    included = any(_matches(relative, pattern) for pattern in include if isinstance(pattern, str))
    excluded = any(_matches(relative, pattern) for pattern in exclude if isinstance(pattern, str))
    return included and not excluded


def resolve_tsconfig(file_path: Path, project_root: Path, fs: FileSystem, state: StateStore) -> Path | None:
    """find_tsconfig_for_file, memoized in the persisted tsconfig cache."""
    cache = state.tsconfig_cache
    key = str(file_path)

    cached = cache.mappings.get(key)
    if cached is not None:
        cached_path = Path(cached)
        if fs.exists(cached_path) and cache.hashes.get(cached) == _content_hash(cached_path, fs):
            return cached_path

    tsconfig = find_tsconfig_for_file(file_path, project_root, fs)
    if tsconfig is None:
        if cache.mappings.pop(key, None) is not None:
            state.mark_tsconfig_cache_dirty()
        return None

    cache.mappings[key] = str(tsconfig)
    cache.hashes[str(tsconfig)] = _content_hash(tsconfig, fs)
    state.mark_tsconfig_cache_dirty()
    return tsconfig


def type_check_file(ctx: HookContext, file_path: str) -> PostToolUseHookOutput | None:
    """Type-check the project owning `file_path` and report its errors.

    Returns:
        Diagnostics split into the edited file and the rest of the project,
        or None when the file is not checkable, has no tsconfig, or is clean
    """
    if not is_type_checkable(file_path):
        return None

    path = ctx.resolve(file_path)
    tsconfig = resolve_tsconfig(path, ctx.project_dir, ctx.fs, ctx.state)
    if tsconfig is None:
        logger.debug('No tsconfig owns %s', file_path)
        return None

    output = run_type_check(tsconfig, ctx.runner, ctx.settings.runner, cwd=ctx.project_dir)
    if output is None:
        return None

    lines = select_type_error_lines(output, limit=None)
    relative = os.path.relpath(path, ctx.project_dir)
    return build_type_check_output(partition_type_errors(lines, relative))


def find_type_error_files(ctx: HookContext, files: Iterable[str]) -> list[str]:
    """Type-checkable files whose project currently has type errors.

    tsgo runs once per distinct tsconfig; files sharing a project share its
    verdict.
    """
    verdicts: dict[Path, bool] = {}
    error_files: list[str] = []

    for file in files:
        if not is_type_checkable(file):
            continue
        tsconfig = resolve_tsconfig(ctx.resolve(file), ctx.project_dir, ctx.fs, ctx.state)
        if tsconfig is None:
            continue
        if tsconfig not in verdicts:
            output = run_type_check(tsconfig, ctx.runner, ctx.settings.runner, cwd=ctx.project_dir)
            verdicts[tsconfig] = output is not None and bool(select_type_error_lines(output, limit=1))
        if verdicts[tsconfig]:
            error_files.append(file)

    return error_files


def _read_config(tsconfig: Path, fs: FileSystem) -> dict[str, Any] | None:
    # tsconfig may be JSONC; anything json can't parse counts as an empty config
    try:
        data = json.loads(fs.read_text(tsconfig))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.debug('Cannot parse %s as JSON: %s', tsconfig, e)
        return None
    return data if isinstance(data, dict) else None


def _content_hash(path: Path, fs: FileSystem) -> str:
    return hashlib.sha256(fs.read_text(path).encode()).hexdigest()


def _normalize_pattern(pattern: str) -> str:
    return pattern.replace('\\', '/').removeprefix('./').rstrip('/')


def _matches(relative: str, pattern: str) -> bool:
    pattern = _normalize_pattern(pattern)
    # A bare directory name includes everything beneath it
    if not any(char in pattern for char in '*?') and not PurePosixPath(pattern).suffix:
        pattern = f'{pattern}/**/*' if pattern else '**/*'
    return PurePosixPath(relative).full_match(pattern)
