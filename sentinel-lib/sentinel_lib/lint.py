"""Lint orchestration on top of the linter runners and cache invalidation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from sentinel_lib.classify import is_lintable_file
from sentinel_lib.context import HookContext
from sentinel_lib.formatting import build_lint_output, select_error_lines
from sentinel_lib.invalidation import clear_cache, invalidate_cache_entries, refresh_cache, should_bust_cache
from sentinel_lib.schemas.hooks import PostToolUseHookOutput
from sentinel_lib.tools import restart_daemon, run_eslint, run_oxlint

__all__ = [
    'find_lint_error_files',
    'lint_file',
    'lint_targets',
    'run_linters',
]

logger = logging.getLogger(__name__)


def run_linters(ctx: HookContext, target: str, flags: Sequence[str]) -> list[str]:
    """Run each enabled linter on `target` and collect their failure output.

    oxlint runs first since it is fast. The eslint_d daemon is restarted
    after every ESLint run.
    """
    settings = ctx.settings
    outputs: list[str] = []

    if settings.oxlint:
        output = run_oxlint(target, flags, ctx.runner, settings.runner, cwd=ctx.project_dir)
        if output is not None:
            outputs.append(output)

    if settings.eslint:
        output = run_eslint(target, flags, ctx.runner, settings.runner, cwd=ctx.project_dir)
        if output is not None:
            outputs.append(output)
        restart_daemon(ctx.runner, settings.runner)

    return outputs


def lint_file(ctx: HookContext, file_path: str, flags: Sequence[str] = ()) -> PostToolUseHookOutput | None:
    """Lint one file, refreshing the result cache first.

    Returns:
        Diagnostics to show, or None if the file is clean or not lintable
    """
    if not is_lintable_file(file_path):
        return None

    path = ctx.resolve(file_path)
    mode = refresh_cache(
        path,
        root=ctx.project_dir,
        cache_path=ctx.eslint_cache,
        patterns=ctx.settings.cache_bust,
        fs=ctx.fs,
        runner=ctx.runner,
        runner_prefix=ctx.settings.runner,
    )
    logger.debug('Cache refresh for %s: %s', file_path, mode)

    outputs = run_linters(ctx, str(path), flags)
    if not outputs:
        return None

    errors = select_error_lines('\n'.join(outputs))
    if not errors:
        return None
    return build_lint_output(file_path, errors)


def find_lint_error_files(ctx: HookContext, files: Iterable[str]) -> list[str]:
    """Lint (and fix) each lintable file; return those that still fail."""
    return [file for file in files if is_lintable_file(file) and lint_file(ctx, file, ['--fix']) is not None]


def lint_targets(ctx: HookContext, targets: Sequence[str], flags: Sequence[str]) -> list[str]:
    """Lint whole targets for the CLI and return every failure output.

    Cache invalidation covers the working tree's changed files themselves
    rather than their importers, and a bulk bust still takes precedence.
    """
    if should_bust_cache(ctx.settings.cache_bust, ctx.project_dir, ctx.eslint_cache, ctx.fs):
        logger.info('Cache-bust file changed, clearing %s', ctx.eslint_cache)
        clear_cache(ctx.eslint_cache, ctx.fs)
    else:
        changed = [ctx.resolve(file) for file in ctx.changes.changed_files()]
        invalidate_cache_entries(changed, ctx.eslint_cache, ctx.fs)

    settings = ctx.settings
    outputs: list[str] = []
    for target in targets:
        if settings.oxlint:
            output = run_oxlint(target, flags, ctx.runner, settings.runner, cwd=ctx.project_dir)
            if output is not None:
                outputs.append(output)
        if settings.eslint:
            output = run_eslint(target, flags, ctx.runner, settings.runner, cwd=ctx.project_dir)
            if output is not None:
                outputs.append(output)

    # One restart for the whole batch
    if settings.eslint:
        restart_daemon(ctx.runner, settings.runner)
    return outputs
