"""Invocations of the external lint and type-check binaries.

Every runner returns None for a clean exit and the diagnostic text
otherwise: stdout, else stderr, else a generic failure line. A binary that
cannot be started is reported the same way, as text, so callers have a
single "found issues" path.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Mapping, Sequence
from pathlib import Path

from sentinel_lib.system import ProcessRunner

__all__ = [
    'ESLINT_ENV',
    'restart_daemon',
    'run_eslint',
    'run_oxlint',
    'run_tool',
    'run_type_check',
]

logger = logging.getLogger(__name__)

# Tells eslint_d to report editor-style results for the single file
ESLINT_ENV = {'ESLINT_IN_EDITOR': 'true'}


def run_tool(
    runner: ProcessRunner,
    runner_prefix: str,
    tool_args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> str | None:
    args = [*shlex.split(runner_prefix), *tool_args]
    logger.debug('Running %s', shlex.join(args))
    try:
        result = runner.run(args, cwd=cwd, env=env)
    except OSError as e:
        return f'Command failed: {shlex.join(args)}\n{e}'

    if result.returncode == 0:
        return None
    return result.stdout or result.stderr or f'Command failed: {shlex.join(args)}'


def run_eslint(
    target: str,
    flags: Sequence[str],
    runner: ProcessRunner,
    runner_prefix: str,
    cwd: Path | None = None,
) -> str | None:
    return run_tool(runner, runner_prefix, ['eslint_d', '--cache', *flags, target], cwd=cwd, env=ESLINT_ENV)


def run_oxlint(
    target: str,
    flags: Sequence[str],
    runner: ProcessRunner,
    runner_prefix: str,
    cwd: Path | None = None,
) -> str | None:
    return run_tool(runner, runner_prefix, ['oxlint', *flags, target], cwd=cwd)


def run_type_check(
    tsconfig: Path,
    runner: ProcessRunner,
    runner_prefix: str,
    cwd: Path | None = None,
) -> str | None:
    return run_tool(
        runner,
        runner_prefix,
        ['tsgo', '-p', str(tsconfig), '--noEmit', '--pretty', 'false'],
        cwd=cwd,
    )


def restart_daemon(runner: ProcessRunner, runner_prefix: str) -> None:
    """Restart eslint_d in the background so the next run sees fresh config.

    Not awaited, and its outcome never affects the lint result.
    """
    runner.spawn_detached([*shlex.split(runner_prefix), 'eslint_d', 'restart'], env=ESLINT_ENV)
