#!/usr/bin/env -S uv run --quiet --no-project --script
"""Stop hook: keep the agent working while changed files fail lint.

Lints every changed or untracked lintable file (with ``--fix``) and asks
the stop decision what to do. A block sends the agent back to fix the
listed files and bumps the lint stop counter; after
``max-stop-attempts`` blocks the failures are only reported. Files the
agent already gave up on (per-file attempt ceiling) never block.

Hook docs: https://code.claude.com/docs/en/hooks#stop
"""

# /// script
# requires-python = ">=3.13"
# dependencies = [
#   "lint-sentinel",
# ]
#
# [tool.uv.sources]
# lint-sentinel = { path = "../", editable = true }
# ///
from __future__ import annotations

import logging
import sys

from sentinel_lib.context import open_context
from sentinel_lib.error_boundary import ErrorBoundary
from sentinel_lib.handlers import handle_lint_stop
from sentinel_lib.io import read_hook_input, write_output
from sentinel_lib.paths import resolve_project_dir
from sentinel_lib.schemas.hooks import StopHookInput
from sentinel_lib.settings import load_settings
from sentinel_lib.system import LocalFileSystem
from sentinel_lib.utils import Timer, configure_logging

logger = logging.getLogger('lint-stop')

boundary = ErrorBoundary(exit_code=1)


@boundary.handler(Exception)
def _handle_error(exc: Exception) -> None:
    print(f'lint-stop hook error: {exc}', file=sys.stderr)


@boundary
def main() -> None:
    configure_logging()
    timer = Timer()

    project_dir = resolve_project_dir()
    fs = LocalFileSystem()
    settings = load_settings(project_dir, fs)
    if not settings.lint:
        return

    # Stop payload carries nothing we need, but it must be valid
    read_hook_input(StopHookInput)
    with open_context(project_dir, fs=fs, settings=settings) as ctx:
        output = handle_lint_stop(ctx)

    write_output(output)
    logger.debug('Completed in %d ms', timer.elapsed_ms())


if __name__ == '__main__':
    main()
