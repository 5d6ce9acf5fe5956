#!/usr/bin/env -S uv run --quiet --no-project --script
"""Stop hook: keep the agent working while changed files have type errors.

Same escalation as lint-stop, with its own stop counter. tsgo runs once
per tsconfig; every changed file in a project with type errors counts as
failing.

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
from sentinel_lib.handlers import handle_type_check_stop
from sentinel_lib.io import read_hook_input, write_output
from sentinel_lib.paths import resolve_project_dir
from sentinel_lib.schemas.hooks import StopHookInput
from sentinel_lib.settings import load_settings
from sentinel_lib.system import LocalFileSystem
from sentinel_lib.utils import Timer, configure_logging

logger = logging.getLogger('type-check-stop')

boundary = ErrorBoundary(exit_code=1)


@boundary.handler(Exception)
def _handle_error(exc: Exception) -> None:
    print(f'type-check-stop hook error: {exc}', file=sys.stderr)


@boundary
def main() -> None:
    configure_logging()
    timer = Timer()

    project_dir = resolve_project_dir()
    fs = LocalFileSystem()
    settings = load_settings(project_dir, fs)
    if not settings.typecheck:
        return

    read_hook_input(StopHookInput)
    with open_context(project_dir, fs=fs, settings=settings) as ctx:
        output = handle_type_check_stop(ctx)

    write_output(output)
    logger.debug('Completed in %d ms', timer.elapsed_ms())


if __name__ == '__main__':
    main()
