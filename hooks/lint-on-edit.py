#!/usr/bin/env -S uv run --quiet --no-project --script
"""PostToolUse hook: lint each file the agent writes or edits.

Runs the enabled linters with ``--fix`` after evicting stale lint-cache
entries for the file's importers. Diagnostics go to both the user
(systemMessage) and the agent (additionalContext). Consecutive failures
are counted per file; at ``max-lint-attempts`` the agent is told to stop
editing the file and report to the user.

Silent when linting is disabled, the tool is not Write/Edit, the file is
not lintable, or the file is clean.

Hook docs: https://code.claude.com/docs/en/hooks#posttooluse
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
from sentinel_lib.handlers import handle_lint_edit
from sentinel_lib.io import read_hook_input, write_output
from sentinel_lib.paths import resolve_project_dir
from sentinel_lib.schemas.hooks import PostToolUseHookInput
from sentinel_lib.settings import load_settings
from sentinel_lib.system import LocalFileSystem
from sentinel_lib.utils import Timer, configure_logging

logger = logging.getLogger('lint-on-edit')

# --- Error boundary (process-level) ---
# Unreadable input or a crash: report on stderr, exit 1

boundary = ErrorBoundary(exit_code=1)


@boundary.handler(Exception)
def _handle_error(exc: Exception) -> None:
    print(f'lint-on-edit hook error: {exc}', file=sys.stderr)


@boundary
def main() -> None:
    configure_logging()
    timer = Timer()

    project_dir = resolve_project_dir()
    fs = LocalFileSystem()
    settings = load_settings(project_dir, fs)
    if not settings.lint:
        return

    hook_input = read_hook_input(PostToolUseHookInput)
    with open_context(project_dir, fs=fs, settings=settings) as ctx:
        output = handle_lint_edit(ctx, hook_input)

    write_output(output)
    logger.debug('Completed in %d ms', timer.elapsed_ms())


if __name__ == '__main__':
    main()
