#!/usr/bin/env -S uv run --quiet --no-project --script
"""SessionStart/SessionEnd hook: reset lint attempt tracking.

Attempt and stop counts describe one session's fix loop, so a new session
starts from zero. The tsconfig resolution cache is kept.
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

import sys

from sentinel_lib.error_boundary import ErrorBoundary
from sentinel_lib.handlers import clear_state
from sentinel_lib.paths import resolve_project_dir
from sentinel_lib.system import LocalFileSystem
from sentinel_lib.utils import configure_logging

boundary = ErrorBoundary(exit_code=1)


@boundary.handler(Exception)
def _handle_error(exc: Exception) -> None:
    print(f'clear-lint-state hook error: {exc}', file=sys.stderr)


@boundary
def main() -> None:
    configure_logging()
    clear_state(resolve_project_dir(), LocalFileSystem())


if __name__ == '__main__':
    main()
