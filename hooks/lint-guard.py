#!/usr/bin/env -S uv run --quiet --no-project --script
"""PreToolUse hook: forbid edits to linter configuration.

An agent stuck on a lint rule will sometimes try to disable it. Writes and
edits to ESLint/oxlint config files (matched on base name) are blocked
with a reason telling the agent to ask the user instead.

Hook docs: https://code.claude.com/docs/en/hooks#pretooluse
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
from sentinel_lib.handlers import handle_guard
from sentinel_lib.io import read_hook_input, write_output
from sentinel_lib.schemas.hooks import PreToolUseHookInput
from sentinel_lib.utils import configure_logging

boundary = ErrorBoundary(exit_code=1)


@boundary.handler(Exception)
def _handle_error(exc: Exception) -> None:
    print(f'lint-guard hook error: {exc}', file=sys.stderr)


@boundary
def main() -> None:
    configure_logging()
    write_output(handle_guard(read_hook_input(PreToolUseHookInput)))


if __name__ == '__main__':
    main()
