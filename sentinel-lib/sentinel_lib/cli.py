"""sentinel-lint: lint whole targets with the project's hook settings.

Usage:
    sentinel-lint [TARGET ...] [LINTER FLAGS ...]

Targets default to the current directory. Unrecognized options are passed
through to the linters after ``--color``, which is always passed.
Diagnostics go to stderr and the exit code is 1 if any linter failed.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from sentinel_lib.context import open_context
from sentinel_lib.error_boundary import ErrorBoundary
from sentinel_lib.lint import lint_targets
from sentinel_lib.paths import resolve_project_dir
from sentinel_lib.utils import Timer, configure_logging

__all__ = [
    'main',
    'strip_config_noise',
]

logger = logging.getLogger(__name__)

DEFAULT_FLAGS = ('--color',)


def strip_config_noise(output: str) -> str:
    """Drop ``[``-prefixed lines (linter config chatter) and trim."""
    return '\n'.join(line for line in output.split('\n') if not line.startswith('[')).strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='sentinel-lint',
        description='Lint files with the linters enabled in .claude/sentinel.local.md.',
    )
    parser.add_argument('targets', nargs='*', default=['.'], help='files or directories (default: .)')
    return parser


@ErrorBoundary(exit_code=2)
def main(argv: Sequence[str] | None = None) -> None:
    configure_logging()
    timer = Timer()

    args, flags = build_parser().parse_known_args(argv)
    with open_context(resolve_project_dir()) as ctx:
        outputs = lint_targets(ctx, args.targets, [*DEFAULT_FLAGS, *flags])

    for output in outputs:
        filtered = strip_config_noise(output)
        if filtered:
            print(filtered, file=sys.stderr)

    logger.debug('Linted %d target(s) in %d ms', len(args.targets), timer.elapsed_ms())
    if outputs:
        sys.exit(1)


if __name__ == '__main__':
    main()
