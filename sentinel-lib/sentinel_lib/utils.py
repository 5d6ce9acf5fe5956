"""Shared utilities for the hook scripts."""

from __future__ import annotations

import logging
import os
import sys
import time

__all__ = [
    'LOG_FORMAT',
    'LOG_LEVEL_ENV',
    'Timer',
    'configure_logging',
]

LOG_LEVEL_ENV = 'SENTINEL_LOG_LEVEL'
LOG_FORMAT = '%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s'


class Timer:
    """Simple stopwatch-style timer for measuring elapsed time."""

    def __init__(self) -> None:
        self._start = time.perf_counter()

    def elapsed(self) -> float:
        """Return elapsed time in seconds."""
        return time.perf_counter() - self._start

    def elapsed_ms(self) -> int:
        """Return elapsed time in milliseconds."""
        return int(self.elapsed() * 1000)


def configure_logging() -> None:
    """Log to stderr. Stdout belongs to the hook protocol."""
    level = os.environ.get(LOG_LEVEL_ENV, 'WARNING').upper()
    logging.basicConfig(
        level=logging.getLevelNamesMapping().get(level, logging.WARNING),
        format=LOG_FORMAT,
        datefmt='%H:%M:%S',
        stream=sys.stderr,
    )
