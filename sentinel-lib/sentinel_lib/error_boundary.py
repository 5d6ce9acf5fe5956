"""Process-level error boundary for hook entry points.

Errors a hook expects (a linter failing, a corrupt state file, a missing
graph tool) are handled where they occur and never get here. What reaches
the boundary is either a HookInputError (Claude Code sent something we
cannot read) or a genuine bug. Both end the process with a non-zero exit
code and a message on stderr, which Claude Code shows to the user.

System exceptions (KeyboardInterrupt, SystemExit) are not Exception
subclasses and pass straight through.

Usage::

    boundary = ErrorBoundary(exit_code=1)

    @boundary.handler(HookInputError)
    def handle_input(exc: HookInputError) -> None:
        print(exc, file=sys.stderr)

    @boundary
    def main() -> None:
        ...
"""

from __future__ import annotations

__all__ = [
    'ErrorBoundary',
    'ErrorHandler',
]

import functools
import logging
import sys
import traceback
from collections.abc import Callable
from functools import singledispatch
from types import TracebackType
from typing import Any, Self, TypeVar, cast

type ErrorHandler = Callable[[Exception], None]

_F = TypeVar('_F', bound=Callable[..., object])

logger = logging.getLogger(__name__)


class ErrorBoundary:
    """Catch application exceptions and dispatch them to handlers by type.

    Handlers are matched by MRO via ``functools.singledispatch``, so one
    registered for ``Exception`` is the catch-all. Without any, the
    traceback is printed to stderr.

    Args:
        handler: Catch-all handler, same as ``@boundary.handler(Exception)``.
        exit_code: Exit code after handling. ``None`` suppresses the
            exception and continues instead.
    """

    def __init__(self, *, handler: ErrorHandler | None = None, exit_code: int | None = 1) -> None:
        self._dispatch = singledispatch(_default_handler)
        if handler is not None:
            self._dispatch.register(Exception, handler)
        self._exit_code = exit_code

    def handler(self, exc_type: type[Exception]) -> Callable[[Callable[..., None]], Callable[..., None]]:
        """Register a handler for `exc_type` and its subclasses."""
        return self._dispatch.register(exc_type)

    def __call__(self, func: _F) -> _F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with self:
                return func(*args, **kwargs)

        return cast(_F, wrapper)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool:
        if not isinstance(exc_value, Exception):
            return False

        try:
            self._dispatch(exc_value)
        except Exception:
            # A broken handler must not hide the original error
            logger.exception('Error handler failed')
            _default_handler(exc_value)

        if self._exit_code is not None:
            sys.exit(self._exit_code)
        return True


def _default_handler(exc: Exception) -> None:
    traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
