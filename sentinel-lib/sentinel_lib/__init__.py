"""lint-sentinel: Claude Code hooks that gate agent edits on lint and type checks."""

from __future__ import annotations

from sentinel_lib.context import HookContext, open_context
from sentinel_lib.error_boundary import ErrorBoundary, ErrorHandler
from sentinel_lib.settings import Settings, load_settings

__all__ = [
    'ErrorBoundary',
    'ErrorHandler',
    'HookContext',
    'Settings',
    'load_settings',
    'open_context',
]
