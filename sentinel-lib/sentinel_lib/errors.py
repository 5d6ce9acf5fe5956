"""Exception types raised across lint-sentinel.

Only HookInputError is allowed to reach a hook's process boundary. The
others are raised at tool call sites and converted to conservative
fallbacks by their callers.
"""

from __future__ import annotations

__all__ = [
    'DependencyGraphError',
    'HookInputError',
    'SentinelError',
]


class SentinelError(Exception):
    """Base class for lint-sentinel errors."""


class HookInputError(SentinelError):
    """The hook payload on stdin could not be read or validated."""


class DependencyGraphError(SentinelError):
    """The static-analysis tool failed to produce a usable import graph."""
