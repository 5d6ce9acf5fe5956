"""Shared type aliases for lint-sentinel."""

from typing import Literal

# module path (relative to source root, '/'-separated) -> its static imports
type DependencyGraph = dict[str, list[str]]

# file path -> consecutive failed lint attempts
type AttemptsMap = dict[str, int]

type CheckKind = Literal['lint', 'type-check']
type StopAction = Literal['reset', 'report', 'block']
type InvalidationMode = Literal['bust', 'selective', 'skipped']
