"""Pydantic schemas for lint-sentinel."""

from __future__ import annotations

from sentinel_lib.schemas.hooks import (
    BlockOutput,
    HookInput,
    PostToolUseContext,
    PostToolUseHookInput,
    PostToolUseHookOutput,
    PreToolUseHookInput,
    StopHookInput,
    StopHookOutput,
    StrictModel,
)

__all__ = [
    'BlockOutput',
    'HookInput',
    'PostToolUseContext',
    'PostToolUseHookInput',
    'PostToolUseHookOutput',
    'PreToolUseHookInput',
    'StopHookInput',
    'StopHookOutput',
    'StrictModel',
]
