"""Hook handlers: one function per hook, independent of stdin/stdout.

Each takes validated input plus a HookContext and returns the response
model to print, or None to stay silent.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePath

from sentinel_lib.classify import is_lintable_file, is_protected_file, is_type_checkable
from sentinel_lib.context import HookContext
from sentinel_lib.decision import StopDecision, stop_decision
from sentinel_lib.lint import find_lint_error_files, lint_file
from sentinel_lib.schemas.hooks import (
    BlockOutput,
    PostToolUseHookInput,
    PostToolUseHookOutput,
    PreToolUseHookInput,
    StopHookOutput,
)
from sentinel_lib.state import StateStore
from sentinel_lib.system import FileSystem
from sentinel_lib.type_check import find_type_error_files, type_check_file
from sentinel_lib.types import CheckKind

__all__ = [
    'EDIT_TOOLS',
    'GUARD_REASON',
    'clear_state',
    'handle_guard',
    'handle_lint_edit',
    'handle_lint_stop',
    'handle_type_check_edit',
    'handle_type_check_stop',
]

logger = logging.getLogger(__name__)

EDIT_TOOLS = frozenset({'Write', 'Edit'})

GUARD_REASON = 'Modifying linter config is forbidden. Report to user if a rule blocks your task.'


def handle_lint_edit(ctx: HookContext, hook_input: PostToolUseHookInput) -> PostToolUseHookOutput | None:
    """Lint the written file and track consecutive failures.

    Once a file has failed `max_lint_attempts` times in a row, the agent is
    told to stop editing it and hand the problem to the user.
    """
    file_path = hook_input.file_path
    if hook_input.tool_name not in EDIT_TOOLS or file_path is None:
        return None

    ledger = ctx.state.ledger
    result = lint_file(ctx, file_path, ['--fix'])
    if result is None:
        ledger.record_pass(file_path)
        return None

    count = ledger.record_failure(file_path)
    logger.info('%s failed linting (attempt %d)', file_path, count)
    if count >= ctx.settings.max_lint_attempts:
        return result.with_agent_prefix(
            f'CRITICAL: {file_path} failed linting {count} times. '
            'STOP editing this file and report lint errors to user.'
        )
    return result


def handle_lint_stop(ctx: HookContext) -> StopHookOutput | None:
    files = [file for file in ctx.changes.changed_files() if is_lintable_file(file)]
    error_files = find_lint_error_files(ctx, files)
    return _apply_stop_decision(ctx, error_files, 'lint')


def handle_type_check_edit(ctx: HookContext, hook_input: PostToolUseHookInput) -> PostToolUseHookOutput | None:
    file_path = hook_input.file_path
    if hook_input.tool_name not in EDIT_TOOLS or file_path is None:
        return None
    return type_check_file(ctx, file_path)


def handle_type_check_stop(ctx: HookContext) -> StopHookOutput | None:
    files = [file for file in ctx.changes.changed_files() if is_type_checkable(file)]
    error_files = find_type_error_files(ctx, files)
    return _apply_stop_decision(ctx, error_files, 'type-check')


def handle_guard(hook_input: PreToolUseHookInput) -> BlockOutput | None:
    """Block writes to linter config files. Only the base name is checked."""
    if hook_input.tool_name not in EDIT_TOOLS:
        return None

    file_path = hook_input.tool_input.get('file_path')
    if not isinstance(file_path, str) or not is_protected_file(PurePath(file_path).name):
        return None
    return BlockOutput(reason=GUARD_REASON)


def clear_state(project_dir: Path, fs: FileSystem) -> None:
    """Forget lint attempts and both stop counters, e.g. at session boundaries."""
    with StateStore(project_dir, fs) as state:
        state.clear()


def _apply_stop_decision(ctx: HookContext, error_files: list[str], kind: CheckKind) -> StopHookOutput | None:
    counter = ctx.state.stop_counter(kind)
    decision: StopDecision | None = stop_decision(
        error_files,
        ctx.state.ledger,
        ctx.settings.max_lint_attempts,
        counter.value,
        ctx.settings.max_stop_attempts,
        kind,
    )
    if decision is None:
        return None

    logger.info('%s stop decision: %s (stop attempts %d)', kind, decision.action, counter.value)
    if decision.action == 'reset':
        counter.reset()
    elif decision.increments_stop_counter:
        counter.increment()
    return decision.to_output()
