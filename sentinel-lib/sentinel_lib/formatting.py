"""Render linter and type-checker output as hook responses.

Each response carries the same capped error list twice: ``systemMessage``
for the user and ``additionalContext`` for the agent. Only the truncation
hint differs, since the agent can act on "run X to view more".
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from sentinel_lib.schemas.hooks import PostToolUseContext, PostToolUseHookOutput

__all__ = [
    'MAX_ERRORS',
    'TypeErrorPartition',
    'build_lint_output',
    'build_type_check_output',
    'partition_type_errors',
    'select_error_lines',
    'select_type_error_lines',
]

MAX_ERRORS = 5

_LINT_ERROR_RE = re.compile(r'error', re.IGNORECASE)
_TYPE_ERROR_RE = re.compile(r'error TS', re.IGNORECASE)

_USER_HINT = '\n...'
_LINT_AGENT_HINT = '\n(run lint to view more)'
_TYPE_AGENT_HINT = '\n(run typecheck to view more)'


def select_error_lines(output: str, limit: int | None = MAX_ERRORS) -> list[str]:
    lines = [line for line in output.split('\n') if _LINT_ERROR_RE.search(line)]
    return lines[:limit]


def select_type_error_lines(output: str, limit: int | None = MAX_ERRORS) -> list[str]:
    lines = [line for line in output.split('\n') if _TYPE_ERROR_RE.search(line)]
    return lines[:limit]


def build_lint_output(file_path: str, errors: Sequence[str]) -> PostToolUseHookOutput:
    """Lint diagnostics for `file_path`. `errors` is already capped."""
    body = f'⚠️ Lint errors in {file_path}:\n' + '\n'.join(errors)
    truncated = len(errors) >= MAX_ERRORS
    return _render(body, truncated, _LINT_AGENT_HINT)


@dataclass(frozen=True)
class TypeErrorPartition:
    """tsgo error lines split by whether they point at the edited file."""

    in_file: list[str]
    elsewhere: list[str]


def partition_type_errors(lines: Sequence[str], relative_path: str) -> TypeErrorPartition:
    """Split error lines on their ``<path>(line,col)`` prefix.

    `relative_path` is the edited file relative to the project root, which is
    how tsgo reports locations with ``--pretty false``.
    """
    prefix = relative_path.replace('\\', '/') + '('
    in_file = [line for line in lines if line.startswith(prefix)]
    elsewhere = [line for line in lines if not line.startswith(prefix)]
    return TypeErrorPartition(in_file, elsewhere)


def build_type_check_output(partition: TypeErrorPartition) -> PostToolUseHookOutput | None:
    """Type-check diagnostics with the edited file's errors first.

    Each group is capped separately. Returns None if there are no errors.
    """
    sections: list[str] = []
    truncated = False
    for errors, where in ((partition.in_file, 'edited file'), (partition.elsewhere, 'other files')):
        if not errors:
            continue
        shown = errors[:MAX_ERRORS]
        truncated = truncated or len(errors) > MAX_ERRORS
        sections.append(f'{len(errors)} type error(s) in {where}:\n' + '\n'.join(shown))

    if not sections:
        return None
    return _render('\n\n'.join(sections), truncated, _TYPE_AGENT_HINT)


def _render(body: str, truncated: bool, agent_hint: str) -> PostToolUseHookOutput:
    return PostToolUseHookOutput(
        system_message=body + (_USER_HINT if truncated else ''),
        hook_specific_output=PostToolUseContext(
            additional_context=body + (agent_hint if truncated else ''),
        ),
    )
