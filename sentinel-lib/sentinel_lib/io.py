"""Hook stdin/stdout framing."""

from __future__ import annotations

import sys
from typing import TextIO

import pydantic

from sentinel_lib.errors import HookInputError

__all__ = [
    'read_hook_input',
    'write_output',
]


def read_hook_input[M: pydantic.BaseModel](model: type[M], stream: TextIO | None = None) -> M:
    """Read one JSON payload from stdin and validate it as `model`.

    Raises:
        HookInputError: If stdin cannot be read or does not match `model`
    """
    stream = stream or sys.stdin
    try:
        raw = stream.read()
    except (OSError, UnicodeDecodeError) as e:
        raise HookInputError(f'Failed to read hook input: {e}') from e

    try:
        return model.model_validate_json(raw)
    except pydantic.ValidationError as e:
        raise HookInputError(f'Failed to parse hook input: {e}') from e


def write_output(output: pydantic.BaseModel | None, stream: TextIO | None = None) -> None:
    """Print the response as a single JSON line. None prints nothing."""
    if output is None:
        return
    print(output.model_dump_json(by_alias=True, exclude_none=True), file=stream or sys.stdout)
