"""Claude Code hook input/output schemas used by the sentinel hooks.

See: https://code.claude.com/docs/en/hooks
"""

from __future__ import annotations

from typing import Any, Literal

import pydantic

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


class StrictModel(pydantic.BaseModel):
    """Base model with strict validation."""

    model_config = pydantic.ConfigDict(
        extra='forbid',  # Reject unknown fields (fail-fast)
        strict=True,  # Strict type coercion
        frozen=True,  # Immutable after creation
    )


class HookInput(pydantic.BaseModel):
    """Fields common to every hook payload.

    Claude Code owns this schema and adds fields between releases, so unknown
    fields are ignored rather than rejected. A hook that cannot parse its
    input fails hard, and failing on every new field would wedge the session.
    """

    model_config = pydantic.ConfigDict(extra='ignore', frozen=True)

    session_id: str | None = None
    cwd: str | None = None
    transcript_path: str | None = None
    hook_event_name: str | None = None
    permission_mode: str | None = None


class PreToolUseHookInput(HookInput):
    """PreToolUse hook input schema.

    See: https://code.claude.com/docs/en/hooks#pretooluse
    """

    tool_name: str
    tool_input: dict[str, Any]
    tool_use_id: str | None = None


class PostToolUseHookInput(HookInput):
    """PostToolUse hook input schema.

    See: https://code.claude.com/docs/en/hooks#posttooluse
    """

    tool_name: str
    tool_input: dict[str, Any]
    tool_response: Any = None
    tool_use_id: str | None = None

    @property
    def file_path(self) -> str | None:
        """Target of a Write/Edit call, if the tool input names one."""
        value = self.tool_input.get('file_path')
        return value if isinstance(value, str) and value else None


class StopHookInput(HookInput):
    """Stop hook input schema.

    See: https://code.claude.com/docs/en/hooks#stop
    """

    stop_hook_active: bool = False


# --- Outputs ---


class PostToolUseContext(StrictModel):
    """hookSpecificOutput block of a PostToolUse response."""

    model_config = pydantic.ConfigDict(populate_by_name=True)

    hook_event_name: Literal['PostToolUse'] = pydantic.Field(default='PostToolUse', alias='hookEventName')
    additional_context: str = pydantic.Field(alias='additionalContext')


class PostToolUseHookOutput(StrictModel):
    """PostToolUse output. Serialize with model_dump_json(by_alias=True, exclude_none=True).

    systemMessage is shown to the user; additionalContext is fed to the agent.
    """

    model_config = pydantic.ConfigDict(populate_by_name=True)

    system_message: str = pydantic.Field(alias='systemMessage')
    hook_specific_output: PostToolUseContext = pydantic.Field(alias='hookSpecificOutput')

    def with_agent_prefix(self, prefix: str) -> PostToolUseHookOutput:
        """Copy with `prefix` prepended to the agent-facing context."""
        context = self.hook_specific_output
        return PostToolUseHookOutput(
            system_message=self.system_message,
            hook_specific_output=PostToolUseContext(
                additional_context=f'{prefix}\n{context.additional_context}',
            ),
        )


class BlockOutput(StrictModel):
    """Top-level block decision (PreToolUse guard)."""

    decision: Literal['block'] = 'block'
    reason: str


class StopHookOutput(StrictModel):
    """Stop hook response.

    With decision='block' Claude Code refuses to stop and feeds `reason` back
    to the agent. Without a decision the message is informational only.
    """

    model_config = pydantic.ConfigDict(populate_by_name=True)

    decision: Literal['block'] | None = None
    reason: str
    system_message: str | None = pydantic.Field(default=None, alias='systemMessage')
