"""Stop-event decision: may the agent stop, or must it keep fixing?

Evaluated in precedence order:

1. Nothing failing: reset the stop counter if it is non-zero, else no-op.
2. Every failing file already hit the per-file attempt ceiling: no-op. The
   edit hook has told the agent to give up on those files, so blocking
   again would only loop.
3. The stop counter hit its ceiling: report the failures without blocking.
4. Otherwise block, and the caller increments the stop counter.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sentinel_lib.schemas.hooks import StopHookOutput
from sentinel_lib.settings import DEFAULT_MAX_STOP_ATTEMPTS
from sentinel_lib.state import AttemptsLedger
from sentinel_lib.types import CheckKind, StopAction

__all__ = [
    'StopDecision',
    'stop_decision',
]

_NOUNS: dict[CheckKind, tuple[str, str]] = {
    'lint': ('Lint errors', 'lint errors'),
    'type-check': ('Type errors', 'type errors'),
}


@dataclass(frozen=True)
class StopDecision:
    action: StopAction
    reason: str | None = None

    @property
    def increments_stop_counter(self) -> bool:
        # A terminal report leaves the counter alone; only blocks escalate
        return self.action == 'block'

    def to_output(self) -> StopHookOutput | None:
        """Hook response for this decision. A reset has nothing to say."""
        if self.reason is None:
            return None
        if self.action == 'block':
            return StopHookOutput(decision='block', reason=self.reason)
        return StopHookOutput(reason=self.reason, system_message=self.reason)


def stop_decision(
    error_files: Sequence[str],
    ledger: AttemptsLedger,
    max_lint_attempts: int,
    stop_attempts: int,
    max_stop_attempts: int = DEFAULT_MAX_STOP_ATTEMPTS,
    kind: CheckKind = 'lint',
) -> StopDecision | None:
    """Decide what a Stop event should do. None means let the agent stop quietly."""
    if not error_files:
        return StopDecision('reset') if stop_attempts > 0 else None

    if all(ledger.find(file) >= max_lint_attempts for file in error_files):
        return None

    title, noun = _NOUNS[kind]
    names = ', '.join(error_files)

    if stop_attempts >= max_stop_attempts:
        return StopDecision('report', f'Could not fix {noun} in: {names}')

    return StopDecision('block', f'{title} remain in: {names}. Fix them before stopping.')
