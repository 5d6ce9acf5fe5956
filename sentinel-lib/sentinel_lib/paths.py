"""Centralized file paths for lint-sentinel.

Every persisted location is relative to the project directory, so hooks
running for different projects never share state.
"""

from __future__ import annotations

import os
from pathlib import Path

__all__ = [
    'ESLINT_CACHE',
    'LINT_ATTEMPTS',
    'SETTINGS_FILE',
    'STATE_DIR',
    'STOP_ATTEMPTS',
    'TSCONFIG_CACHE',
    'TYPECHECK_STOP_ATTEMPTS',
    'resolve_project_dir',
]

# Project-relative locations
SETTINGS_FILE = Path('.claude') / 'sentinel.local.md'
STATE_DIR = Path('.claude') / 'state'

# Persisted hook state (see StateStore)
LINT_ATTEMPTS = STATE_DIR / 'lint-attempts.json'
STOP_ATTEMPTS = STATE_DIR / 'stop-attempts.json'
TYPECHECK_STOP_ATTEMPTS = STATE_DIR / 'typecheck-stop-attempts.json'
TSCONFIG_CACHE = STATE_DIR / 'tsconfig-cache.json'

# Owned by ESLint; we only evict entries or delete it
ESLINT_CACHE = Path('.eslintcache')


def resolve_project_dir() -> Path:
    """Project root for this hook invocation.

    Claude Code exports CLAUDE_PROJECT_DIR to hook processes; fall back to the
    working directory when run by hand.
    """
    return Path(os.environ.get('CLAUDE_PROJECT_DIR') or Path.cwd())
