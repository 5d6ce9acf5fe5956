"""Per-project hook settings.

Settings live in the frontmatter of ``.claude/sentinel.local.md``::

    ---
    lint: true
    oxlint: true
    runner: "bunx"
    max-lint-attempts: 5
    cache-bust: "cspell.config.yaml, !vitest.config.ts"
    ---

Values are plain ``key: value`` lines, not YAML: glob patterns such as
``*.config.*`` would be YAML aliases. A missing file, missing frontmatter or
unknown key leaves the defaults in place.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from pathlib import Path

from sentinel_lib.paths import SETTINGS_FILE
from sentinel_lib.schemas.hooks import StrictModel
from sentinel_lib.system import FileSystem

__all__ = [
    'DEFAULT_CACHE_BUST',
    'DEFAULT_MAX_LINT_ATTEMPTS',
    'DEFAULT_MAX_STOP_ATTEMPTS',
    'DEFAULT_RUNNER',
    'Settings',
    'load_settings',
    'parse_frontmatter',
]

logger = logging.getLogger(__name__)

DEFAULT_CACHE_BUST = ('*.config.*', '**/tsconfig*.json')
DEFAULT_MAX_LINT_ATTEMPTS = 3
DEFAULT_MAX_STOP_ATTEMPTS = 3
DEFAULT_RUNNER = 'pnpm exec'

_FRONTMATTER_RE = re.compile(r'^---\n(.*?)\n---', re.DOTALL | re.MULTILINE)
_QUOTES_RE = re.compile(r'^["\']|["\']$')


class Settings(StrictModel):
    """Resolved hook settings."""

    lint: bool = True
    eslint: bool = True
    oxlint: bool = False
    typecheck: bool = True
    runner: str = DEFAULT_RUNNER
    max_lint_attempts: int = DEFAULT_MAX_LINT_ATTEMPTS
    max_stop_attempts: int = DEFAULT_MAX_STOP_ATTEMPTS
    cache_bust: tuple[str, ...] = DEFAULT_CACHE_BUST


def load_settings(project_dir: Path, fs: FileSystem) -> Settings:
    """Read settings for a project, falling back to defaults."""
    path = project_dir / SETTINGS_FILE
    if not fs.exists(path):
        return Settings()

    fields = parse_frontmatter(fs.read_text(path))
    return Settings(
        lint=fields.get('lint') != 'false',
        eslint=fields.get('eslint') != 'false',
        oxlint=fields.get('oxlint') == 'true',
        typecheck=fields.get('typecheck') != 'false',
        runner=fields.get('runner') or DEFAULT_RUNNER,
        max_lint_attempts=_int_field(fields, 'max-lint-attempts', DEFAULT_MAX_LINT_ATTEMPTS),
        max_stop_attempts=_int_field(fields, 'max-stop-attempts', DEFAULT_MAX_STOP_ATTEMPTS),
        cache_bust=(*DEFAULT_CACHE_BUST, *_list_field(fields, 'cache-bust')),
    )


def parse_frontmatter(content: str) -> Mapping[str, str]:
    """Extract ``key: value`` pairs from the first ``---`` block.

    The opening ``---`` may sit on any line, as long as it starts the line.

    Keys and values are trimmed and one layer of surrounding quotes is
    stripped. Lines without a colon (or with nothing before it) are skipped.
    """
    match = _FRONTMATTER_RE.search(content)
    if match is None:
        return {}

    fields: dict[str, str] = {}
    for line in match.group(1).split('\n'):
        key, sep, value = line.partition(':')
        if not sep or not key.strip():
            continue
        fields[key.strip()] = _QUOTES_RE.sub('', value.strip())
    return fields


def _int_field(fields: Mapping[str, str], key: str, default: int) -> int:
    raw = fields.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning('Ignoring non-integer %s=%r in %s', key, raw, SETTINGS_FILE)
        return default


def _list_field(fields: Mapping[str, str], key: str) -> list[str]:
    entries = (_QUOTES_RE.sub('', entry.strip()) for entry in fields.get(key, '').split(','))
    return [entry for entry in entries if entry]
