"""File classification by name."""

from __future__ import annotations

from collections.abc import Iterable

__all__ = [
    'LINTABLE_EXTENSIONS',
    'PROTECTED_PREFIXES',
    'TYPE_CHECK_EXTENSIONS',
    'is_lintable_file',
    'is_protected_file',
    'is_type_checkable',
]

LINTABLE_EXTENSIONS = ('.ts', '.tsx', '.js', '.jsx', '.mjs', '.mts')
TYPE_CHECK_EXTENSIONS = ('.ts', '.tsx')

# Linter configs the agent must not edit to silence a rule
PROTECTED_PREFIXES = ('eslint.config.', 'oxlint.config.', '.eslintrc', '.oxlintrc.')


def is_lintable_file(file_path: str, extensions: Iterable[str] = LINTABLE_EXTENSIONS) -> bool:
    return file_path.endswith(tuple(extensions))


def is_type_checkable(file_path: str) -> bool:
    return file_path.endswith(TYPE_CHECK_EXTENSIONS)


def is_protected_file(file_name: str) -> bool:
    """True for linter config file names. Expects a basename, not a path."""
    return file_name.startswith(PROTECTED_PREFIXES)
