"""Change-set source: files the agent has touched since HEAD."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import git

__all__ = [
    'ChangeSource',
    'GitChangeSource',
]

logger = logging.getLogger(__name__)


class ChangeSource(Protocol):
    """Provides the current change set, relative to the project root."""

    def changed_files(self) -> list[str]: ...


class GitChangeSource:
    """Modified (non-deleted) tracked files plus untracked, non-ignored files."""

    def __init__(self, project_dir: Path) -> None:
        self._project_dir = project_dir

    def changed_files(self) -> list[str]:
        try:
            repo = git.Repo(self._project_dir, search_parent_directories=True)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError):
            return []

        try:
            changed = repo.git.diff('--name-only', '--diff-filter=d', 'HEAD').splitlines()
        except git.GitCommandError as e:
            # No HEAD yet in a fresh repo
            logger.warning('git diff failed, using untracked files only: %s', e)
            changed = []

        return [path for path in [*changed, *repo.untracked_files] if path]
