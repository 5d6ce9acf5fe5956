"""Shared fixtures: a fake project at /repo wired to in-memory capabilities."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from sentinel_lib.context import HookContext, open_context
from sentinel_lib.settings import Settings

from tests.fakes import FakeRunner, MemoryFileSystem, StaticChangeSource

PROJECT = Path('/repo')


@pytest.fixture
def fs() -> MemoryFileSystem:
    return MemoryFileSystem()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def changes() -> StaticChangeSource:
    return StaticChangeSource()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def ctx(
    fs: MemoryFileSystem,
    runner: FakeRunner,
    changes: StaticChangeSource,
    settings: Settings,
) -> Generator[HookContext]:
    """Open context over /repo. State is flushed when the test finishes."""
    with open_context(PROJECT, fs=fs, runner=runner, changes=changes, settings=settings) as context:
        yield context
