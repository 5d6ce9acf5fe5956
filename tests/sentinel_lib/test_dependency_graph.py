"""Tests for source-root discovery, madge graph loading and importer lookup."""

from __future__ import annotations

import json
import logging
import shlex
import sys
from pathlib import Path

import pytest
from sentinel_lib.dependency_graph import (
    find_entry_points,
    find_importers,
    find_source_root,
    get_dependency_graph,
    invert_graph,
)
from sentinel_lib.errors import DependencyGraphError
from sentinel_lib.system import LocalFileSystem, ProcessResult, SubprocessRunner

from tests.fakes import FakeRunner, MemoryFileSystem, timeout_error

GRAPH = {'app.ts': ['utils.ts'], 'utils.ts': []}


@pytest.fixture
def project() -> MemoryFileSystem:
    return MemoryFileSystem({
        '/repo/package.json': '{}',
        '/repo/src/index.ts': '',
        '/repo/src/app.ts': '',
        '/repo/src/utils.ts': '',
    })


def madge(graph: object) -> FakeRunner:
    return FakeRunner({'madge': ProcessResult(0, json.dumps(graph), '')})


class TestInvertGraph:
    def test_direct_importer(self) -> None:
        assert invert_graph(GRAPH, 'utils.ts') == ['app.ts']

    def test_no_importers(self) -> None:
        assert invert_graph(GRAPH, 'app.ts') == []

    def test_preserves_graph_order(self) -> None:
        graph = {'z.ts': ['a.ts'], 'b.ts': ['a.ts'], 'a.ts': []}
        assert invert_graph(graph, 'a.ts') == ['z.ts', 'b.ts']

    def test_one_hop_only(self) -> None:
        graph = {'top.ts': ['mid.ts'], 'mid.ts': ['leaf.ts'], 'leaf.ts': []}
        assert invert_graph(graph, 'leaf.ts') == ['mid.ts']


class TestFindSourceRoot:
    def test_prefers_src_directory(self, project: MemoryFileSystem) -> None:
        assert find_source_root(Path('/repo/src/app.ts'), project) == Path('/repo/src')

    def test_manifest_directory_without_src(self) -> None:
        fs = MemoryFileSystem({'/repo/pkg/package.json': '{}', '/repo/pkg/lib/a.ts': ''})
        assert find_source_root(Path('/repo/pkg/lib/a.ts'), fs) == Path('/repo/pkg')

    def test_nearest_manifest_wins(self) -> None:
        fs = MemoryFileSystem({'/repo/package.json': '{}', '/repo/packages/ui/package.json': '{}'})
        assert find_source_root(Path('/repo/packages/ui/button.ts'), fs) == Path('/repo/packages/ui')

    def test_no_manifest(self) -> None:
        assert find_source_root(Path('/repo/src/a.ts'), MemoryFileSystem()) is None


class TestFindEntryPoints:
    def test_candidate_order(self) -> None:
        fs = MemoryFileSystem({'/r/src/main.ts': '', '/r/src/index.ts': '', '/r/src/cli.ts': ''})
        assert find_entry_points(Path('/r/src'), fs) == [
            Path('/r/src/index.ts'),
            Path('/r/src/cli.ts'),
            Path('/r/src/main.ts'),
        ]

    def test_only_existing(self) -> None:
        fs = MemoryFileSystem({'/r/src/cli.ts': ''})
        assert find_entry_points(Path('/r/src'), fs) == [Path('/r/src/cli.ts')]


class TestGetDependencyGraph:
    def test_runs_madge_in_source_root(self) -> None:
        runner = madge(GRAPH)
        graph = get_dependency_graph(Path('/repo/src'), [Path('/repo/src/index.ts')], runner, 'pnpm exec')

        assert graph == GRAPH
        [call] = runner.calls
        assert call.args == ['pnpm', 'exec', 'madge', '--json', '/repo/src/index.ts']
        assert call.cwd == Path('/repo/src')

    @pytest.mark.parametrize(
        'response',
        [
            FileNotFoundError('pnpm'),
            timeout_error('madge'),
            ProcessResult(1, '', 'madge: command not found'),
            ProcessResult(0, 'not json', ''),
            ProcessResult(0, '["app.ts"]', ''),
        ],
        ids=['missing-binary', 'timeout', 'nonzero-exit', 'malformed-json', 'wrong-shape'],
    )
    def test_failures_raise(self, response: ProcessResult | BaseException) -> None:
        runner = FakeRunner({'madge': response})
        with pytest.raises(DependencyGraphError):
            get_dependency_graph(Path('/repo/src'), [Path('/repo/src/index.ts')], runner, 'pnpm exec')


class TestFindImporters:
    def test_returns_absolute_importers(self, project: MemoryFileSystem) -> None:
        importers = find_importers(Path('/repo/src/utils.ts'), project, madge(GRAPH), 'pnpm exec')
        assert importers == [Path('/repo/src/app.ts')]

    def test_unimported_file(self, project: MemoryFileSystem) -> None:
        assert find_importers(Path('/repo/src/app.ts'), project, madge(GRAPH), 'pnpm exec') == []

    def test_custom_runner_prefix(self, project: MemoryFileSystem) -> None:
        runner = madge(GRAPH)
        find_importers(Path('/repo/src/utils.ts'), project, runner, 'bunx')
        assert runner.calls[0].args[:2] == ['bunx', 'madge']

    def test_no_manifest_skips_madge(self) -> None:
        runner = madge(GRAPH)
        assert find_importers(Path('/tmp/a.ts'), MemoryFileSystem(), runner, 'pnpm exec') == []
        assert runner.calls == []

    def test_no_entry_points_skips_madge(self) -> None:
        fs = MemoryFileSystem({'/repo/package.json': '{}', '/repo/src/utils.ts': ''})
        runner = madge(GRAPH)
        assert find_importers(Path('/repo/src/utils.ts'), fs, runner, 'pnpm exec') == []
        assert runner.calls == []

    def test_tool_failure_fails_open(self, project: MemoryFileSystem, caplog: pytest.LogCaptureFixture) -> None:
        runner = FakeRunner({'madge': timeout_error('madge')})
        with caplog.at_level(logging.WARNING):
            assert find_importers(Path('/repo/src/utils.ts'), project, runner, 'pnpm exec') == []
        assert 'Skipping importer invalidation' in caplog.text

    def test_nested_target_path(self, project: MemoryFileSystem) -> None:
        graph = {'app.ts': ['lib/math.ts'], 'lib/math.ts': []}
        importers = find_importers(Path('/repo/src/lib/math.ts'), project, madge(graph), 'pnpm exec')
        assert importers == [Path('/repo/src/app.ts')]


class TestRealGraphTool:
    """Graph output from an actual child process, decoded by SubprocessRunner."""

    @pytest.fixture
    def project(self, tmp_path: Path) -> Path:
        (tmp_path / 'package.json').write_text('{}')
        (tmp_path / 'src').mkdir()
        for name in ('index.ts', 'app.ts', 'utils.ts'):
            (tmp_path / 'src' / name).write_text('')
        return tmp_path

    def fake_madge(self, tmp_path: Path, output: bytes) -> str:
        script = tmp_path / 'fake_madge.py'
        script.write_text(f'import sys\nsys.stdout.buffer.write({output!r})\n')
        return f'{shlex.quote(sys.executable)} {shlex.quote(str(script))}'

    def test_graph_is_read(self, project: Path) -> None:
        prefix = self.fake_madge(project, json.dumps(GRAPH).encode())
        importers = find_importers(project / 'src' / 'utils.ts', LocalFileSystem(), SubprocessRunner(), prefix)
        assert importers == [project / 'src' / 'app.ts']

    def test_undecodable_output_fails_open(self, project: Path) -> None:
        prefix = self.fake_madge(project, b'\xff')
        assert find_importers(project / 'src' / 'utils.ts', LocalFileSystem(), SubprocessRunner(), prefix) == []
