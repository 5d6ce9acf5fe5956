"""Tests for the disk- and subprocess-backed capability implementations."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from sentinel_lib.system import LocalFileSystem, SubprocessRunner


@pytest.fixture
def fs() -> LocalFileSystem:
    return LocalFileSystem()


def make_files(root: Path, *names: str) -> None:
    for name in names:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text('')


class TestGlob:
    def test_flat_pattern_stays_at_top_level(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        make_files(tmp_path, 'eslint.config.js', 'vite.config.ts', 'pkg/eslint.config.js', 'src/a.ts')
        assert fs.glob('*.config.*', tmp_path) == [tmp_path / 'eslint.config.js', tmp_path / 'vite.config.ts']

    def test_flat_pattern_skips_dotfiles(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        make_files(tmp_path, '.x.config.js', 'eslint.config.js')
        assert fs.glob('*.config.*', tmp_path) == [tmp_path / 'eslint.config.js']

    def test_recursive_pattern_includes_root_level(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        make_files(tmp_path, 'tsconfig.json', 'packages/web/tsconfig.app.json', 'packages/web/package.json')
        assert fs.glob('**/tsconfig*.json', tmp_path) == [
            tmp_path / 'packages/web/tsconfig.app.json',
            tmp_path / 'tsconfig.json',
        ]

    def test_recursive_pattern_prunes_dependency_and_git_dirs(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        make_files(tmp_path, 'tsconfig.json', 'node_modules/lib/tsconfig.json', '.git/tsconfig.json')
        assert fs.glob('**/tsconfig*.json', tmp_path) == [tmp_path / 'tsconfig.json']

    def test_no_matches(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        assert fs.glob('*.config.*', tmp_path) == []
        assert fs.glob('**/tsconfig*.json', tmp_path) == []


class TestFiles:
    def test_write_creates_parents_and_leaves_no_temp_file(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        target = tmp_path / '.claude' / 'state' / 'lint-attempts.json'

        fs.write_text(target, '{"a.ts": 1}')
        fs.write_text(target, '{"a.ts": 2}')

        assert fs.read_text(target) == '{"a.ts": 2}'
        assert list(target.parent.iterdir()) == [target]

    def test_undecodable_bytes_are_replaced(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        target = tmp_path / 'state.json'
        target.write_bytes(b'{"a.ts": 1\xff}')
        assert fs.read_text(target) == '{"a.ts": 1\ufffd}'

    def test_remove_missing_file(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        fs.remove(tmp_path / 'missing.json')

    def test_exists_and_mtime(self, fs: LocalFileSystem, tmp_path: Path) -> None:
        target = tmp_path / 'a.ts'
        assert not fs.exists(target)
        target.write_text('')
        assert fs.exists(target)
        assert fs.mtime(target) == target.stat().st_mtime


class TestSubprocessRunner:
    def test_captures_output_and_exit_code(self) -> None:
        code = 'import sys; print("out"); print("err", file=sys.stderr); sys.exit(3)'
        result = SubprocessRunner().run([sys.executable, '-c', code])
        assert (result.returncode, result.stdout, result.stderr) == (3, 'out\n', 'err\n')

    def test_undecodable_output_is_replaced(self) -> None:
        code = 'import sys; sys.stdout.buffer.write(b"ok\\xff")'
        result = SubprocessRunner().run([sys.executable, '-c', code])
        assert result.stdout == 'ok\ufffd'

    def test_env_overrides_are_merged(self, tmp_path: Path) -> None:
        code = 'import os; print(os.environ["ESLINT_IN_EDITOR"], os.getcwd())'
        result = SubprocessRunner().run([sys.executable, '-c', code], cwd=tmp_path, env={'ESLINT_IN_EDITOR': 'true'})
        value, cwd = result.stdout.split()
        assert value == 'true'
        assert Path(cwd).resolve() == tmp_path.resolve()

    def test_missing_program_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            SubprocessRunner().run([str(tmp_path / 'no-such-tool')])

    def test_spawn_detached_ignores_missing_program(self, tmp_path: Path) -> None:
        SubprocessRunner().spawn_detached([str(tmp_path / 'no-such-tool'), 'restart'])
