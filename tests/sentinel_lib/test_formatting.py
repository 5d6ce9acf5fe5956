"""Tests for diagnostic selection and hook response rendering."""

from __future__ import annotations

from sentinel_lib.formatting import (
    MAX_ERRORS,
    TypeErrorPartition,
    build_lint_output,
    build_type_check_output,
    partition_type_errors,
    select_error_lines,
    select_type_error_lines,
)

ESLINT_OUTPUT = """
/repo/src/a.ts
  1:7  error  'x' is assigned a value but never used  no-unused-vars
  2:1  warning  Unexpected console statement  no-console
  3:1  Error  Missing return type  explicit-function-return-type

2 problems (2 errors, 0 warnings)
"""


class TestSelectErrorLines:
    def test_case_insensitive_in_order(self) -> None:
        lines = select_error_lines(ESLINT_OUTPUT)
        assert lines == [
            "  1:7  error  'x' is assigned a value but never used  no-unused-vars",
            '  3:1  Error  Missing return type  explicit-function-return-type',
            '2 problems (2 errors, 0 warnings)',
        ]

    def test_capped(self) -> None:
        output = '\n'.join(f'{i}:1 error rule' for i in range(12))
        assert len(select_error_lines(output)) == MAX_ERRORS

    def test_type_errors_need_ts_code(self) -> None:
        output = "src/a.ts(1,1): error TS2322: Type 'string' is not assignable\nerror: something else"
        assert select_type_error_lines(output) == ["src/a.ts(1,1): error TS2322: Type 'string' is not assignable"]

    def test_uncapped(self) -> None:
        output = '\n'.join(f'a.ts(1,{i}): error TS1000: x' for i in range(8))
        assert len(select_type_error_lines(output, limit=None)) == 8


class TestBuildLintOutput:
    def test_under_cap_has_no_hint(self) -> None:
        output = build_lint_output('src/a.ts', ['1:1 error a'])
        assert output.system_message == '⚠️ Lint errors in src/a.ts:\n1:1 error a'
        assert output.hook_specific_output.additional_context == output.system_message

    def test_cap_reached_adds_hints(self) -> None:
        errors = [f'{i}:1 error rule' for i in range(MAX_ERRORS)]
        output = build_lint_output('src/a.ts', errors)
        assert output.system_message.endswith('\n...')
        assert output.hook_specific_output.additional_context.endswith('\n(run lint to view more)')

    def test_serializes_with_hook_aliases(self) -> None:
        output = build_lint_output('a.ts', ['error'])
        assert output.model_dump(by_alias=True, exclude_none=True) == {
            'systemMessage': '⚠️ Lint errors in a.ts:\nerror',
            'hookSpecificOutput': {
                'hookEventName': 'PostToolUse',
                'additionalContext': '⚠️ Lint errors in a.ts:\nerror',
            },
        }

    def test_agent_prefix(self) -> None:
        output = build_lint_output('a.ts', ['error']).with_agent_prefix('CRITICAL: stop')
        assert output.hook_specific_output.additional_context.startswith('CRITICAL: stop\n⚠️ Lint errors')
        assert not output.system_message.startswith('CRITICAL')


class TestTypeCheckOutput:
    LINES = [
        'src/a.ts(1,1): error TS2322: bad',
        'src/a.tsx(2,2): error TS2322: other file with shared prefix',
        'src/b.ts(3,3): error TS2304: missing name',
        'src/a.ts(4,1): error TS7006: implicit any',
    ]

    def test_partition_by_path_prefix(self) -> None:
        partition = partition_type_errors(self.LINES, 'src/a.ts')
        assert partition.in_file == [self.LINES[0], self.LINES[3]]
        assert partition.elsewhere == [self.LINES[1], self.LINES[2]]

    def test_partition_normalizes_backslashes(self) -> None:
        assert partition_type_errors(self.LINES, 'src\\b.ts').in_file == [self.LINES[2]]

    def test_sections_with_totals(self) -> None:
        output = build_type_check_output(partition_type_errors(self.LINES, 'src/a.ts'))
        assert output is not None
        assert output.system_message == (
            '2 type error(s) in edited file:\n'
            'src/a.ts(1,1): error TS2322: bad\n'
            'src/a.ts(4,1): error TS7006: implicit any\n'
            '\n'
            '2 type error(s) in other files:\n'
            'src/a.tsx(2,2): error TS2322: other file with shared prefix\n'
            'src/b.ts(3,3): error TS2304: missing name'
        )

    def test_only_other_files(self) -> None:
        output = build_type_check_output(TypeErrorPartition([], ['x.ts(1,1): error TS1: x']))
        assert output is not None
        assert output.system_message.startswith('1 type error(s) in other files:')

    def test_each_group_capped_with_true_total(self) -> None:
        lines = [f'src/a.ts({i},1): error TS1: x' for i in range(7)]
        output = build_type_check_output(partition_type_errors(lines, 'src/a.ts'))
        assert output is not None
        assert output.system_message.startswith('7 type error(s) in edited file:')
        assert output.system_message.count('error TS1') == MAX_ERRORS
        assert output.system_message.endswith('\n...')
        assert output.hook_specific_output.additional_context.endswith('\n(run typecheck to view more)')

    def test_no_errors(self) -> None:
        assert build_type_check_output(TypeErrorPartition([], [])) is None
