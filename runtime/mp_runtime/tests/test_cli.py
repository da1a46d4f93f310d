"""
Test suite for the mp command line driver
"""

import io
import logging
import pytest
import sys
import os

# Add grandparent directory to path for imports (to find mp_runtime package)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from mp_runtime import cli
from mp_runtime.errors import MpTypeError, Span


@pytest.fixture
def program(tmp_path):
    """Write source to a temporary .mp file and return its path"""
    def write(source):
        path = tmp_path / 'main.mp'
        path.write_text(source, encoding='utf-8')
        return str(path)
    return write


class TestRunFile:
    """Test running a source file"""

    def test_success(self, program, capsys):
        assert cli.main([program('print(1 + 2);')]) == 0
        assert capsys.readouterr().out == '3\n'

    def test_runtime_error(self, program, capsys):
        path = program('print("first");\nlen(42);')
        assert cli.main([path]) == 1
        captured = capsys.readouterr()
        assert captured.out == 'first\n'
        assert '[E_TYPE_ERROR] len() expects a string or array, got number' in captured.err
        assert 'len(42);' in captured.err

    def test_parse_error(self, program, capsys):
        assert cli.main([program('let = 1;')]) == 1
        assert '[E_PARSE_ERROR]' in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert cli.main([str(tmp_path / 'absent.mp')]) == 1
        assert 'cannot read' in capsys.readouterr().err

    def test_echo(self, program, capsys):
        assert cli.main([program('fn f() { 41 + 1 } f()'), '--echo']) == 0
        assert capsys.readouterr().out == '42\n'

    def test_while_yields(self, program, capsys):
        path = program('let i = 0; while (i < 2) { i = i + 1; i }')
        assert cli.main([path, '--while-yields', '--echo']) == 0
        assert capsys.readouterr().out == '[1, 2]\n'

    def test_echo_from_environment(self, program, capsys, monkeypatch):
        monkeypatch.setenv('MP_ECHO_RESULT', 'yes')
        assert cli.main([program('"hi"')]) == 0
        assert capsys.readouterr().out == 'hi\n'

    def test_recursion_limit(self, program, monkeypatch):
        limits = []
        monkeypatch.setattr(sys, 'setrecursionlimit', limits.append)
        assert cli.main([program('1'), '--recursion-limit', '5000']) == 0
        assert limits == [5000]

    def test_verbose_logs_debug(self, program, caplog):
        caplog.set_level(logging.DEBUG, logger='mp_runtime')
        assert cli.main([program('1'), '-v']) == 0
        assert 'running program' in caplog.text

    def test_deep_nesting(self, program, capsys):
        assert cli.main([program('print(' + '(' * 5000 + '1' + ')' * 5000 + ');')]) == 1
        captured = capsys.readouterr()
        assert captured.out == ''
        assert '[E_RESOURCE_ERROR]' in captured.err


class TestRunStdin:
    """Test reading the program from stdin"""

    def test_program_from_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, 'stdin', io.StringIO('print("from stdin");'))
        assert cli.main([]) == 0
        assert capsys.readouterr().out == 'from stdin\n'

    def test_input_sees_end_of_stream(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, 'stdin', io.StringIO('input();'))
        assert cli.main([]) == 1
        assert '[E_IO_ERROR]' in capsys.readouterr().err


class TestDiagnose:
    """Test the source excerpt under error messages"""

    def test_excerpt(self):
        text = cli.diagnose('let a = 1;\nlen(42);', MpTypeError('bad', Span(2, 4)))
        lines = text.splitlines()
        assert lines[0] == '  len(42);'
        assert lines[1].startswith('     ')
        assert '^' in lines[1]

    def test_no_span(self):
        assert cli.diagnose('1', MpTypeError('bad')) is None
