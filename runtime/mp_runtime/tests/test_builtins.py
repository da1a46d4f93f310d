"""
Test suite for Mp builtins and host I/O
"""

import io
import pytest
import sys
import os

# Add grandparent directory to path for imports (to find mp_runtime package)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from mp_runtime import BufferedHost, ConsoleHost, MpRuntime
from mp_runtime.builtins_table import make_builtins
from mp_runtime.errors import (
    ArityError, MpArithmeticError, MpIndexError, MpIOError, MpNameError, MpTypeError,
)
from mp_runtime.values import BuiltinFunction


class TestPrint:
    """Test print()"""

    def test_print_writes_display_form(self, runtime, host):
        runtime.execute('print(1); print(2.5); print(3.0); print("s"); print(true); print(nil);')
        assert host.lines == ['1', '2.5', '3.0', 's', 'true', 'nil']

    def test_print_returns_nil(self, runtime):
        assert runtime.execute('print("x")') is None

    def test_print_array(self, runtime, host):
        runtime.execute('print([1, "a", [true, nil]]);')
        assert host.lines == ['[1, a, [true, nil]]']

    def test_print_functions(self, runtime, host):
        runtime.execute('fn f() { } let g = fn () { }; print(f); print(g); print(fn () { }); print(len);')
        assert host.lines == ['<fn f>', '<fn g>', '<fn>', '<builtin len>']

    def test_print_arity(self, runtime):
        with pytest.raises(ArityError):
            runtime.execute('print(1, 2)')


class TestInput:
    """Test input()"""

    def test_input_reads_line(self):
        runtime = MpRuntime(host=BufferedHost(inputs=['alice', 'bob']))
        assert runtime.execute('let a = input(); let b = input(); a + " and " + b') == 'alice and bob'

    def test_input_at_end_of_stream(self):
        runtime = MpRuntime(host=BufferedHost())
        with pytest.raises(MpIOError):
            runtime.execute('input()')

    def test_console_host_strips_terminator(self):
        host = ConsoleHost(stdin=io.StringIO('first\r\nsecond\n'))
        assert host.read_line() == 'first'
        assert host.read_line() == 'second'
        assert host.read_line() is None

    def test_console_host_write(self):
        out = io.StringIO()
        MpRuntime(host=ConsoleHost(stdout=out)).execute('print("hello");')
        assert out.getvalue() == 'hello\n'


class TestLen:
    """Test len()"""

    def test_len_string(self, runtime):
        assert runtime.execute('len("hello")') == 5

    def test_len_array(self, runtime):
        assert runtime.execute('len([1, 2, 3])') == 3

    def test_len_empty(self, runtime):
        assert runtime.execute('len("")') == 0
        assert runtime.execute('len([])') == 0

    def test_len_number_is_type_error(self, runtime):
        with pytest.raises(MpTypeError):
            runtime.execute('len(42)')


class TestArrayBuiltins:
    """Test push() and pop()"""

    def test_push_in_place(self, runtime):
        assert runtime.execute('let a = []; push(a, 1); push(a, 2); a') == [1, 2]

    def test_push_returns_same_array(self, runtime):
        runtime.execute('let a = [0]; let b = push(a, 1);')
        assert runtime.get_var('a') is runtime.get_var('b')

    def test_pop(self, runtime):
        assert runtime.execute('let a = [1, 2]; pop(a)') == 2
        assert runtime.get_var('a') == [1]

    def test_pop_empty(self, runtime):
        with pytest.raises(MpIndexError):
            runtime.execute('pop([])')

    def test_push_requires_array(self, runtime):
        with pytest.raises(MpTypeError, match="push\\(\\) expects an array"):
            runtime.execute('push("s", 1)')


class TestConversions:
    """Test int(), float(), str() and type()"""

    def test_int(self, runtime):
        assert runtime.execute('int("42")') == 42
        assert runtime.execute('int(3.9)') == 3
        assert runtime.execute('int(-3.9)') == -3

    def test_int_errors(self, runtime):
        with pytest.raises(MpTypeError):
            runtime.execute('int("x")')
        with pytest.raises(MpTypeError):
            runtime.execute('int(true)')

    def test_float(self, runtime):
        assert runtime.execute('float("2.5")') == 2.5
        result = runtime.execute('float(2)')
        assert result == 2.0
        assert isinstance(result, float)

    def test_float_rejects_non_finite_text(self, runtime):
        for text in ('nan', 'inf', '-Infinity', '1e400'):
            with pytest.raises(MpTypeError, match="cannot parse"):
                runtime.execute(f'float("{text}")')

    def test_float_of_huge_integer(self, runtime):
        with pytest.raises(MpArithmeticError):
            runtime.execute('let x = 10; let i = 0; while (i < 10) { x = x * x; i = i + 1; } float(x)')

    def test_str(self, runtime):
        assert runtime.execute('str(1.5)') == "1.5"
        assert runtime.execute('str([1, 2])') == "[1, 2]"
        assert runtime.execute('str(nil)') == "nil"
        assert runtime.execute('"n=" + str(3)') == "n=3"

    def test_type(self, runtime):
        assert runtime.execute('type(1)') == 'number'
        assert runtime.execute('type(1.5)') == 'number'
        assert runtime.execute('type("")') == 'string'
        assert runtime.execute('type(false)') == 'boolean'
        assert runtime.execute('type([])') == 'array'
        assert runtime.execute('type(print)') == 'function'
        assert runtime.execute('type(nil)') == 'nil'


class TestBuiltinScope:
    """Test that builtins live in a constant root scope"""

    def test_table(self):
        table = make_builtins(BufferedHost())
        assert set(table) == {'print', 'input', 'len', 'push', 'pop', 'int', 'float', 'str', 'type'}
        assert all(isinstance(b, BuiltinFunction) for b in table.values())
        assert table['push'].arity == 2
        assert table['input'].arity == 0

    def test_builtin_can_be_shadowed(self, runtime):
        assert runtime.execute('let len = 5; len') == 5

    def test_builtin_cannot_be_assigned(self, runtime):
        with pytest.raises(MpNameError, match="constant 'print'"):
            runtime.execute('print = 1;')
