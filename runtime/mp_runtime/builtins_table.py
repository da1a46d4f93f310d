"""
Mp Builtins

Native functions installed as constants in the root scope. Each one is
called with already-evaluated arguments after the arity check; errors are
raised without a span and the evaluator attaches the call site.
"""

import math
from typing import Any, Dict, List

from .environment import Environment
from .errors import MpArithmeticError, MpIndexError, MpIOError, MpTypeError
from .host import HostIO
from .values import BuiltinFunction, display, is_number, type_name


def _expect_array(name: str, value: Any) -> list:
    if not isinstance(value, list):
        raise MpTypeError(f"{name}() expects an array, got {type_name(value)}")
    return value


def make_builtins(host: HostIO) -> Dict[str, BuiltinFunction]:
    """Build the builtin table bound to one host"""

    def mp_print(value):
        host.write(display(value) + '\n')
        return None

    def mp_input():
        line = host.read_line()
        if line is None:
            raise MpIOError("input() reached end of input")
        return line

    def mp_len(value):
        if isinstance(value, (str, list)):
            return len(value)
        raise MpTypeError(f"len() expects a string or array, got {type_name(value)}")

    def mp_push(array, value):
        _expect_array('push', array).append(value)
        return array

    def mp_pop(array):
        if not _expect_array('pop', array):
            raise MpIndexError("pop() from empty array")
        return array.pop()

    def mp_int(value):
        if isinstance(value, float) and not math.isfinite(value):
            raise MpTypeError(f"int() cannot convert {display(value)}")
        if is_number(value):
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                raise MpTypeError(f"int() cannot parse {value!r}") from None
        raise MpTypeError(f"int() expects a number or string, got {type_name(value)}")

    def mp_float(value):
        if is_number(value):
            try:
                return float(value)
            except OverflowError:
                raise MpArithmeticError("float() argument too large") from None
        if isinstance(value, str):
            try:
                result = float(value.strip())
            except ValueError:
                raise MpTypeError(f"float() cannot parse {value!r}") from None
            if not math.isfinite(result):
                raise MpTypeError(f"float() cannot parse {value!r}")
            return result
        raise MpTypeError(f"float() expects a number or string, got {type_name(value)}")

    def mp_str(value):
        return display(value)

    def mp_type(value):
        return type_name(value)

    table: List[BuiltinFunction] = [
        BuiltinFunction('print', 1, mp_print),
        BuiltinFunction('input', 0, mp_input),
        BuiltinFunction('len', 1, mp_len),
        BuiltinFunction('push', 2, mp_push),
        BuiltinFunction('pop', 1, mp_pop),
        BuiltinFunction('int', 1, mp_int),
        BuiltinFunction('float', 1, mp_float),
        BuiltinFunction('str', 1, mp_str),
        BuiltinFunction('type', 1, mp_type),
    ]
    return {builtin.name: builtin for builtin in table}


def install_builtins(env: Environment, host: HostIO) -> Environment:
    """Define every builtin as a constant in env"""
    for name, builtin in make_builtins(host).items():
        env.define_constant(name, builtin)
    return env


__all__ = ['make_builtins', 'install_builtins']
