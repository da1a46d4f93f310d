"""
Mp Runtime Values

Values are plain Python objects wherever a Python type fits:

    Number    int / float (never bool)
    String    str
    Boolean   bool
    Array     list (shared by reference, mutable)
    Nil       None

plus two callable kinds, Function (user closures) and BuiltinFunction.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from .errors import MpArithmeticError

if TYPE_CHECKING:
    from .ast_nodes import Block
    from .environment import Environment


@dataclass(eq=False)
class Function:
    """User function: parameters, body and the scope it was defined in"""
    params: List[str]
    body: 'Block'
    closure: 'Environment' = field(repr=False)
    name: Optional[str] = None

    @property
    def arity(self) -> int:
        return len(self.params)


@dataclass(eq=False)
class BuiltinFunction:
    """Native function backed by Python code"""
    name: str
    arity: int
    impl: Callable[..., Any] = field(repr=False)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_callable(value: Any) -> bool:
    return isinstance(value, (Function, BuiltinFunction))


def type_name(value: Any) -> str:
    """Language-level name of a value's kind"""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'boolean'
    if is_number(value):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, list):
        return 'array'
    if is_callable(value):
        return 'function'
    raise TypeError(f"Not an Mp value: {value!r}")


def display(value: Any) -> str:
    """Text written by print()"""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:
            # CPython caps int to str conversion (sys.set_int_max_str_digits)
            raise MpArithmeticError("Number too large to display") from None
    if isinstance(value, list):
        return '[' + ', '.join(display(item) for item in value) + ']'
    if isinstance(value, Function):
        return f"<fn {value.name}>" if value.name else "<fn>"
    if isinstance(value, BuiltinFunction):
        return f"<builtin {value.name}>"
    return str(value)


def values_equal(left: Any, right: Any) -> bool:
    """== semantics: numeric across int/float, never equal across kinds"""
    if is_number(left) and is_number(right):
        return left == right
    if type_name(left) != type_name(right):
        return False
    if isinstance(left, list):
        return len(left) == len(right) and all(
            values_equal(a, b) for a, b in zip(left, right)
        )
    if is_callable(left):
        return left is right
    return left == right


__all__ = [
    'Function', 'BuiltinFunction', 'is_number', 'is_callable',
    'type_name', 'display', 'values_equal',
]
