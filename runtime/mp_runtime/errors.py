"""
Mp Runtime - Error Definitions

Every failure in the pipeline is an MpError carrying an error code and,
when known, the source span of the offending token or node.

    LexError        malformed token, unterminated string/comment
    ParseError      grammar violation
    MpRuntimeError  evaluation failure (name, type, arity, arithmetic, index, io)
    ResourceError   host recursion limit exhausted

Errors are never recovered inside the runtime; they abort the current
program and surface to the embedder.
"""

from dataclasses import dataclass
from typing import Optional


# ============================================================================
# Error Codes
# ============================================================================

E_LEX_ERROR = "E_LEX_ERROR"
E_UNTERMINATED_STRING = "E_UNTERMINATED_STRING"
E_UNTERMINATED_COMMENT = "E_UNTERMINATED_COMMENT"
E_PARSE_ERROR = "E_PARSE_ERROR"
E_RUNTIME_ERROR = "E_RUNTIME_ERROR"
E_NAME_ERROR = "E_NAME_ERROR"
E_TYPE_ERROR = "E_TYPE_ERROR"
E_ARITY_ERROR = "E_ARITY_ERROR"
E_ARITHMETIC_ERROR = "E_ARITHMETIC_ERROR"
E_INDEX_ERROR = "E_INDEX_ERROR"
E_IO_ERROR = "E_IO_ERROR"
E_RESOURCE_ERROR = "E_RESOURCE_ERROR"


@dataclass(frozen=True)
class Span:
    """1-based source position"""
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


# ============================================================================
# Exceptions
# ============================================================================

class MpError(Exception):
    """Base exception for Mp runtime errors"""

    def __init__(self, code: str, message: str, span: Optional[Span] = None):
        self.code = code
        self.message = message
        self.span = span
        text = f"[{code}] {message}"
        if span is not None:
            text += f" (at {span})"
        super().__init__(text)


class LexError(MpError):
    """Raised by the tokenizer"""

    def __init__(self, message: str, span: Span, code: str = E_LEX_ERROR):
        super().__init__(code, message, span)


class ParseError(MpError):
    """Raised by the parser"""

    def __init__(self, message: str, span: Optional[Span] = None):
        super().__init__(E_PARSE_ERROR, message, span)


class MpRuntimeError(MpError):
    """Raised while evaluating a program"""
    CODE = E_RUNTIME_ERROR

    def __init__(self, message: str, span: Optional[Span] = None):
        super().__init__(self.CODE, message, span)


class MpNameError(MpRuntimeError):
    """Unbound identifier, or assignment to an undeclared/constant name"""
    CODE = E_NAME_ERROR


class MpTypeError(MpRuntimeError):
    """Operator or builtin applied to an incompatible value"""
    CODE = E_TYPE_ERROR


class ArityError(MpRuntimeError):
    """Call with the wrong number of arguments"""
    CODE = E_ARITY_ERROR


class MpArithmeticError(MpRuntimeError):
    """Division or modulo by zero"""
    CODE = E_ARITHMETIC_ERROR


class MpIndexError(MpRuntimeError):
    """Index out of range, or pop from an empty array"""
    CODE = E_INDEX_ERROR


class MpIOError(MpRuntimeError):
    """Host input failure or end of stream"""
    CODE = E_IO_ERROR


class ResourceError(MpError):
    """Host stack exhausted by deep recursion"""

    def __init__(self, message: str):
        super().__init__(E_RESOURCE_ERROR, message)


__all__ = [
    'E_LEX_ERROR', 'E_UNTERMINATED_STRING', 'E_UNTERMINATED_COMMENT',
    'E_PARSE_ERROR', 'E_RUNTIME_ERROR', 'E_NAME_ERROR', 'E_TYPE_ERROR', 'E_ARITY_ERROR',
    'E_ARITHMETIC_ERROR', 'E_INDEX_ERROR', 'E_IO_ERROR', 'E_RESOURCE_ERROR',
    'Span', 'MpError', 'LexError', 'ParseError', 'MpRuntimeError',
    'MpNameError', 'MpTypeError', 'ArityError', 'MpArithmeticError',
    'MpIndexError', 'MpIOError', 'ResourceError',
]
