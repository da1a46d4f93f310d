"""
Mp Runtime - tree-walking interpreter for the Mp language

**Pipeline:**
- Lexer: source text to tokens (MpTokenizer)
- Parser: tokens to AST, with block tail positions marked (MpParser)
- Evaluator: AST to values over a chain of lexical scopes (MpEvaluator)

**Embedding:**
- MpRuntime: persistent global scope, execute()/execute_file()
- HostIO: where print() writes and input() reads
- RuntimeConfig: while-loop value mode, recursion limit, result echo

Version: 1.0.0
"""

__version__ = '1.0.0'

# ============================================================================
# Errors
# ============================================================================

from .errors import (
    Span, MpError, LexError, ParseError, MpRuntimeError, MpNameError,
    MpTypeError, ArityError, MpArithmeticError, MpIndexError, MpIOError,
    ResourceError,
    E_LEX_ERROR, E_UNTERMINATED_STRING, E_UNTERMINATED_COMMENT,
    E_PARSE_ERROR, E_RUNTIME_ERROR, E_NAME_ERROR, E_TYPE_ERROR, E_ARITY_ERROR,
    E_ARITHMETIC_ERROR, E_INDEX_ERROR, E_IO_ERROR, E_RESOURCE_ERROR,
)

# ============================================================================
# Front End
# ============================================================================

from .lexer import MpTokenizer, Token, TokenType, tokenize
from .parser import MpParser, parse
from .printer import format_program, format_node

# ============================================================================
# Execution
# ============================================================================

from .values import Function, BuiltinFunction, type_name, display, values_equal
from .environment import Environment
from .host import HostIO, ConsoleHost, BufferedHost
from .config import RuntimeConfig
from .evaluator import MpEvaluator
from .runtime import MpRuntime, execute_mp

__all__ = [
    '__version__',
    # Errors
    'Span', 'MpError', 'LexError', 'ParseError', 'MpRuntimeError',
    'MpNameError', 'MpTypeError', 'ArityError', 'MpArithmeticError',
    'MpIndexError', 'MpIOError', 'ResourceError',
    'E_LEX_ERROR', 'E_UNTERMINATED_STRING', 'E_UNTERMINATED_COMMENT',
    'E_PARSE_ERROR', 'E_RUNTIME_ERROR', 'E_NAME_ERROR', 'E_TYPE_ERROR', 'E_ARITY_ERROR',
    'E_ARITHMETIC_ERROR', 'E_INDEX_ERROR', 'E_IO_ERROR', 'E_RESOURCE_ERROR',
    # Front end
    'MpTokenizer', 'Token', 'TokenType', 'tokenize',
    'MpParser', 'parse', 'format_program', 'format_node',
    # Execution
    'Function', 'BuiltinFunction', 'type_name', 'display', 'values_equal',
    'Environment', 'HostIO', 'ConsoleHost', 'BufferedHost',
    'RuntimeConfig', 'MpEvaluator', 'MpRuntime', 'execute_mp',
]
