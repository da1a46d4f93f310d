"""
Mp Printer - AST back to source

Output is canonical rather than faithful: operators are fully parenthesised,
every statement ends in ';' and tails are written as ordinary expression
statements. Parsing the output yields a tree equal to the input.
"""

from decimal import Decimal
from typing import List

from .ast_nodes import (
    ArrayLiteral, Assign, ASTNode, BinaryOp, Block, BooleanLiteral, Call,
    ExpressionStatement, FunctionDef, FunctionLiteral, Identifier, If, Index,
    Let, NilLiteral, NumberLiteral, Program, Return, StringLiteral, UnaryOp,
    While,
)
from .errors import ResourceError

INDENT = '    '

_ESCAPES = {
    '\\': '\\\\',
    '"': '\\"',
    '\n': '\\n',
    '\t': '\\t',
    '\r': '\\r',
}


def format_program(program: Program) -> str:
    """Render a whole program"""
    try:
        lines = _format_statements(program.statements, program.tail, 0)
    except RecursionError:
        raise ResourceError("Tree nested too deeply to print") from None
    return '\n'.join(lines) + ('\n' if lines else '')


def format_node(node: ASTNode, depth: int = 0) -> str:
    """Render any expression or statement"""
    if isinstance(node, Program):
        return format_program(node)
    try:
        if isinstance(node, (Let, Assign, FunctionDef, Return, ExpressionStatement)):
            return _format_statement(node, depth)
        return _format_expression(node, depth)
    except RecursionError:
        raise ResourceError("Tree nested too deeply to print") from None


def format_number(value) -> str:
    """Render a number literal so that it re-lexes to the same value"""
    if not isinstance(value, float):
        return str(value)
    text = repr(value)
    if 'e' in text:
        # The lexer has no exponent form
        text = format(Decimal(text), 'f')
        if '.' not in text:
            text += '.0'
    return text


def quote_string(value: str) -> str:
    return '"' + ''.join(_ESCAPES.get(ch, ch) for ch in value) + '"'


def _format_statements(statements, tail, depth: int) -> List[str]:
    lines = [INDENT * depth + _format_statement(stmt, depth) for stmt in statements]
    if tail is not None:
        lines.append(INDENT * depth + _format_expression(tail, depth) + ';')
    return lines


def _format_statement(stmt, depth: int) -> str:
    if isinstance(stmt, Let):
        return f"let {stmt.name} = {_format_expression(stmt.value, depth)};"
    if isinstance(stmt, Assign):
        target = _format_expression(stmt.target, depth)
        return f"{target} = {_format_expression(stmt.value, depth)};"
    if isinstance(stmt, FunctionDef):
        params = ', '.join(stmt.function.params)
        return f"fn {stmt.name}({params}) {_format_block(stmt.function.body, depth)}"
    if isinstance(stmt, Return):
        if stmt.value is None:
            return "return;"
        return f"return {_format_expression(stmt.value, depth)};"
    if isinstance(stmt, ExpressionStatement):
        return _format_expression(stmt.expression, depth) + ';'
    raise TypeError(f"Not a statement: {type(stmt).__name__}")


def _format_block(block: Block, depth: int) -> str:
    lines = _format_statements(block.statements, block.tail, depth + 1)
    if not lines:
        return '{ }'
    return '{\n' + '\n'.join(lines) + '\n' + INDENT * depth + '}'


def _format_expression(expr, depth: int) -> str:
    if isinstance(expr, NumberLiteral):
        return format_number(expr.value)
    if isinstance(expr, StringLiteral):
        return quote_string(expr.value)
    if isinstance(expr, BooleanLiteral):
        return 'true' if expr.value else 'false'
    if isinstance(expr, NilLiteral):
        return 'nil'
    if isinstance(expr, Identifier):
        return expr.name
    if isinstance(expr, ArrayLiteral):
        return '[' + ', '.join(_format_expression(e, depth) for e in expr.elements) + ']'
    if isinstance(expr, UnaryOp):
        return f"({expr.op}{_format_expression(expr.operand, depth)})"
    if isinstance(expr, BinaryOp):
        left = _format_expression(expr.left, depth)
        right = _format_expression(expr.right, depth)
        return f"({left} {expr.op} {right})"
    if isinstance(expr, Call):
        args = ', '.join(_format_expression(a, depth) for a in expr.args)
        return f"{_format_callee(expr.callee, depth)}({args})"
    if isinstance(expr, Index):
        return f"{_format_callee(expr.target, depth)}[{_format_expression(expr.index, depth)}]"
    if isinstance(expr, Block):
        return _format_block(expr, depth)
    if isinstance(expr, If):
        text = f"if ({_format_expression(expr.condition, depth)}) {_format_block(expr.then_branch, depth)}"
        if expr.else_branch is not None:
            text += f" else {_format_block(expr.else_branch, depth)}"
        return text
    if isinstance(expr, While):
        return f"while ({_format_expression(expr.condition, depth)}) {_format_block(expr.body, depth)}"
    if isinstance(expr, FunctionLiteral):
        return f"fn ({', '.join(expr.params)}) {_format_block(expr.body, depth)}"
    raise TypeError(f"Not an expression: {type(expr).__name__}")


def _format_callee(expr, depth: int) -> str:
    """Block-like callees need parentheses to stay in postfix position"""
    text = _format_expression(expr, depth)
    if isinstance(expr, (Block, If, While, FunctionLiteral)):
        return f"({text})"
    return text


__all__ = ['format_program', 'format_node', 'format_number', 'quote_string']
