"""
Mp AST Nodes

Two families of nodes: expressions, which produce a value, and statements,
whose own value is always nil. Blocks and the program keep their final
expression statement apart as `tail`; that expression supplies the value
when the block is used in expression position.

The `span` of a node is bookkeeping for error messages only and is excluded
from equality, so re-parsing printed source yields an equal tree.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .errors import Span


@dataclass
class ASTNode:
    """Base AST node"""
    span: Optional[Span] = field(default=None, compare=False, repr=False, kw_only=True)


class Expression(ASTNode):
    """Marker base for nodes that produce a value"""


class Statement(ASTNode):
    """Marker base for nodes evaluated for their effect"""


# ============================================================================
# Expressions
# ============================================================================

@dataclass
class NumberLiteral(Expression):
    value: Union[int, float]


@dataclass
class StringLiteral(Expression):
    value: str


@dataclass
class BooleanLiteral(Expression):
    value: bool


@dataclass
class NilLiteral(Expression):
    pass


@dataclass
class ArrayLiteral(Expression):
    elements: List[Expression]


@dataclass
class Identifier(Expression):
    """Variable reference"""
    name: str


@dataclass
class UnaryOp(Expression):
    op: str
    operand: Expression


@dataclass
class BinaryOp(Expression):
    op: str
    left: Expression
    right: Expression


@dataclass
class Call(Expression):
    """Function call; the callee is any expression"""
    callee: Expression
    args: List[Expression]


@dataclass
class Index(Expression):
    """Element access: target[index]"""
    target: Expression
    index: Expression


@dataclass
class Block(Expression):
    """Brace-delimited statements with an optional tail expression"""
    statements: List['Statement']
    tail: Optional[Expression] = None


@dataclass
class If(Expression):
    condition: Expression
    then_branch: Block
    else_branch: Optional[Block] = None


@dataclass
class While(Expression):
    condition: Expression
    body: Block


@dataclass
class FunctionLiteral(Expression):
    params: List[str]
    body: Block


# ============================================================================
# Statements
# ============================================================================

@dataclass
class Let(Statement):
    """Declaration in the current scope"""
    name: str
    value: Expression


@dataclass
class Assign(Statement):
    """Rebind the nearest declaration, or store into an array slot"""
    target: Union[Identifier, Index]
    value: Expression


@dataclass
class FunctionDef(Statement):
    """fn name(...) { ... }, sugar for let name = fn (...) { ... }"""
    name: str
    function: FunctionLiteral


@dataclass
class Return(Statement):
    value: Optional[Expression] = None


@dataclass
class ExpressionStatement(Statement):
    expression: Expression


@dataclass
class Program(ASTNode):
    """Top-level statements; tail as for Block"""
    statements: List[Statement]
    tail: Optional[Expression] = None


# Expressions that end in a block and so need no terminating ';'
BLOCK_LIKE = (Block, If, While, FunctionLiteral)


__all__ = [
    'ASTNode', 'Expression', 'Statement',
    'NumberLiteral', 'StringLiteral', 'BooleanLiteral', 'NilLiteral',
    'ArrayLiteral', 'Identifier', 'UnaryOp', 'BinaryOp', 'Call', 'Index',
    'Block', 'If', 'While', 'FunctionLiteral',
    'Let', 'Assign', 'FunctionDef', 'Return', 'ExpressionStatement',
    'Program', 'BLOCK_LIKE',
]
