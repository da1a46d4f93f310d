"""
Mp Evaluator - tree-walking interpreter

evaluate(node, env) returns the value of an expression node. Statements are
executed for effect and their own value is always nil; a block's value comes
from its tail expression. `return` unwinds to the enclosing call (or ends
the program at top level) by raising ReturnSignal.
"""

import logging
from typing import Any, List, Optional

from .ast_nodes import (
    ArrayLiteral, Assign, BinaryOp, Block, BooleanLiteral, Call,
    ExpressionStatement, FunctionDef, FunctionLiteral, Identifier, If, Index,
    Let, NilLiteral, NumberLiteral, Program, Return, StringLiteral, UnaryOp,
    While,
)
from .config import RuntimeConfig
from .environment import Environment
from .errors import (
    ArityError, MpArithmeticError, MpIndexError, MpRuntimeError, MpTypeError,
    ResourceError, Span,
)
from .host import HostIO
from .values import (
    BuiltinFunction, Function, display, is_number, type_name, values_equal,
)

logger = logging.getLogger(__name__)


class ReturnSignal(Exception):
    """Carries a return value up to the enclosing call"""

    def __init__(self, value: Any):
        super().__init__()
        self.value = value


class MpEvaluator:
    """Evaluate Mp AST"""

    def __init__(self, host: HostIO, config: Optional[RuntimeConfig] = None):
        self.host = host
        self.config = config or RuntimeConfig()

    # ========================================================================
    # Entry Points
    # ========================================================================

    def run(self, program: Program, env: Environment) -> Any:
        """Run a program in env; the result is its tail value or top-level return"""
        logger.debug("running program with %d statements", len(program.statements))
        try:
            return self._run_sequence(program.statements, program.tail, env)
        except ReturnSignal as signal:
            return signal.value
        except RecursionError:
            raise ResourceError("Maximum recursion depth exceeded") from None

    def evaluate(self, node: Any, env: Environment) -> Any:
        """Evaluate an expression node"""
        if isinstance(node, NumberLiteral):
            return node.value

        elif isinstance(node, StringLiteral):
            return node.value

        elif isinstance(node, BooleanLiteral):
            return node.value

        elif isinstance(node, NilLiteral):
            return None

        elif isinstance(node, Identifier):
            return env.lookup(node.name, node.span)

        elif isinstance(node, ArrayLiteral):
            return [self.evaluate(elem, env) for elem in node.elements]

        elif isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand, env)
            return self._eval_unary_op(node.op, operand, node.span)

        elif isinstance(node, BinaryOp):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self._eval_binary_op(node.op, left, right, node.span)

        elif isinstance(node, Call):
            callee = self.evaluate(node.callee, env)
            args = [self.evaluate(arg, env) for arg in node.args]
            return self.call(callee, args, node.span)

        elif isinstance(node, Index):
            target = self.evaluate(node.target, env)
            index = self.evaluate(node.index, env)
            return self._eval_index(target, index, node.span)

        elif isinstance(node, Block):
            return self._run_sequence(node.statements, node.tail, env.child())

        elif isinstance(node, If):
            condition = self._eval_condition(node.condition, env, 'if')
            if condition:
                return self.evaluate(node.then_branch, env)
            if node.else_branch is not None:
                return self.evaluate(node.else_branch, env)
            return None

        elif isinstance(node, While):
            return self._eval_while(node, env)

        elif isinstance(node, FunctionLiteral):
            return Function(params=list(node.params), body=node.body, closure=env)

        else:
            raise MpRuntimeError(f"Unknown AST node type: {type(node).__name__}", getattr(node, 'span', None))

    def execute(self, stmt: Any, env: Environment):
        """Execute one statement for its effect"""
        if isinstance(stmt, Let):
            value = self.evaluate(stmt.value, env)
            if isinstance(value, Function) and value.name is None:
                value.name = stmt.name
            env.define(stmt.name, value)

        elif isinstance(stmt, FunctionDef):
            function = stmt.function
            env.define(stmt.name, Function(params=list(function.params), body=function.body,
                                           closure=env, name=stmt.name))

        elif isinstance(stmt, Assign):
            self._eval_assign(stmt, env)

        elif isinstance(stmt, Return):
            value = None if stmt.value is None else self.evaluate(stmt.value, env)
            raise ReturnSignal(value)

        elif isinstance(stmt, ExpressionStatement):
            self.evaluate(stmt.expression, env)

        else:
            raise MpRuntimeError(f"Unknown statement type: {type(stmt).__name__}", getattr(stmt, 'span', None))

    def call(self, callee: Any, args: List[Any], span: Optional[Span] = None) -> Any:
        """Call a user function or builtin with evaluated arguments"""
        if isinstance(callee, BuiltinFunction):
            self._check_arity(callee.name, callee.arity, len(args), span)
            try:
                return callee.impl(*args)
            except MpRuntimeError as error:
                if error.span is None:
                    raise type(error)(error.message, span) from None
                raise

        if isinstance(callee, Function):
            self._check_arity(callee.name or '<fn>', callee.arity, len(args), span)
            logger.debug("call %s(%d args)", callee.name or '<fn>', len(args))
            call_env = callee.closure.child()
            for name, value in zip(callee.params, args):
                call_env.define(name, value)
            try:
                return self._run_sequence(callee.body.statements, callee.body.tail, call_env)
            except ReturnSignal as signal:
                return signal.value

        raise MpTypeError(f"Cannot call non-function: {type_name(callee)}", span)

    # ========================================================================
    # Helpers
    # ========================================================================

    def _run_sequence(self, statements, tail, env: Environment) -> Any:
        for stmt in statements:
            self.execute(stmt, env)
        if tail is None:
            return None
        return self.evaluate(tail, env)

    def _eval_condition(self, node, env: Environment, keyword: str) -> bool:
        value = self.evaluate(node, env)
        if not isinstance(value, bool):
            raise MpTypeError(f"{keyword} condition must be a boolean, got {type_name(value)}", node.span)
        return value

    def _eval_while(self, node: While, env: Environment) -> Any:
        if not self.config.while_yields_values:
            while self._eval_condition(node.condition, env, 'while'):
                self.evaluate(node.body, env)
            return None

        results = []
        while self._eval_condition(node.condition, env, 'while'):
            results.append(self.evaluate(node.body, env))
        return results or None

    def _eval_assign(self, stmt: Assign, env: Environment):
        target = stmt.target
        if isinstance(target, Identifier):
            value = self.evaluate(stmt.value, env)
            env.assign(target.name, value, target.span)
            return

        container = self.evaluate(target.target, env)
        index = self.evaluate(target.index, env)
        value = self.evaluate(stmt.value, env)
        if not isinstance(container, list):
            raise MpTypeError(f"Cannot assign into {type_name(container)}", target.span)
        container[self._check_index(container, index, target.span)] = value

    def _eval_index(self, target: Any, index: Any, span: Optional[Span]) -> Any:
        if not isinstance(target, (list, str)):
            raise MpTypeError(f"Cannot index into {type_name(target)}", span)
        return target[self._check_index(target, index, span)]

    @staticmethod
    def _check_index(target, index: Any, span: Optional[Span]) -> int:
        if isinstance(index, float) and index.is_integer():
            index = int(index)
        if not isinstance(index, int) or isinstance(index, bool):
            raise MpTypeError(f"Index must be an integer, got {display(index)}", span)
        if not 0 <= index < len(target):
            raise MpIndexError(f"Index {index} out of range for length {len(target)}", span)
        return index

    @staticmethod
    def _check_arity(name: str, expected: int, got: int, span: Optional[Span]):
        if expected != got:
            raise ArityError(f"{name} expects {expected} argument(s), got {got}", span)

    def _eval_binary_op(self, op: str, left: Any, right: Any, span: Optional[Span]) -> Any:
        """Evaluate binary operation"""
        if op == '==':
            return values_equal(left, right)
        elif op == '!=':
            return not values_equal(left, right)

        elif op in ('<', '<=', '>', '>='):
            both_numbers = is_number(left) and is_number(right)
            both_strings = isinstance(left, str) and isinstance(right, str)
            if not (both_numbers or both_strings):
                raise MpTypeError(
                    f"Cannot compare {type_name(left)} {op} {type_name(right)}", span)
            if op == '<':
                return left < right
            elif op == '<=':
                return left <= right
            elif op == '>':
                return left > right
            return left >= right

        elif op == '+':
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            if isinstance(left, list):
                return left + [right]

        if not (is_number(left) and is_number(right)):
            raise MpTypeError(
                f"Unsupported operand types for {op}: {type_name(left)} and {type_name(right)}", span)

        try:
            if op == '+':
                return left + right
            elif op == '-':
                return left - right
            elif op == '*':
                return left * right
            elif op == '/':
                if right == 0:
                    raise MpArithmeticError("Division by zero", span)
                if isinstance(left, int) and isinstance(right, int) and left % right == 0:
                    return left // right
                return left / right
            elif op == '%':
                if right == 0:
                    raise MpArithmeticError("Modulo by zero", span)
                return left % right
        except OverflowError:
            raise MpArithmeticError(f"Numeric overflow in {op}", span) from None

        raise MpRuntimeError(f"Unknown binary operator: {op}", span)

    def _eval_unary_op(self, op: str, operand: Any, span: Optional[Span]) -> Any:
        """Evaluate unary operation"""
        if op == '-':
            if not is_number(operand):
                raise MpTypeError(f"Cannot negate {type_name(operand)}", span)
            return -operand
        raise MpRuntimeError(f"Unknown unary operator: {op}", span)


__all__ = ['MpEvaluator', 'ReturnSignal']
