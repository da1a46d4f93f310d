"""
Mp Parser - Tokens to AST

Recursive descent over the token list, with a precedence table for binary
operators (lowest first):

    ==  !=            equality
    <  <=  >  >=      relational
    +  -              additive
    *  /  %           multiplicative

All binary operators are left-associative. Unary '-' binds tighter than any
binary operator; calls and indexing bind tighter still.

Statements start with `let`, `fn NAME`, `return`, `if`, `while` or `{`;
anything else is an expression followed by ';'. The ';' may be left out
after a block-like expression and before a closing '}' or end of input,
which is how a trailing expression becomes the value of its block.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .ast_nodes import (
    BLOCK_LIKE, ArrayLiteral, Assign, BinaryOp, Block, BooleanLiteral, Call,
    Expression, ExpressionStatement, FunctionDef, FunctionLiteral, Identifier,
    If, Index, Let, NilLiteral, NumberLiteral, Program, Return, Statement,
    StringLiteral, UnaryOp, While,
)
from .errors import ParseError, ResourceError
from .lexer import MpTokenizer, Token, TokenType

logger = logging.getLogger(__name__)


BINARY_PRECEDENCE: List[Dict[str, str]] = [
    {
        TokenType.EQUAL_EQUAL: '==',
        TokenType.NOT_EQUAL: '!=',
    },
    {
        TokenType.LESS: '<',
        TokenType.LESS_EQUAL: '<=',
        TokenType.GREATER: '>',
        TokenType.GREATER_EQUAL: '>=',
    },
    {
        TokenType.PLUS: '+',
        TokenType.MINUS: '-',
    },
    {
        TokenType.STAR: '*',
        TokenType.SLASH: '/',
        TokenType.PERCENT: '%',
    },
]


class MpParser:
    """Parse Mp tokens into AST"""

    def __init__(self, tokens: Iterable[Token]):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            raise ParseError("Token stream must end with EOF")
        self.pos = 0

    def parse(self) -> Program:
        """Parse all statements"""
        statements = []
        try:
            while not self._is_at_end():
                statements.append(self._parse_statement())
        except RecursionError:
            raise ResourceError("Source nested too deeply to parse") from None

        body, tail = self._split_tail(statements)
        logger.debug("parsed %d top-level statements", len(statements))
        return Program(statements=body, tail=tail, span=self.tokens[0].span)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_statement(self) -> Statement:
        """Parse a single statement"""
        token = self._peek()

        if self._match(TokenType.LET):
            return self._parse_let(token)
        if self._check(TokenType.FN) and self._peek(1).type == TokenType.IDENTIFIER:
            self._advance()
            return self._parse_function_def(token)
        if self._match(TokenType.RETURN):
            return self._parse_return(token)
        if self._check(TokenType.IF) or self._check(TokenType.WHILE) or self._check(TokenType.LBRACE):
            # A statement-level if/while/block ends at its closing brace
            expr = self._parse_primary()
            self._match(TokenType.SEMICOLON)
            return ExpressionStatement(expression=expr, span=token.span)

        expr = self._parse_expression()

        if self._match(TokenType.EQUAL):
            if not isinstance(expr, (Identifier, Index)):
                raise ParseError("Invalid assignment target", token.span)
            value = self._parse_expression()
            self._expect_terminator("assignment")
            return Assign(target=expr, value=value, span=token.span)

        if isinstance(expr, BLOCK_LIKE):
            self._match(TokenType.SEMICOLON)
        else:
            self._expect_terminator("expression")
        return ExpressionStatement(expression=expr, span=token.span)

    def _parse_let(self, keyword: Token) -> Let:
        """Parse let binding"""
        name = self._expect(TokenType.IDENTIFIER, "identifier after 'let'").value
        self._expect(TokenType.EQUAL, f"'=' after '{name}' in let binding")
        value = self._parse_expression()
        self._expect_terminator("let binding")
        return Let(name=name, value=value, span=keyword.span)

    def _parse_function_def(self, keyword: Token) -> FunctionDef:
        """Parse named function definition"""
        name = self._expect(TokenType.IDENTIFIER, "function name after 'fn'").value
        params = self._parse_params()
        body = self._parse_block()
        self._match(TokenType.SEMICOLON)
        function = FunctionLiteral(params=params, body=body, span=keyword.span)
        return FunctionDef(name=name, function=function, span=keyword.span)

    def _parse_return(self, keyword: Token) -> Return:
        """Parse return with optional value"""
        value = None
        if not self._at_terminator():
            value = self._parse_expression()
        self._expect_terminator("return value")
        return Return(value=value, span=keyword.span)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self) -> Expression:
        """Parse expression"""
        return self._parse_binary(0)

    def _parse_binary(self, level: int) -> Expression:
        """Precedence climbing over BINARY_PRECEDENCE"""
        if level == len(BINARY_PRECEDENCE):
            return self._parse_unary()

        operators = BINARY_PRECEDENCE[level]
        left = self._parse_binary(level + 1)
        while self._peek().type in operators:
            token = self._advance()
            right = self._parse_binary(level + 1)
            left = BinaryOp(op=operators[token.type], left=left, right=right, span=token.span)
        return left

    def _parse_unary(self) -> Expression:
        """Parse unary minus"""
        if self._check(TokenType.MINUS):
            token = self._advance()
            operand = self._parse_unary()
            return UnaryOp(op='-', operand=operand, span=token.span)
        return self._parse_postfix()

    def _parse_postfix(self) -> Expression:
        """Parse calls and indexing"""
        expr = self._parse_primary()

        while True:
            if self._check(TokenType.LPAREN):
                token = self._advance()
                args = self._parse_arguments()
                expr = Call(callee=expr, args=args, span=token.span)
            elif self._check(TokenType.LBRACKET):
                token = self._advance()
                index = self._parse_expression()
                self._expect(TokenType.RBRACKET, "']' after index")
                expr = Index(target=expr, index=index, span=token.span)
            else:
                break

        return expr

    def _parse_arguments(self) -> List[Expression]:
        """Parse call arguments; '(' already consumed"""
        args = []
        if not self._check(TokenType.RPAREN):
            args.append(self._parse_expression())
            while self._match(TokenType.COMMA):
                args.append(self._parse_expression())
        self._expect(TokenType.RPAREN, "')' after function arguments")
        return args

    def _parse_primary(self) -> Expression:
        """Parse primary expression"""
        token = self._peek()

        # Literals
        if self._match(TokenType.NUMBER):
            return NumberLiteral(value=token.value, span=token.span)
        if self._match(TokenType.STRING):
            return StringLiteral(value=token.value, span=token.span)
        if self._match(TokenType.TRUE, TokenType.FALSE):
            return BooleanLiteral(value=token.value, span=token.span)
        if self._match(TokenType.NIL):
            return NilLiteral(span=token.span)

        # Identifier
        if self._match(TokenType.IDENTIFIER):
            return Identifier(name=token.value, span=token.span)

        # Array literal
        if self._match(TokenType.LBRACKET):
            elements = []
            if not self._check(TokenType.RBRACKET):
                elements.append(self._parse_expression())
                while self._match(TokenType.COMMA):
                    elements.append(self._parse_expression())
            self._expect(TokenType.RBRACKET, "']' after array elements")
            return ArrayLiteral(elements=elements, span=token.span)

        # Parenthesized expression
        if self._match(TokenType.LPAREN):
            expr = self._parse_expression()
            self._expect(TokenType.RPAREN, "')' after expression")
            return expr

        if self._check(TokenType.LBRACE):
            return self._parse_block()

        if self._match(TokenType.IF):
            return self._parse_if(token)

        if self._match(TokenType.WHILE):
            condition = self._parse_condition("while")
            body = self._parse_block()
            return While(condition=condition, body=body, span=token.span)

        if self._match(TokenType.FN):
            params = self._parse_params()
            body = self._parse_block()
            return FunctionLiteral(params=params, body=body, span=token.span)

        raise ParseError(f"Unexpected token '{token.text}'", token.span)

    def _parse_if(self, keyword: Token) -> If:
        """Parse if/else; 'if' already consumed"""
        condition = self._parse_condition("if")
        then_branch = self._parse_block()

        else_branch = None
        if self._match(TokenType.ELSE):
            if self._check(TokenType.IF):
                nested_keyword = self._advance()
                nested = self._parse_if(nested_keyword)
                else_branch = Block(statements=[], tail=nested, span=nested_keyword.span)
            else:
                else_branch = self._parse_block()

        return If(condition=condition, then_branch=then_branch,
                  else_branch=else_branch, span=keyword.span)

    def _parse_condition(self, keyword: str) -> Expression:
        """Parse '(' expression ')' after if/while"""
        self._expect(TokenType.LPAREN, f"'(' after '{keyword}'")
        condition = self._parse_expression()
        self._expect(TokenType.RPAREN, f"')' after {keyword} condition")
        return condition

    def _parse_block(self) -> Block:
        """Parse '{' statement* '}'"""
        open_brace = self._expect(TokenType.LBRACE, "'{' to open block")
        statements = []
        while not self._check(TokenType.RBRACE) and not self._is_at_end():
            statements.append(self._parse_statement())
        self._expect(TokenType.RBRACE, "'}' to close block")

        body, tail = self._split_tail(statements)
        return Block(statements=body, tail=tail, span=open_brace.span)

    def _parse_params(self) -> List[str]:
        """Parse '(' IDENT (',' IDENT)* ')'"""
        self._expect(TokenType.LPAREN, "'(' before parameters")
        params: List[str] = []
        if not self._check(TokenType.RPAREN):
            while True:
                token = self._expect(TokenType.IDENTIFIER, "parameter name")
                if token.value in params:
                    raise ParseError(f"Duplicate parameter '{token.value}'", token.span)
                params.append(token.value)
                if not self._match(TokenType.COMMA):
                    break
        self._expect(TokenType.RPAREN, "')' after parameters")
        return params

    @staticmethod
    def _split_tail(statements: List[Statement]) -> Tuple[List[Statement], Optional[Expression]]:
        """Move a final expression statement into tail position"""
        if statements and isinstance(statements[-1], ExpressionStatement):
            return statements[:-1], statements[-1].expression
        return statements, None

    # Parser utilities
    def _expect(self, type: str, what: str) -> Token:
        """Consume a token of the given type or fail with 'expected X, found Y'"""
        if self._check(type):
            return self._advance()
        token = self._peek()
        raise ParseError(f"Expected {what}, found '{token.text}'", token.span)

    def _expect_terminator(self, what: str):
        """Require ';' unless a '}' or end of input follows"""
        if self._match(TokenType.SEMICOLON):
            return
        if self._check(TokenType.RBRACE) or self._is_at_end():
            return
        token = self._peek()
        raise ParseError(f"Expected ';' after {what}, found '{token.text}'", token.span)

    def _at_terminator(self) -> bool:
        return (self._check(TokenType.SEMICOLON) or self._check(TokenType.RBRACE)
                or self._is_at_end())

    def _match(self, *types: str) -> bool:
        """Check if current token matches any of the given types"""
        for type in types:
            if self._check(type):
                self._advance()
                return True
        return False

    def _check(self, type: str) -> bool:
        """Check if current token is of given type"""
        return self._peek().type == type

    def _advance(self) -> Token:
        """Consume current token and return it"""
        token = self._peek()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _is_at_end(self) -> bool:
        """Check if at end of tokens"""
        return self._peek().type == TokenType.EOF

    def _peek(self, offset: int = 0) -> Token:
        """Return token at pos + offset without consuming; EOF past the end"""
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]


def parse(source: str) -> Program:
    """Tokenize and parse Mp source (convenience function)"""
    return MpParser(MpTokenizer(source).scan()).parse()


__all__ = ['MpParser', 'parse', 'BINARY_PRECEDENCE']
