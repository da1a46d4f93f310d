"""
Mp Lexer - Source text to tokens

Produces tokens lazily in scan order. Whitespace, `//` line comments and
non-nesting `/* ... */` block comments are skipped. Every token records the
line and column where it starts.

    let x = 1.5;   // LET IDENTIFIER EQUAL NUMBER SEMICOLON
"""

from dataclasses import dataclass
from typing import Any, Iterator, List

from .errors import (
    E_UNTERMINATED_COMMENT, E_UNTERMINATED_STRING, LexError, Span,
)


# ============================================================================
# Token Types
# ============================================================================

class TokenType:
    """Token type constants"""
    # Literals
    NUMBER = "NUMBER"
    STRING = "STRING"
    TRUE = "TRUE"
    FALSE = "FALSE"
    NIL = "NIL"

    # Identifiers and keywords
    IDENTIFIER = "IDENTIFIER"
    LET = "LET"
    FN = "FN"
    IF = "IF"
    ELSE = "ELSE"
    WHILE = "WHILE"
    RETURN = "RETURN"

    # Operators
    PLUS = "PLUS"
    MINUS = "MINUS"
    STAR = "STAR"
    SLASH = "SLASH"
    PERCENT = "PERCENT"
    EQUAL = "EQUAL"
    EQUAL_EQUAL = "EQUAL_EQUAL"
    NOT_EQUAL = "NOT_EQUAL"
    LESS = "LESS"
    LESS_EQUAL = "LESS_EQUAL"
    GREATER = "GREATER"
    GREATER_EQUAL = "GREATER_EQUAL"

    # Delimiters
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"
    LBRACKET = "LBRACKET"
    RBRACKET = "RBRACKET"
    COMMA = "COMMA"
    SEMICOLON = "SEMICOLON"

    # Special
    EOF = "EOF"


KEYWORDS = {
    'let': TokenType.LET,
    'fn': TokenType.FN,
    'if': TokenType.IF,
    'else': TokenType.ELSE,
    'while': TokenType.WHILE,
    'return': TokenType.RETURN,
    'true': TokenType.TRUE,
    'false': TokenType.FALSE,
    'nil': TokenType.NIL,
}

SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '%': TokenType.PERCENT,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
}

# Operators that may be followed by '=' to form a two-character operator
COMPARISON_TOKENS = {
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
}

ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '"': '"',
    '\\': '\\',
}


def _is_digit(ch: str) -> bool:
    """ASCII digits only; str.isdigit() also accepts superscripts"""
    return len(ch) == 1 and '0' <= ch <= '9'


def _is_ident_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == '_')


@dataclass(frozen=True)
class Token:
    """Token from Mp source"""
    type: str
    value: Any
    span: Span

    @property
    def text(self) -> str:
        """Human readable form used in error messages"""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.STRING:
            return f'"{self.value}"'
        if self.type in (TokenType.TRUE, TokenType.FALSE):
            return 'true' if self.value else 'false'
        if self.type == TokenType.NIL:
            return 'nil'
        return str(self.value)


# ============================================================================
# Tokenizer
# ============================================================================

class MpTokenizer:
    """Tokenize Mp source code"""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    def tokenize(self) -> List[Token]:
        """Tokenize entire source"""
        return list(self.scan())

    def scan(self) -> Iterator[Token]:
        """Yield tokens one at a time, ending with EOF"""
        while True:
            self._skip_whitespace_and_comments()
            if self._at_end():
                break

            ch = self.source[self.pos]
            span = self._span()

            if _is_digit(ch):
                yield self._read_number(span)
            elif ch == '"':
                yield self._read_string(span)
            elif _is_ident_char(ch):
                yield self._read_identifier(span)
            elif ch in COMPARISON_TOKENS:
                single, double = COMPARISON_TOKENS[ch]
                if self._peek(1) == '=':
                    self._advance(2)
                    yield Token(double, ch + '=', span)
                else:
                    self._advance()
                    yield Token(single, ch, span)
            elif ch == '!':
                if self._peek(1) != '=':
                    raise LexError("Unexpected character '!'", span)
                self._advance(2)
                yield Token(TokenType.NOT_EQUAL, '!=', span)
            elif ch in SINGLE_CHAR_TOKENS:
                self._advance()
                yield Token(SINGLE_CHAR_TOKENS[ch], ch, span)
            else:
                raise LexError(f"Unexpected character {ch!r}", span)

        yield Token(TokenType.EOF, None, self._span())

    def __iter__(self) -> Iterator[Token]:
        return self.scan()

    def _skip_whitespace_and_comments(self):
        """Skip whitespace and comments"""
        while not self._at_end():
            ch = self.source[self.pos]
            if ch in ' \t\r\n':
                self._advance()
            elif ch == '/' and self._peek(1) == '/':
                while not self._at_end() and self.source[self.pos] != '\n':
                    self._advance()
            elif ch == '/' and self._peek(1) == '*':
                start = self._span()
                self._advance(2)
                while True:
                    if self._at_end():
                        raise LexError("Unterminated block comment", start,
                                       code=E_UNTERMINATED_COMMENT)
                    if self.source[self.pos] == '*' and self._peek(1) == '/':
                        self._advance(2)
                        break
                    self._advance()
            else:
                break

    def _read_number(self, span: Span) -> Token:
        """Read numeric literal"""
        start = self.pos
        while not self._at_end() and _is_digit(self.source[self.pos]):
            self._advance()

        # A '.' only belongs to the number when a digit follows it
        if self._peek() == '.' and _is_digit(self._peek(1)):
            self._advance()
            while not self._at_end() and _is_digit(self.source[self.pos]):
                self._advance()
            return Token(TokenType.NUMBER, float(self.source[start:self.pos]), span)

        try:
            value = int(self.source[start:self.pos])
        except ValueError:
            raise LexError("Number literal too long", span) from None
        return Token(TokenType.NUMBER, value, span)

    def _read_string(self, span: Span) -> Token:
        """Read string literal"""
        self._advance()  # Skip opening quote
        chars = []

        while True:
            if self._at_end():
                raise LexError("Unterminated string literal", span,
                               code=E_UNTERMINATED_STRING)
            ch = self.source[self.pos]
            if ch == '"':
                self._advance()
                break
            if ch == '\\' and self._peek(1) in ESCAPES:
                chars.append(ESCAPES[self._peek(1)])
                self._advance(2)
            else:
                chars.append(ch)
                self._advance()

        return Token(TokenType.STRING, ''.join(chars), span)

    def _read_identifier(self, span: Span) -> Token:
        """Read identifier or keyword"""
        start = self.pos
        while not self._at_end():
            ch = self.source[self.pos]
            if _is_ident_char(ch):
                self._advance()
            else:
                break

        text = self.source[start:self.pos]
        token_type = KEYWORDS.get(text, TokenType.IDENTIFIER)
        if token_type == TokenType.TRUE:
            return Token(token_type, True, span)
        if token_type == TokenType.FALSE:
            return Token(token_type, False, span)
        if token_type == TokenType.NIL:
            return Token(token_type, None, span)
        return Token(token_type, text, span)

    # Tokenizer utilities
    def _at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Return the character at pos + offset, or '' past the end"""
        index = self.pos + offset
        if index < len(self.source):
            return self.source[index]
        return ''

    def _advance(self, count: int = 1):
        """Consume characters, keeping line and column current"""
        for _ in range(count):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _span(self) -> Span:
        return Span(self.line, self.column)


def tokenize(source: str) -> List[Token]:
    """Tokenize Mp source (convenience function)"""
    return MpTokenizer(source).tokenize()


__all__ = ['TokenType', 'Token', 'MpTokenizer', 'tokenize', 'KEYWORDS']
