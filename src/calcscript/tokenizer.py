"""
Tokenizer for calcscript.

Converts source text into a flat list of typed tokens. Newlines are
significant (they separate statements) and are emitted as NEWLINE tokens;
all other whitespace is skipped.
"""

from __future__ import annotations

import re
from enum import StrEnum, auto

from calcscript.errors import InvalidNumberError, UnexpectedCharacterError


class TokenKind(StrEnum):
    """Token types for calcscript."""

    # Literals and names
    NUMBER = auto()
    IDENT = auto()

    # Keywords
    FN = auto()
    IF = auto()
    ELSE = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    CARET = auto()
    EQUAL = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    NEWLINE = auto()


class Token:
    """A single token with its 1-based source position."""

    __slots__ = ("kind", "value", "line", "column")

    def __init__(self, kind: TokenKind, value: str, line: int = 1, column: int = 1) -> None:
        self.kind = kind
        self.value = value
        self.line = line
        self.column = column

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, line={self.line}, column={self.column})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.kind == other.kind and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.kind, self.value))

    def describe(self) -> str:
        """Short human-readable form used in error messages."""
        if self.kind == TokenKind.NEWLINE:
            return "newline"
        if self.kind in (TokenKind.NUMBER, TokenKind.IDENT):
            return f"{self.kind} {self.value!r}"
        return repr(self.value)


_KEYWORDS: dict[str, TokenKind] = {
    "fn": TokenKind.FN,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
}

_SINGLE_CHAR: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "^": TokenKind.CARET,
    "=": TokenKind.EQUAL,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ",": TokenKind.COMMA,
}

# Maximal run of digits and points; validated after matching
_NUMBER_RE = re.compile(r"[0-9.]+")
# Identifier: letter or underscore followed by alphanumerics/underscores
_IDENT_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")


def tokenize(source: str) -> list[Token]:
    """Tokenize source text into a list of tokens.

    Raises:
        InvalidNumberError: For literals like ``..``, ``1..`` or ``2.3.4``.
        UnexpectedCharacterError: For any character outside the language.
    """
    tokens: list[Token] = []
    i = 0
    n = len(source)
    line = 1
    line_start = 0

    while i < n:
        c = source[i]
        column = i - line_start + 1

        if c in " \t\r":
            i += 1
            continue

        if c == "\n":
            tokens.append(Token(TokenKind.NEWLINE, c, line, column))
            i += 1
            line += 1
            line_start = i
            continue

        if (m := _NUMBER_RE.match(source, i)) is not None:
            text = m.group(0)
            if text.count(".") > 1 or text == ".":
                raise InvalidNumberError(text, line, column)
            tokens.append(Token(TokenKind.NUMBER, text, line, column))
            i = m.end()
            continue

        if (m := _IDENT_RE.match(source, i)) is not None:
            word = m.group(0)
            tokens.append(Token(_KEYWORDS.get(word, TokenKind.IDENT), word, line, column))
            i = m.end()
            continue

        if c in _SINGLE_CHAR:
            tokens.append(Token(_SINGLE_CHAR[c], c, line, column))
            i += 1
            continue

        raise UnexpectedCharacterError(c, line, column)

    return tokens
