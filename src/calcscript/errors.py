"""
Error types for calcscript tokenizing, parsing, and evaluation.

Each pipeline stage has its own family so callers can tell a malformed
literal from a syntax error from a runtime failure:

    CalcError
    ├── TokenizeError
    ├── ParseError
    └── EvalError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from calcscript.tokenizer import Token


class CalcError(Exception):
    """Base exception for all calcscript errors."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with source location if available."""
        if self.line is not None and self.column is not None:
            return f"line {self.line}, column {self.column}: {self.message}"
        return self.message


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


class TokenizeError(CalcError):
    """Raised when source text cannot be split into tokens."""


class InvalidNumberError(TokenizeError):
    """A numeric literal with more than one decimal point or no digits."""

    def __init__(self, text: str, line: int | None = None, column: int | None = None):
        self.text = text
        super().__init__(f"Invalid number: {text!r}", line, column)


class UnexpectedCharacterError(TokenizeError):
    def __init__(self, char: str, line: int | None = None, column: int | None = None):
        self.char = char
        super().__init__(f"Unexpected character: {char!r}", line, column)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class ParseError(CalcError):
    """
    Raised when a token sequence does not form a valid program.

    Examples:
    - Two expressions on one line
    - Unmatched parentheses or braces
    - Malformed parameter lists
    """


class UnexpectedTokenError(ParseError):
    def __init__(self, token: Token):
        self.token = token
        super().__init__(f"Unexpected token: {token.describe()}", token.line, token.column)


class ExpectedTokenError(ParseError):
    def __init__(self, expected: str, found: Token | None = None):
        self.expected = expected
        self.found = found
        if found is None:
            super().__init__(f"Expected {expected!r}, got end of input")
        else:
            super().__init__(
                f"Expected {expected!r}, got {found.describe()}", found.line, found.column
            )


class ExpectedIdentifierError(ParseError):
    def __init__(self, found: Token | None = None):
        self.found = found
        if found is None:
            super().__init__("Expected identifier, got end of input")
        else:
            super().__init__(
                f"Expected identifier, got {found.describe()}", found.line, found.column
            )


class NoTokensLeftError(ParseError):
    def __init__(self) -> None:
        super().__init__("Unexpected end of input")


class NestingTooDeepError(ParseError):
    """Brackets, minus signs or blocks nested beyond what the parser can follow."""

    def __init__(self, token: Token | None = None):
        self.token = token
        if token is None:
            super().__init__("Program is nested too deeply to parse")
        else:
            super().__init__("Program is nested too deeply to parse", token.line, token.column)


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------


class EvalError(CalcError):
    """Raised when a parsed program fails at runtime."""


class UndefinedVariableError(EvalError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Undefined variable: {name}")


class UndefinedFunctionError(EvalError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Undefined function: {name}()")


class WrongArityError(EvalError):
    def __init__(self, name: str, expected: int, got: int):
        self.name = name
        self.expected = expected
        self.got = got
        plural = "argument" if expected == 1 else "arguments"
        super().__init__(f"{name}() takes exactly {expected} {plural}, got {got}")


class DuplicateParameterNameError(EvalError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Duplicate parameter name: {name}")


class FunctionAlreadyDefinedError(EvalError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Function already defined: {name}()")


class DivisionByZeroError(EvalError):
    def __init__(self) -> None:
        super().__init__("Division by zero")


class ModuloByZeroError(EvalError):
    def __init__(self) -> None:
        super().__init__("Modulo by zero")


class DomainError(EvalError):
    """A builtin was called outside its mathematical domain (e.g. sqrt(-1))."""

    def __init__(self, description: str):
        self.description = description
        super().__init__(f"Domain error: {description}")


class RecursionLimitError(EvalError):
    def __init__(self, name: str, limit: int):
        self.name = name
        self.limit = limit
        super().__init__(f"Maximum call depth of {limit} exceeded in {name}()")


class EvaluationTooDeepError(EvalError):
    """Evaluation ran out of interpreter stack before reaching a call-depth limit."""

    def __init__(self) -> None:
        super().__init__("Program is nested too deeply to evaluate")
