"""
calcscript - a small numeric scripting language.

Tokenizer, parser, and evaluator for programs made of arithmetic,
variables, functions and conditionals.

Usage:
    from calcscript import Context, eval_source

    ctx = Context()
    eval_source("fn sq(x) { x * x }\nsq(4) + 1", ctx)
    # 17.0
"""

from __future__ import annotations

from calcscript._version import get_version
from calcscript.config import EngineConfig, load_config
from calcscript.context import BuiltinFunction, Context, Function, UserDefinedFunction
from calcscript.engine import eval_source, format_number
from calcscript.errors import (
    CalcError,
    DivisionByZeroError,
    DomainError,
    DuplicateParameterNameError,
    EvalError,
    EvaluationTooDeepError,
    ExpectedIdentifierError,
    ExpectedTokenError,
    FunctionAlreadyDefinedError,
    InvalidNumberError,
    ModuloByZeroError,
    NestingTooDeepError,
    NoTokensLeftError,
    ParseError,
    RecursionLimitError,
    TokenizeError,
    UndefinedFunctionError,
    UndefinedVariableError,
    UnexpectedCharacterError,
    UnexpectedTokenError,
    WrongArityError,
)
from calcscript.evaluator import evaluate
from calcscript.parser import parse, parse_source
from calcscript.tokenizer import Token, TokenKind, tokenize

__version__ = get_version()

__all__ = [
    "__version__",
    # Pipeline
    "tokenize",
    "parse",
    "parse_source",
    "evaluate",
    "eval_source",
    "format_number",
    "Token",
    "TokenKind",
    # Context
    "Context",
    "Function",
    "BuiltinFunction",
    "UserDefinedFunction",
    "EngineConfig",
    "load_config",
    # Errors
    "CalcError",
    "TokenizeError",
    "InvalidNumberError",
    "UnexpectedCharacterError",
    "ParseError",
    "UnexpectedTokenError",
    "ExpectedTokenError",
    "ExpectedIdentifierError",
    "NoTokensLeftError",
    "NestingTooDeepError",
    "EvalError",
    "UndefinedVariableError",
    "UndefinedFunctionError",
    "WrongArityError",
    "DuplicateParameterNameError",
    "FunctionAlreadyDefinedError",
    "DivisionByZeroError",
    "ModuloByZeroError",
    "DomainError",
    "RecursionLimitError",
    "EvaluationTooDeepError",
]
