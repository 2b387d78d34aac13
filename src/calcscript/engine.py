"""
Entry points for embedding calcscript.

Usage:
    from calcscript import Context, eval_source, format_number

    ctx = Context()
    eval_source("a = 2", ctx)
    print(format_number(eval_source("a ^ 10", ctx)))  # 1024
"""

from __future__ import annotations

import logging
import math

from calcscript.context import Context
from calcscript.evaluator import evaluate
from calcscript.parser import parse
from calcscript.tokenizer import tokenize

logger = logging.getLogger(__name__)

# Integral floats below this print without a fractional part
_MAX_EXACT_INTEGER = 2.0**53


def eval_source(source: str, context: Context) -> float:
    """Tokenize, parse and evaluate source text against a context.

    Args:
        source: A whole program or one REPL buffer.
        context: Mutated in place; bindings made before a failing
            statement are kept.

    Returns:
        The value of the last statement, or ``0.0`` for an empty program.

    Raises:
        CalcError: If any stage fails.
    """
    tokens = tokenize(source)
    program = parse(tokens)
    logger.debug("Evaluating %d statement(s)", sum(s is not None for s in program.statements))
    return evaluate(program, context)


def format_number(value: float) -> str:
    """Render a result for display.

    Integral values print without a decimal point (``2``, ``-4``); others
    use the shortest round-trip form (``0.125``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer() and abs(value) < _MAX_EXACT_INTEGER:
        return str(int(value))
    return repr(value)
