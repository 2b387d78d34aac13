"""
Tree-walking evaluator for calcscript.

Evaluates a parsed program against a Context. All values are floats.
Statements are evaluated in order and their bindings are written to the
context as they succeed, so an error leaves earlier bindings in place.
"""

from __future__ import annotations

import logging
import math
import sys
from collections.abc import Iterator
from contextlib import contextmanager

from calcscript.context import BuiltinFunction, Context, UserDefinedFunction
from calcscript.errors import (
    DivisionByZeroError,
    DuplicateParameterNameError,
    EvalError,
    EvaluationTooDeepError,
    ModuloByZeroError,
    RecursionLimitError,
    UndefinedFunctionError,
    UndefinedVariableError,
    WrongArityError,
)
from calcscript.ir import (
    Assign,
    BinaryExpr,
    BinaryOp,
    Brackets,
    FunctionCall,
    FunctionDefinition,
    IfStatement,
    Lines,
    Node,
    Number,
    UnaryMinus,
    Variable,
)

logger = logging.getLogger(__name__)

# Interpreter frames one level of user-function nesting may take
_FRAMES_PER_CALL = 24
_BASE_FRAMES = 200


def evaluate(node: Node, context: Context) -> float:
    """Evaluate an AST node against a context.

    Args:
        node: Parsed program (usually ``Lines``) or any sub-node.
        context: Variables and functions; mutated by assignments and
            function definitions.

    Returns:
        The value of the node. For a block, the value of its last
        statement, or ``0.0`` if it has none.

    Raises:
        EvalError: If evaluation fails.
    """
    with _stack_headroom(context.config.max_call_depth):
        try:
            return _interpret(node, context)
        except RecursionError:
            raise EvaluationTooDeepError() from None


@contextmanager
def _stack_headroom(max_call_depth: int) -> Iterator[None]:
    """Raise the interpreter recursion limit to fit ``max_call_depth`` calls."""
    previous = sys.getrecursionlimit()
    needed = max_call_depth * _FRAMES_PER_CALL + _BASE_FRAMES
    if needed > previous:
        logger.debug("Raising recursion limit from %d to %d", previous, needed)
        sys.setrecursionlimit(needed)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def _interpret(node: Node, ctx: Context) -> float:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(node, Lines):
        return _interpret_lines(node, ctx)

    if isinstance(node, Number):
        # The tokenizer only produces well-formed literals
        return float(node.text)

    if isinstance(node, Variable):
        value = ctx.get_var(node.name)
        if value is None:
            raise UndefinedVariableError(node.name)
        return value

    if isinstance(node, BinaryExpr):
        return _interpret_binary(node, ctx)

    if isinstance(node, UnaryMinus):
        return -_interpret(node.operand, ctx)

    if isinstance(node, Brackets):
        return _interpret(node.inner, ctx)

    if isinstance(node, Assign):
        value = _interpret(node.value, ctx)
        ctx.set_var(node.name, value)
        return value

    if isinstance(node, FunctionCall):
        return _interpret_call(node, ctx)

    if isinstance(node, FunctionDefinition):
        return _interpret_definition(node, ctx)

    if isinstance(node, IfStatement):
        return _interpret_if(node, ctx)

    raise EvalError(f"Unknown node type: {type(node).__name__}")


def _interpret_lines(node: Lines, ctx: Context) -> float:
    result = 0.0
    for statement in node.statements:
        if statement is not None:
            result = _interpret(statement, ctx)
    return result


def _interpret_binary(node: BinaryExpr, ctx: Context) -> float:
    """Evaluate a binary expression with IEEE-754 semantics."""
    left = _interpret(node.left, ctx)
    right = _interpret(node.right, ctx)

    if node.op == BinaryOp.ADD:
        return left + right
    if node.op == BinaryOp.SUB:
        return left - right
    if node.op == BinaryOp.MUL:
        return left * right
    if node.op == BinaryOp.DIV:
        return _divide(left, right, ctx)
    if node.op == BinaryOp.MOD:
        return _remainder(left, right)
    if node.op == BinaryOp.POW:
        return _power(left, right)

    raise EvalError(f"Unknown binary op: {node.op}")


def _divide(left: float, right: float, ctx: Context) -> float:
    if right != 0:
        return left / right
    if ctx.config.strict_division:
        raise DivisionByZeroError()
    if left == 0 or math.isnan(left):
        return math.nan
    # Signed zero in the divisor picks the sign of the infinity
    return math.copysign(math.inf, left) * math.copysign(1.0, right)


def _remainder(left: float, right: float) -> float:
    if right == 0:
        raise ModuloByZeroError()
    if math.isinf(left):
        # inf % x is NaN
        return math.nan
    # Sign follows the dividend: 7 % -3 == 1, -7 % 3 == -1
    return math.fmod(left, right)


def _power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except ValueError:
        if base == 0:
            return _zero_to_negative_power(base, exponent)
        # Negative base with a fractional exponent
        return math.nan
    except OverflowError:
        if base < 0 and exponent.is_integer() and exponent % 2 == 1:
            return -math.inf
        return math.inf


def _zero_to_negative_power(base: float, exponent: float) -> float:
    # pow(-0.0, -3) is -inf; every other zero base gives +inf
    if exponent.is_integer() and exponent % 2 == 1:
        return math.copysign(math.inf, base)
    return math.inf


def _interpret_call(node: FunctionCall, ctx: Context) -> float:
    """Resolve, arity-check, evaluate arguments, then invoke."""
    function = ctx.get_function(node.name)
    if function is None:
        raise UndefinedFunctionError(node.name)
    if len(node.args) != function.arity:
        raise WrongArityError(node.name, function.arity, len(node.args))

    # Arguments see the caller's variables
    args = [_interpret(arg, ctx) for arg in node.args]

    if isinstance(function, BuiltinFunction):
        return function(ctx, args)

    return _call_user_function(node.name, function, args, ctx)


def _call_user_function(
    name: str, function: UserDefinedFunction, args: list[float], ctx: Context
) -> float:
    if ctx.depth >= ctx.config.max_call_depth:
        raise RecursionLimitError(name, ctx.config.max_call_depth)
    scope = ctx.child_scope(dict(zip(function.params, args, strict=True)))
    logger.debug("Calling %s at depth %d", name, scope.depth)
    return _interpret_lines(function.body, scope)


def _interpret_definition(node: FunctionDefinition, ctx: Context) -> float:
    seen: set[str] = set()
    for param in node.params:
        if param in seen:
            raise DuplicateParameterNameError(param)
        seen.add(param)
    ctx.define_function(node.name, UserDefinedFunction(params=list(node.params), body=node.body))
    return 0.0


def _interpret_if(node: IfStatement, ctx: Context) -> float:
    """Run the body when the condition is nonzero, else the else-body."""
    if _interpret(node.condition, ctx) != 0:
        return _interpret_lines(node.body, ctx)
    if node.else_body is not None:
        return _interpret_lines(node.else_body, ctx)
    return 0.0
