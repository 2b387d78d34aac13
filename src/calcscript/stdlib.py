"""
Builtin functions and constants seeded into every new Context.

Trigonometric, logarithmic and rounding functions take one argument;
``log(value, base)``, ``min`` and ``max`` take two. Inputs outside a
function's mathematical domain (``sqrt(-1)``, ``ln(0)``, ``asin(2)``)
raise DomainError; results too large for a float become ``inf``.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from calcscript.context import BuiltinFunction
from calcscript.errors import DomainError

if TYPE_CHECKING:
    from calcscript.context import Context

CONSTANTS: dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}


def _unary(name: str, func: Callable[[float], float]) -> BuiltinFunction:
    """Wrap a one-argument math function with domain checking."""

    def call(context: Context, args: Sequence[float]) -> float:
        x = args[0]
        try:
            return func(x)
        except ValueError:
            raise DomainError(f"{name}({x}) is undefined") from None
        except OverflowError:
            # exp, sinh and cosh overflow; only sinh keeps the input's sign
            return math.copysign(math.inf, x) if name == "sinh" else math.inf

    return BuiltinFunction(arity=1, func=call)


def _integral(func: Callable[[float], int]) -> Callable[[float], float]:
    """floor/ceil/round variant that passes inf and nan through unchanged."""

    def call(x: float) -> float:
        if not math.isfinite(x):
            return x
        return float(func(x))

    return call


def _round_half_away(x: float) -> int:
    # Python's round() is banker's rounding; calcscript rounds 2.5 to 3
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _sqrt(x: float) -> float:
    if x < 0:
        raise ValueError("negative input")
    return math.sqrt(x)


def _log(context: Context, args: Sequence[float]) -> float:
    value, base = args
    try:
        return math.log(value, base)
    except (ValueError, ZeroDivisionError):
        raise DomainError(f"log({value}, {base}) is undefined") from None


def _min(context: Context, args: Sequence[float]) -> float:
    a, b = args
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return min(a, b)


def _max(context: Context, args: Sequence[float]) -> float:
    a, b = args
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return max(a, b)


BUILTINS: dict[str, BuiltinFunction] = {
    # Trigonometric
    "sin": _unary("sin", math.sin),
    "cos": _unary("cos", math.cos),
    "tan": _unary("tan", math.tan),
    "asin": _unary("asin", math.asin),
    "acos": _unary("acos", math.acos),
    "atan": _unary("atan", math.atan),
    "sinh": _unary("sinh", math.sinh),
    "cosh": _unary("cosh", math.cosh),
    "tanh": _unary("tanh", math.tanh),
    # Logarithms
    "ln": _unary("ln", math.log),
    "log2": _unary("log2", math.log2),
    "log10": _unary("log10", math.log10),
    "log": BuiltinFunction(arity=2, func=_log),
    # Misc
    "abs": _unary("abs", abs),
    "floor": _unary("floor", _integral(math.floor)),
    "ceil": _unary("ceil", _integral(math.ceil)),
    "round": _unary("round", _integral(_round_half_away)),
    "sqrt": _unary("sqrt", _sqrt),
    "exp": _unary("exp", math.exp),
    "min": BuiltinFunction(arity=2, func=_min),
    "max": BuiltinFunction(arity=2, func=_max),
}
