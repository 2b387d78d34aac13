"""
Evaluation context: variable bindings and the function table.

A Context holds two independent namespaces. Variables are per scope; the
function table is shared by a top-level context and every child scope
created for a user-defined function call, so functions can call
themselves and any function defined before them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

from calcscript.config import EngineConfig
from calcscript.errors import FunctionAlreadyDefinedError
from calcscript.ir import Lines

logger = logging.getLogger(__name__)

NativeFunction = Callable[["Context", Sequence[float]], float]


@dataclass(frozen=True)
class BuiltinFunction:
    """A function implemented in Python with a fixed number of arguments."""

    arity: int
    func: NativeFunction

    def __call__(self, context: Context, args: Sequence[float]) -> float:
        return float(self.func(context, args))


@dataclass(frozen=True)
class UserDefinedFunction:
    """A function defined in calcscript source with ``fn``."""

    params: list[str] = field(default_factory=list)
    body: Lines = field(default_factory=Lines)

    @property
    def arity(self) -> int:
        return len(self.params)


Function = BuiltinFunction | UserDefinedFunction


class Context:
    """Mutable state for one program run or REPL session.

    A fresh Context is seeded with the ``pi`` and ``e`` constants and the
    builtin math functions.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        variables: dict[str, float] | None = None,
        functions: dict[str, Function] | None = None,
        depth: int = 0,
    ) -> None:
        # Imported here to keep stdlib free to import Context for type hints
        from calcscript.stdlib import BUILTINS, CONSTANTS

        self.config = config or EngineConfig()
        self.variables: dict[str, float] = dict(CONSTANTS) if variables is None else variables
        self.functions: dict[str, Function] = dict(BUILTINS) if functions is None else functions
        self.depth = depth

    def __repr__(self) -> str:
        return (
            f"Context(variables={len(self.variables)}, "
            f"functions={len(self.functions)}, depth={self.depth})"
        )

    # -- Variables --

    def get_var(self, name: str) -> float | None:
        return self.variables.get(name)

    def set_var(self, name: str, value: float) -> None:
        self.variables[name] = value

    # -- Functions --

    def get_function(self, name: str) -> Function | None:
        return self.functions.get(name)

    def add_function(self, name: str, function: Function) -> None:
        """Register a function for embedders.

        Raises:
            FunctionAlreadyDefinedError: If any function (builtin or
                user-defined) already has this name.
        """
        if name in self.functions:
            raise FunctionAlreadyDefinedError(name)
        logger.debug("Registered function %s/%d", name, function.arity)
        self.functions[name] = function

    def define_function(self, name: str, function: UserDefinedFunction) -> None:
        """Register a function from an ``fn`` statement.

        A later definition replaces an earlier user-defined function of the
        same name; builtins cannot be replaced.
        """
        if isinstance(self.functions.get(name), BuiltinFunction):
            raise FunctionAlreadyDefinedError(name)
        logger.debug("Defined function %s(%s)", name, ", ".join(function.params))
        self.functions[name] = function

    # -- Scopes --

    def child_scope(self, bindings: Mapping[str, float]) -> Context:
        """Create the isolated scope for one user-defined function call.

        The child sees only ``bindings``; it shares this context's function
        table and config.
        """
        return Context(
            self.config,
            variables=dict(bindings),
            functions=self.functions,
            depth=self.depth + 1,
        )
