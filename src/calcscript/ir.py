"""
Abstract syntax tree for calcscript programs.

Nodes are frozen pydantic models; every node owns its children outright,
so a parsed program is a tree that is never mutated after parsing.

Supports:
- Arithmetic: +, -, *, /, %, ^ and unary minus
- Grouping: ( ... )
- Variables and assignment: a = 2
- Function calls and definitions: f(1, 2), fn f(a, b) { a + b }
- Conditionals: if (cond) { ... } else { ... }
"""

from __future__ import annotations

import textwrap
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary arithmetic operators."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "^"


# ---------------------------------------------------------------------------
# Expression nodes
# ---------------------------------------------------------------------------


class Number(BaseModel):
    """A numeric literal, kept as source text until evaluation."""

    text: str = Field(description="Literal text as written, e.g. '1.', '.5'")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.text


class Variable(BaseModel):
    name: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Node
    right: Node

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


class UnaryMinus(BaseModel):
    operand: Node

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"-{self.operand}"


class Brackets(BaseModel):
    """
    Explicit grouping written by the user.

    Evaluates to its inner expression; kept so the tree records where the
    source had parentheses.
    """

    inner: Node

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.inner})"


class FunctionCall(BaseModel):
    """Function call: name(arg1, arg2, ...)."""

    name: str = Field(description="Function name")
    args: list[Node] = Field(default_factory=list, description="Arguments")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        args_str = ", ".join(str(a) for a in self.args)
        return f"{self.name}({args_str})"


# ---------------------------------------------------------------------------
# Statement nodes
# ---------------------------------------------------------------------------


class Assign(BaseModel):
    name: str
    value: Node

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.name} = {self.value}"


class Lines(BaseModel):
    """
    A block of statements: a whole program or a function/if body.

    Blank source lines are kept as ``None`` entries.
    """

    statements: list[Node | None] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "\n".join(str(s) for s in self.statements if s is not None)


class FunctionDefinition(BaseModel):
    """fn name(params) { body }"""

    name: str = Field(description="Function name")
    params: list[str] = Field(default_factory=list, description="Parameter names in order")
    body: Lines

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"fn {self.name}({', '.join(self.params)}) {_render_block(self.body)}"


class IfStatement(BaseModel):
    """if (condition) { body } else { else_body }"""

    condition: Node
    body: Lines
    else_body: Lines | None = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        text = f"if ({self.condition}) {_render_block(self.body)}"
        if self.else_body is not None:
            text += f" else {_render_block(self.else_body)}"
        return text


def _render_block(block: Lines) -> str:
    inner = str(block)
    if not inner:
        return "{}"
    return "{\n" + textwrap.indent(inner, "    ") + "\n}"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Node = (
    Lines
    | Number
    | Variable
    | BinaryExpr
    | UnaryMinus
    | Brackets
    | Assign
    | FunctionCall
    | FunctionDefinition
    | IfStatement
)

# Rebuild models for recursive forward references
BinaryExpr.model_rebuild()
UnaryMinus.model_rebuild()
Brackets.model_rebuild()
FunctionCall.model_rebuild()
Assign.model_rebuild()
Lines.model_rebuild()
FunctionDefinition.model_rebuild()
IfStatement.model_rebuild()
