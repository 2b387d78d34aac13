"""Tests for the calcscript parser."""

from __future__ import annotations

import pytest

from calcscript.errors import (
    ExpectedIdentifierError,
    ExpectedTokenError,
    NestingTooDeepError,
    NoTokensLeftError,
    ParseError,
    UnexpectedTokenError,
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
    Number,
    UnaryMinus,
    Variable,
)
from calcscript.parser import parse, parse_source
from calcscript.tokenizer import tokenize


def parse_one(source: str):
    """Parse source that holds a single statement and return it."""
    program = parse_source(source)
    statements = [s for s in program.statements if s is not None]
    assert len(statements) == 1
    return statements[0]


class TestParserBlocks:
    """Programs are parsed into a single Lines block."""

    def test_empty(self) -> None:
        assert parse([]) == Lines(statements=[])

    def test_blank_lines_produce_none(self) -> None:
        program = parse_source("\n42\n")
        assert program.statements == [None, Number(text="42"), None]

    def test_only_newlines(self) -> None:
        program = parse_source("\n\n\n")
        assert program.statements == [None, None, None]

    def test_multiple_statements(self) -> None:
        program = parse_source("a = 2\nb = 3\na + b")
        assert [type(s) for s in program.statements if s is not None] == [
            Assign,
            Assign,
            BinaryExpr,
        ]

    def test_parse_takes_tokens(self) -> None:
        assert parse(tokenize("1")) == parse_source("1")

    def test_stray_closing_brace(self) -> None:
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("1\n}")
        assert exc_info.value.token.value == "}"


class TestStatementSeparation:
    """Two statements on one line are rejected."""

    @pytest.mark.parametrize(
        "source",
        [
            "1 + 1 2 + 2",
            "1 2",
            "(1 * 3) 2",
            "a = 1 b = 2",
            "fn add(a, b) { a + b } fn sub(a, b) { a - b }",
            "if (1){ 1 } if (2){ 2 }",
            "a b = 2",
            "2 = 2",
        ],
    )
    def test_missing_newline(self, source: str) -> None:
        with pytest.raises(UnexpectedTokenError):
            parse_source(source)

    def test_newline_separated_expressions(self) -> None:
        program = parse_source("1\n2")
        assert program.statements == [Number(text="1"), None, Number(text="2")]


class TestParserArithmetic:
    """Parser handles arithmetic with correct precedence."""

    def test_addition(self) -> None:
        expr = parse_one("a + b")
        assert expr == BinaryExpr(op=BinaryOp.ADD, left=Variable(name="a"), right=Variable(name="b"))

    def test_mul_before_add(self) -> None:
        # a + b * c should be a + (b * c)
        expr = parse_one("a + b * c")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.ADD
        assert isinstance(expr.right, BinaryExpr)
        assert expr.right.op == BinaryOp.MUL

    def test_power_before_mul(self) -> None:
        assert str(parse_one("1 + 2 * 3 ^ 4 + 5")) == "((1 + (2 * (3 ^ 4))) + 5)"

    def test_mul_chain_after_add(self) -> None:
        assert str(parse_one("1 + 2 * 3 * 4")) == "(1 + ((2 * 3) * 4))"

    def test_chained_subtraction_left_associative(self) -> None:
        assert str(parse_one("a - b - c")) == "((a - b) - c)"

    def test_modulo_precedence(self) -> None:
        assert str(parse_one("2 + 3 * 4 % 5")) == "(2 + ((3 * 4) % 5))"

    def test_power_left_associative(self) -> None:
        # Deliberately (2 ^ 3) ^ 2, not 2 ^ (3 ^ 2)
        assert str(parse_one("2 ^ 3 ^ 2")) == "((2 ^ 3) ^ 2)"

    def test_parentheses_kept(self) -> None:
        expr = parse_one("(a + b) * c")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.MUL
        assert isinstance(expr.left, Brackets)
        assert expr.left.inner.op == BinaryOp.ADD

    @pytest.mark.parametrize("source", ["-", "* 2", "2 +", "4 ^", "^ 3", "2 %", "% 3", "2*+-2"])
    def test_incomplete_expressions(self, source: str) -> None:
        with pytest.raises(ParseError):
            parse_source(source)

    def test_missing_operand_at_end(self) -> None:
        with pytest.raises(NoTokensLeftError):
            parse_source("2 +")


class TestUnaryMinus:
    """Prefix minus binds to a single operand."""

    def test_simple(self) -> None:
        assert parse_one("-x") == UnaryMinus(operand=Variable(name="x"))

    def test_chain(self) -> None:
        expr = parse_one("2---2")
        assert expr == BinaryExpr(
            op=BinaryOp.SUB,
            left=Number(text="2"),
            right=UnaryMinus(operand=UnaryMinus(operand=Number(text="2"))),
        )

    def test_binds_tighter_than_power(self) -> None:
        assert str(parse_one("-1 ^ 4")) == "(-1 ^ 4)"
        expr = parse_one("-1 ^ 4")
        assert isinstance(expr, BinaryExpr)
        assert isinstance(expr.left, UnaryMinus)

    def test_does_not_absorb_binary_operator(self) -> None:
        expr = parse_one("-2 + 2")
        assert isinstance(expr, BinaryExpr)
        assert expr.op == BinaryOp.ADD

    def test_power_with_negative_exponent(self) -> None:
        expr = parse_one("(-1) ^ -3")
        assert isinstance(expr, BinaryExpr)
        assert expr.right == UnaryMinus(operand=Number(text="3"))

    def test_minus_before_group(self) -> None:
        expr = parse_one("-(2 + 2)")
        assert isinstance(expr, UnaryMinus)
        assert isinstance(expr.operand, Brackets)


class TestParentheses:
    """Grouping must be balanced and non-empty."""

    def test_unclosed(self) -> None:
        with pytest.raises(ExpectedTokenError):
            parse_source("-(2 + 2")

    def test_unopened(self) -> None:
        with pytest.raises(UnexpectedTokenError):
            parse_source("-2 + 2)")

    def test_empty(self) -> None:
        with pytest.raises(UnexpectedTokenError):
            parse_source("()")

    def test_empty_assignment_target(self) -> None:
        with pytest.raises(UnexpectedTokenError):
            parse_source("() = 2")


class TestNewlinesInExpressions:
    """Newlines are never skipped inside an expression."""

    @pytest.mark.parametrize(
        "source",
        ["1 + \n 2", "sin(pi\n/2)", "sin(\npi/2)", "1 * (2 + \n 3)", "a = \n2"],
    )
    def test_rejected(self, source: str) -> None:
        with pytest.raises(ParseError):
            parse_source(source)


class TestAssignment:
    """Assignments are detected by look-ahead."""

    def test_assignment(self) -> None:
        assert parse_one("a = 2") == Assign(name="a", value=Number(text="2"))

    def test_assignment_of_expression(self) -> None:
        expr = parse_one("b = a + 1")
        assert isinstance(expr, Assign)
        assert isinstance(expr.value, BinaryExpr)

    def test_operator_as_target(self) -> None:
        with pytest.raises(UnexpectedTokenError):
            parse_source("* = 2")


class TestFunctionCall:
    """Parser handles function calls."""

    def test_no_args(self) -> None:
        assert parse_one("f()") == FunctionCall(name="f", args=[])

    def test_multiple_args(self) -> None:
        expr = parse_one("add(1, add(2, 3))")
        assert isinstance(expr, FunctionCall)
        assert len(expr.args) == 2
        assert isinstance(expr.args[1], FunctionCall)

    def test_call_inside_expression(self) -> None:
        assert str(parse_one("2 * sin(pi / 2)")) == "(2 * sin((pi / 2)))"

    def test_trailing_comma(self) -> None:
        with pytest.raises(ExpectedTokenError):
            parse_source("add(1,)")

    def test_leading_comma(self) -> None:
        with pytest.raises(UnexpectedTokenError):
            parse_source("add(,1)")

    def test_missing_comma(self) -> None:
        with pytest.raises(ExpectedTokenError):
            parse_source("add(1 1)")


class TestFunctionDefinition:
    """Parser handles fn definitions."""

    def test_definition(self) -> None:
        stmt = parse_one("fn add(a, b) {\n  a + b\n}")
        assert isinstance(stmt, FunctionDefinition)
        assert stmt.name == "add"
        assert stmt.params == ["a", "b"]
        assert [s for s in stmt.body.statements if s is not None] == [
            BinaryExpr(op=BinaryOp.ADD, left=Variable(name="a"), right=Variable(name="b"))
        ]

    def test_one_liner(self) -> None:
        stmt = parse_one("fn one_liner(a, b) { a + b }")
        assert isinstance(stmt, FunctionDefinition)

    def test_empty_body(self) -> None:
        stmt = parse_one("fn empty_body() {}")
        assert isinstance(stmt, FunctionDefinition)
        assert stmt.params == []
        assert stmt.body == Lines(statements=[])

    def test_newline_before_brace(self) -> None:
        stmt = parse_one("fn f(a)\n{\n a\n}")
        assert isinstance(stmt, FunctionDefinition)

    def test_duplicate_params_parse(self) -> None:
        # Rejected at definition time, not by the parser
        stmt = parse_one("fn f(a, a) { a }")
        assert stmt.params == ["a", "a"]

    @pytest.mark.parametrize(
        "source",
        [
            "fn add(a, {b) a + b }",
            "fn trailing_comma(a, b,) { a + b }",
            "fn leading_comma(, a, b) { a + b }",
            "fn no_comma(a b) { a + b }",
            "fn contains_expression(a, b, 1 + 1) { a + b }",
            "fn f(a,\nb) { a }",
        ],
    )
    def test_bad_parameter_list(self, source: str) -> None:
        with pytest.raises(ExpectedTokenError):
            parse_source(source)

    def test_missing_name(self) -> None:
        with pytest.raises(ExpectedIdentifierError):
            parse_source("fn (a) { a }")

    def test_unclosed_body(self) -> None:
        with pytest.raises(ExpectedTokenError):
            parse_source("fn f() {\n 1\n")


class TestIfStatement:
    """Parser handles if/else."""

    def test_if(self) -> None:
        stmt = parse_one("if (a) {\n  b = 1\n}")
        assert isinstance(stmt, IfStatement)
        assert stmt.condition == Variable(name="a")
        assert stmt.else_body is None

    def test_if_else(self) -> None:
        stmt = parse_one("if (0) { a = 2 } else { a = 3 }")
        assert isinstance(stmt, IfStatement)
        assert stmt.else_body is not None
        assert stmt.else_body.statements == [Assign(name="a", value=Number(text="3"))]

    def test_else_on_next_line(self) -> None:
        stmt = parse_one("if (0) {\n  1\n}\nelse\n{\n  2\n}")
        assert isinstance(stmt, IfStatement)
        assert stmt.else_body is not None

    def test_trailing_newlines_left_for_block(self) -> None:
        program = parse_source("if (1) { 1 }\n\n2")
        assert isinstance(program.statements[0], IfStatement)
        assert program.statements[-1] == Number(text="2")

    def test_condition_requires_parentheses(self) -> None:
        with pytest.raises(ExpectedTokenError):
            parse_source("if 1 { 2 }")

    def test_else_if_not_supported(self) -> None:
        with pytest.raises(ExpectedTokenError):
            parse_source("if (0) { 1 } else if (1) { 2 }")

    def test_dangling_else(self) -> None:
        with pytest.raises(UnexpectedTokenError):
            parse_source("else { 1 }")


class TestRendering:
    """AST nodes render back to readable source."""

    def test_function_definition(self) -> None:
        stmt = parse_one("fn f(a, b) { a + b }")
        assert str(stmt) == "fn f(a, b) {\n    (a + b)\n}"

    def test_if_else(self) -> None:
        stmt = parse_one("if (x) {} else { y = 1 }")
        assert str(stmt) == "if (x) {} else {\n    y = 1\n}"


class TestNestingDepth:
    """Pathological nesting fails with a parse error."""

    def test_deep_parentheses(self) -> None:
        with pytest.raises(NestingTooDeepError):
            parse_source("(" * 5000 + "1" + ")" * 5000)

    def test_long_minus_chain(self) -> None:
        with pytest.raises(ParseError):
            parse_source("-" * 5000 + "1")

    def test_moderate_nesting(self) -> None:
        expr = parse_one("(" * 50 + "1" + ")" * 50)
        assert isinstance(expr, Brackets)
