"""
Recursive descent parser for calcscript.

Grammar:
    program     → block EOF
    block       → (NEWLINE | statement (NEWLINE | &"}" | EOF))*
    statement   → fn_def | if_stmt | assignment | expr
    fn_def      → "fn" IDENT "(" (IDENT ("," IDENT)*)? ")" NEWLINE* "{" block "}"
    if_stmt     → "if" "(" expr ")" NEWLINE* "{" block "}"
                  (NEWLINE* "else" NEWLINE* "{" block "}")?
    assignment  → IDENT "=" expr
    expr        → operand (binop expr)*          precedence climbing, see below
    operand     → "-" operand | atom
    atom        → NUMBER | IDENT | call | "(" expr ")"
    call        → IDENT "(" (expr ("," expr)*)? ")"

Binary operators, tighter binding last:
    + -      1
    * / %    2
    ^        3

All binary operators are left-associative, including ``^``:
``2 ^ 3 ^ 2`` parses as ``(2 ^ 3) ^ 2``. A prefix minus binds to a single
operand only, so ``-1 ^ 4`` is ``(-1) ^ 4``.
"""

from __future__ import annotations

from calcscript.errors import (
    ExpectedIdentifierError,
    ExpectedTokenError,
    NestingTooDeepError,
    NoTokensLeftError,
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
    Node,
    Number,
    UnaryMinus,
    Variable,
)
from calcscript.tokenizer import Token, TokenKind, tokenize

_BINARY_OPS: dict[TokenKind, tuple[BinaryOp, int]] = {
    TokenKind.PLUS: (BinaryOp.ADD, 1),
    TokenKind.MINUS: (BinaryOp.SUB, 1),
    TokenKind.STAR: (BinaryOp.MUL, 2),
    TokenKind.SLASH: (BinaryOp.DIV, 2),
    TokenKind.PERCENT: (BinaryOp.MOD, 2),
    TokenKind.CARET: (BinaryOp.POW, 3),
}

# Above every binary operator: the operand of a prefix minus never absorbs
# a binary operation, only further minus signs and one atom.
_UNARY_MINUS_PRECEDENCE = 4

_EXPECTED_TEXT: dict[TokenKind, str] = {
    TokenKind.LPAREN: "(",
    TokenKind.RPAREN: ")",
    TokenKind.LBRACE: "{",
    TokenKind.RBRACE: "}",
    TokenKind.EQUAL: "=",
    TokenKind.FN: "fn",
    TokenKind.IF: "if",
    TokenKind.ELSE: "else",
}


class _Parser:
    """Recursive descent parser over a token list."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Token | None:
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return None

    def check(self, kind: TokenKind, offset: int = 0) -> bool:
        tok = self.peek(offset)
        return tok is not None and tok.kind == kind

    def advance(self) -> Token:
        tok = self.peek()
        if tok is None:
            raise NoTokensLeftError()
        self.pos += 1
        return tok

    def expect(self, kind: TokenKind) -> Token:
        tok = self.peek()
        if tok is None or tok.kind != kind:
            raise ExpectedTokenError(_EXPECTED_TEXT.get(kind, str(kind)), tok)
        self.pos += 1
        return tok

    def expect_identifier(self) -> str:
        tok = self.peek()
        if tok is None or tok.kind != TokenKind.IDENT:
            raise ExpectedIdentifierError(tok)
        self.pos += 1
        return tok.value

    def skip_newlines(self) -> None:
        while self.check(TokenKind.NEWLINE):
            self.advance()

    # -- Program structure --

    def parse_program(self) -> Lines:
        """block, then every token must have been consumed."""
        lines = self.parse_block()
        tok = self.peek()
        if tok is not None:
            # parse_block stops at a "}" it cannot close
            raise UnexpectedTokenError(tok)
        return lines

    def parse_block(self) -> Lines:
        """Statements separated by newlines, up to a '}' or end of input."""
        statements: list[Node | None] = []
        while (tok := self.peek()) is not None:
            if tok.kind == TokenKind.NEWLINE:
                self.advance()
                statements.append(None)
                continue
            if tok.kind == TokenKind.RBRACE:
                break
            statements.append(self.parse_statement())
            self._expect_statement_end()
        return Lines(statements=statements)

    def _expect_statement_end(self) -> None:
        tok = self.peek()
        if tok is None or tok.kind in (TokenKind.NEWLINE, TokenKind.RBRACE):
            return
        raise UnexpectedTokenError(tok)

    def parse_statement(self) -> Node:
        if self.check(TokenKind.FN):
            return self.parse_function_definition()
        if self.check(TokenKind.IF):
            return self.parse_if_statement()
        if self.check(TokenKind.IDENT) and self.check(TokenKind.EQUAL, 1):
            return self.parse_assignment()
        return self.parse_expression()

    def parse_assignment(self) -> Assign:
        """IDENT '=' expr"""
        name = self.expect_identifier()
        self.expect(TokenKind.EQUAL)
        return Assign(name=name, value=self.parse_expression())

    def parse_function_definition(self) -> FunctionDefinition:
        """'fn' IDENT '(' params ')' '{' block '}'"""
        self.expect(TokenKind.FN)
        name = self.expect_identifier()
        self.expect(TokenKind.LPAREN)

        params: list[str] = []
        while self.check(TokenKind.IDENT):
            params.append(self.advance().value)
            # A comma must be followed by another name; otherwise the
            # closing-paren check below reports the problem.
            if self.check(TokenKind.COMMA) and not self.check(TokenKind.RPAREN, 1):
                self.advance()
            else:
                break
        self.expect(TokenKind.RPAREN)

        body = self._parse_braced_body()
        return FunctionDefinition(name=name, params=params, body=body)

    def parse_if_statement(self) -> IfStatement:
        """'if' '(' expr ')' '{' block '}' ('else' '{' block '}')?"""
        self.expect(TokenKind.IF)
        self.expect(TokenKind.LPAREN)
        condition = self.parse_expression()
        self.expect(TokenKind.RPAREN)
        body = self._parse_braced_body()

        else_body: Lines | None = None
        lookahead = 0
        while self.check(TokenKind.NEWLINE, lookahead):
            lookahead += 1
        if self.check(TokenKind.ELSE, lookahead):
            self.pos += lookahead + 1
            else_body = self._parse_braced_body()

        return IfStatement(condition=condition, body=body, else_body=else_body)

    def _parse_braced_body(self) -> Lines:
        """NEWLINE* '{' block '}'"""
        self.skip_newlines()
        self.expect(TokenKind.LBRACE)
        body = self.parse_block()
        self.expect(TokenKind.RBRACE)
        return body

    # -- Expressions --

    def parse_expression(self, min_precedence: int = 0) -> Node:
        """Precedence climbing over binary operators.

        Collects operators whose precedence is at least ``min_precedence``;
        each right-hand side is parsed with ``precedence + 1`` so operators
        of the same level associate to the left.
        """
        lhs = self.parse_operand()
        while (tok := self.peek()) is not None and tok.kind in _BINARY_OPS:
            op, precedence = _BINARY_OPS[tok.kind]
            if precedence < min_precedence:
                break
            self.advance()
            rhs = self.parse_expression(precedence + 1)
            lhs = BinaryExpr(op=op, left=lhs, right=rhs)
        return lhs

    def parse_operand(self) -> Node:
        """'-' operand | atom"""
        tok = self.peek()
        if tok is None:
            raise NoTokensLeftError()

        if tok.kind == TokenKind.MINUS:
            self.advance()
            return UnaryMinus(operand=self.parse_expression(_UNARY_MINUS_PRECEDENCE))

        if tok.kind == TokenKind.LPAREN:
            self.advance()
            inner = self.parse_expression()
            self.expect(TokenKind.RPAREN)
            return Brackets(inner=inner)

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            return Number(text=tok.value)

        if tok.kind == TokenKind.IDENT:
            # Look ahead for function call
            if self.check(TokenKind.LPAREN, 1):
                return self.parse_function_call()
            self.advance()
            return Variable(name=tok.value)

        raise UnexpectedTokenError(tok)

    def parse_function_call(self) -> FunctionCall:
        """IDENT '(' (expr (',' expr)*)? ')'"""
        name = self.expect_identifier()
        self.expect(TokenKind.LPAREN)

        args: list[Node] = []
        while not self.check(TokenKind.RPAREN):
            args.append(self.parse_expression())
            # Trailing commas are not allowed; let expect() below report them
            if self.check(TokenKind.COMMA) and not self.check(TokenKind.RPAREN, 1):
                self.advance()
            else:
                break

        self.expect(TokenKind.RPAREN)
        return FunctionCall(name=name, args=args)


def parse(tokens: list[Token]) -> Lines:
    """Parse a token list into a program AST.

    Args:
        tokens: Output of :func:`calcscript.tokenizer.tokenize`.

    Returns:
        The program as a single ``Lines`` block.

    Raises:
        ParseError: If the tokens do not form a valid program.
    """
    parser = _Parser(tokens)
    try:
        return parser.parse_program()
    except RecursionError:
        raise NestingTooDeepError(parser.peek()) from None


def parse_source(source: str) -> Lines:
    """Tokenize and parse source text.

    Raises:
        TokenizeError: If tokenization fails.
        ParseError: If the program is invalid.
    """
    return parse(tokenize(source))
