"""
calcscript command line interface.

Commands:

- run: evaluate a file and print the result
- repl: interactive session with a persistent context
- parse: print the parsed program
- tokens: print the token stream
"""

from __future__ import annotations

import logging
import platform
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from calcscript._version import get_version
from calcscript.config import ConfigError, EngineConfig, load_config
from calcscript.context import Context
from calcscript.engine import eval_source, format_number
from calcscript.errors import CalcError
from calcscript.parser import parse_source
from calcscript.tokenizer import TokenKind, tokenize

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="calcscript - a small numeric scripting language",
    no_args_is_help=True,
)

err_console = Console(stderr=True)

QUIT_COMMANDS = (":q", ":quit")


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"calcscript {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _print_error(error: Exception) -> None:
    err_console.print(f"[red]Error:[/red] {escape(str(error))}")


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        _print_error(e)
        raise typer.Exit(code=1) from e


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Config file (default: ./calcscript.toml)"
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (overrides config and environment)"
    ),
) -> None:
    """Load configuration and set up logging for every command."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        _print_error(e)
        raise typer.Exit(code=2) from e

    _configure_logging(log_level or config.log_level)
    ctx.obj = config


@app.command()
def run(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="calcscript source file"),
) -> None:
    """Evaluate a file and print the value of its last statement."""
    config: EngineConfig = ctx.obj
    source = _read_source(file)
    try:
        result = eval_source(source, Context(config))
    except CalcError as e:
        _print_error(e)
        raise typer.Exit(code=1) from e
    typer.echo(format_number(result))


@app.command()
def repl(ctx: typer.Context) -> None:
    """Start an interactive session.

    Input is buffered while braces are unbalanced, so function and if
    bodies can span several lines. Type :q to quit.
    """
    config: EngineConfig = ctx.obj
    context = Context(config)
    interactive = sys.stdin.isatty()
    if interactive:
        typer.echo("calcscript REPL. Type :q to quit.")

    buffer: list[str] = []
    depth = 0
    while True:
        prompt = ("... " if buffer else ">>> ") if interactive else ""
        try:
            line = input(prompt)
        except (EOFError, KeyboardInterrupt):
            break

        stripped = line.strip()
        if not buffer and stripped in QUIT_COMMANDS:
            break
        if not buffer and not stripped:
            continue

        buffer.append(line)
        depth += line.count("{") - line.count("}")
        if depth > 0:
            continue

        source = "\n".join(buffer)
        buffer.clear()
        depth = 0
        try:
            result = eval_source(source, context)
        except CalcError as e:
            logger.debug("REPL input failed: %r", source)
            _print_error(e)
            continue
        typer.echo(format_number(result))


@app.command("parse")
def parse_cmd(file: Path = typer.Argument(..., help="calcscript source file")) -> None:
    """Print the parsed program, one top-level statement per line."""
    source = _read_source(file)
    try:
        program = parse_source(source)
    except CalcError as e:
        _print_error(e)
        raise typer.Exit(code=1) from e
    for statement in program.statements:
        if statement is not None:
            typer.echo(str(statement))


@app.command()
def tokens(file: Path = typer.Argument(..., help="calcscript source file")) -> None:
    """Print the token stream with source positions."""
    source = _read_source(file)
    try:
        token_list = tokenize(source)
    except CalcError as e:
        _print_error(e)
        raise typer.Exit(code=1) from e
    for tok in token_list:
        value = "" if tok.kind == TokenKind.NEWLINE else f" {tok.value}"
        typer.echo(f"{tok.line}:{tok.column} {tok.kind}{value}")


def main() -> None:
    """Entry point for the calcscript command."""
    app()


if __name__ == "__main__":
    main()
