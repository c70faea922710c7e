"""
stackcc - Expression Compiler Command-Line Interface
====================================================

Usage Examples
--------------
Compile to stdout:
    $ stackcc "2 + 3 * 4"

Write to a file, then build and run:
    $ stackcc "2 + 3 * 4" -o expr.s
    $ cc -o expr expr.s && ./expr; echo $?

Inspect the front end:
    $ stackcc --tokens "1 + 2"
    $ stackcc --ast "(1 + 2) * 3"

Expressions that start with '-' must follow '--':
    $ stackcc -- "-1"
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from stackcc import __version__
from stackcc.ast import ASTPrinter
from stackcc.cli.errors import ExitCode, handle_cli_exception
from stackcc.compiler import Compiler, CompilerOptions
from stackcc.lexer import tokenize
from stackcc.parser import parse_source

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument("expression", nargs=-1)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output assembly file (default: stdout)",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token list and exit (for debugging)",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print AST and exit (for debugging)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Reject input left over after the expression",
)
@click.option(
    "--entry",
    default="main",
    show_default=True,
    help="Global label of the generated routine",
)
@click.option(
    "--comments",
    is_flag=True,
    help="Annotate each operation with its sub-expression",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="stackcc")
@click.pass_context
def main(
    ctx: click.Context,
    expression: tuple[str, ...],
    output: Optional[Path],
    tokens: bool,
    ast: bool,
    strict: bool,
    entry: str,
    comments: bool,
    verbose: bool,
) -> None:
    """
    Compile an integer arithmetic expression to x86-64 assembly.

    EXPRESSION is a single argument using + - * / and parentheses,
    for example "(2 + 3) * 4". Quote it so the shell passes one word.

    \b
    Examples:
        stackcc "2 + 3 * 4"             # Listing on stdout
        stackcc "2 + 3 * 4" -o expr.s   # Listing to a file
        stackcc --ast "8 - 3 - 2"       # Show the parse tree
    """
    setup_logging(verbose)

    if len(expression) != 1:
        click.echo(ctx.get_usage(), err=True)
        click.echo(
            f"Error: expected exactly one EXPRESSION argument, got {len(expression)}",
            err=True,
        )
        sys.exit(ExitCode.ERROR)

    source = expression[0]

    try:
        # Token dump mode (lexer only, so it works on unparsable input)
        if tokens:
            for token in tokenize(source):
                click.echo(repr(token))
            return

        # AST dump mode
        if ast:
            click.echo(ASTPrinter().print(parse_source(source, strict=strict)))
            return

        options = CompilerOptions(
            strict=strict,
            entry_label=entry,
            output_comments=comments,
        )
        compiler = Compiler(options)

        logger.debug(f"compiling {source!r}")
        result = compiler.compile_source(source)

        if output is None:
            click.echo(result.assembly, nl=False)
        else:
            output.write_text(result.assembly)
            if verbose:
                click.echo(f"Wrote {len(result.assembly)} bytes to {output}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
