"""
Compiler Main Module
====================

This module provides the main compiler interface. It runs the complete
pipeline:

    Source → Lex → Parse → Generate → Assembly

Usage
-----
Command line:
    $ stackcc "2 + 3 * 4" > expr.s
    $ cc -o expr expr.s && ./expr; echo $?
    14

Programmatic:
    >>> from stackcc import compile_expression
    >>> print(compile_expression("2 + 3 * 4"))

Error Handling
--------------
The first lexical or parse error aborts compilation. Errors propagate as
StackCCError subclasses; no partial AST or listing is ever produced.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from stackcc.ast import ASTPrinter, Node
from stackcc.codegen import CodeGenerator
from stackcc.lexer import Lexer, Token
from stackcc.parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        strict: Reject tokens left over after the expression. When False
                (the default) trailing input such as the ")" in "1+2)" is
                ignored.
        entry_label: Global label of the generated routine. Use "_main" for
                     toolchains that prefix C symbols with an underscore.
        output_comments: Annotate each operator sequence in the listing
                         with the sub-expression it computes
    """
    strict: bool = False
    entry_label: str = "main"
    output_comments: bool = False


@dataclass
class CompilerResult:
    """
    Result of a successful compilation.

    Attributes:
        source: The input expression
        tokens: Token list from the lexer
        ast: Root of the expression tree
        instructions: Body lines from the code generator (no framing)
        assembly: Complete listing
    """
    source: str = ""
    tokens: list[Token] = field(default_factory=list)
    ast: Optional[Node] = None
    instructions: list[str] = field(default_factory=list)
    assembly: str = ""

    @property
    def token_count(self) -> int:
        return len(self.tokens)


class Compiler:
    """
    Expression compiler targeting x86-64.

    Example:
        compiler = Compiler(CompilerOptions(strict=True))
        result = compiler.compile_source("(1 + 2) * 3")
        print(result.assembly)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        """
        Initialize the compiler.

        Args:
            options: Compiler configuration (uses defaults if None)

        Raises:
            ValueError: If options.entry_label is not a valid symbol
        """
        self.options = options or CompilerOptions()
        self._generator = CodeGenerator(
            comments=self.options.output_comments,
            entry_label=self.options.entry_label,
        )

    def compile_source(self, source: str) -> CompilerResult:
        """
        Compile one expression to assembly.

        Args:
            source: Expression text

        Returns:
            CompilerResult with tokens, AST and listing

        Raises:
            TokenizeError: If the input contains an invalid character
            ParseError: If the tokens do not form an expression
        """
        result = CompilerResult(source=source)

        # Stage 1: Lexical analysis
        result.tokens = self._lex(source)
        logger.debug(f"tokenized {result.token_count} tokens")

        # Stage 2: Parsing
        result.ast = self._parse(result.tokens, source)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"parsed tree:\n{ASTPrinter().print(result.ast)}")

        # Stage 3: Code generation
        result.instructions = self._generator.generate(result.ast)
        result.assembly = self._generator.frame_program(result.instructions)

        return result

    def _lex(self, source: str) -> list[Token]:
        """Tokenize the source."""
        return list(Lexer(source).tokenize())

    def _parse(self, tokens: list[Token], source: str) -> Node:
        """Parse tokens into AST."""
        parser = Parser(tokens, source, strict=self.options.strict)
        return parser.parse()


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_expression(
    source: str,
    strict: bool = False,
    entry_label: str = "main",
    output_comments: bool = False,
) -> str:
    """
    Compile an expression to an x86-64 assembly listing.

    This is the primary high-level interface.

    Args:
        source: Expression text
        strict: Reject trailing input after the expression
        entry_label: Global label of the generated routine
        output_comments: Annotate operator sequences with comments

    Returns:
        Complete assembly listing

    Raises:
        StackCCError: If compilation fails

    Example:
        >>> print(compile_expression("42"), end="")
        .intel_syntax noprefix
        .globl main
        main:
            push 42
            pop rax
            ret
    """
    options = CompilerOptions(
        strict=strict,
        entry_label=entry_label,
        output_comments=output_comments,
    )
    return Compiler(options).compile_source(source).assembly
