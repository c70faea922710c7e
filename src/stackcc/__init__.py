"""
stackcc - Arithmetic Expression Compiler
========================================

This package compiles a single integer arithmetic expression into x86-64
assembly for a stack-based evaluation model.

The language:

- Non-negative decimal integer literals
- Binary operators ``+ - * /`` with the usual precedence
- Parenthesized grouping
- Left-associative operators; division truncates toward zero

Pipeline
--------
    Expression → Lexer → Parser → AST → Code Generator → Assembly

The generated listing defines one routine (``main`` by default) that
returns the value of the expression in RAX, so it can be assembled and
linked with a C toolchain and the result read from the exit status.

Usage
-----
>>> from stackcc import compile_expression
>>> asm = compile_expression("(2 + 3) * 4")

Or from the command line:
    $ stackcc "(2 + 3) * 4" > expr.s
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Imports
# =============================================================================

from stackcc.errors import (
    StackCCError,
    TokenizeError,
    ParseError,
    CodeGenError,
)
from stackcc.lexer import Lexer, Token, TokenType, tokenize
from stackcc.ast import (
    Node,
    NumNode,
    BinaryNode,
    AddNode,
    SubNode,
    MulNode,
    DivNode,
    ASTVisitor,
    ASTPrinter,
)
from stackcc.parser import Parser, parse, parse_source
from stackcc.codegen import CodeGenerator, generate
from stackcc.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    compile_expression,
)

__all__ = [
    # Version
    "__version__",
    # Main API
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_expression",
    # Errors
    "StackCCError",
    "TokenizeError",
    "ParseError",
    "CodeGenError",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    "parse_source",
    # Code Generator
    "CodeGenerator",
    "generate",
    # AST Nodes
    "Node",
    "NumNode",
    "BinaryNode",
    "AddNode",
    "SubNode",
    "MulNode",
    "DivNode",
    "ASTVisitor",
    "ASTPrinter",
]
