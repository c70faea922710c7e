"""
x86-64 Code Generator
=====================

This module generates x86-64 assembly (GNU as, Intel syntax) from the
expression AST.

Code Generation Strategy
------------------------
A post-order walk with a runtime operand stack:

1. A literal pushes its value
2. An operator node generates its left operand, then its right operand,
   so the left value sits one slot deeper on the stack
3. It then pops the right value into RDI and the left value into RAX,
   combines them into RAX and pushes RAX

When the walk finishes exactly one value is left on the stack: the value
of the whole expression.

Register Usage
--------------
| Register | Usage                                      |
|----------|--------------------------------------------|
| RAX      | Left operand, result, return value         |
| RDI      | Right operand                              |
| RDX      | High half of the dividend for IDIV (CQO)   |

Division uses CQO + IDIV, which truncates toward zero. A zero divisor
traps when the program runs; nothing is checked here.

Generated Assembly Format
-------------------------
    .intel_syntax noprefix
    .globl main
    main:
        push 2
        push 3
        pop rdi
        pop rax
        add rax, rdi
        push rax
        pop rax
        ret

Usage
-----
>>> from stackcc.parser import parse_source
>>> from stackcc.codegen import CodeGenerator
>>> CodeGenerator().generate(parse_source("2 + 3"))
['    push 2', '    push 3', '    pop rdi', '    pop rax', '    add rax, rdi', '    push rax']
"""

import logging
import re

from stackcc.ast import (
    ASTVisitor,
    AddNode,
    BinaryNode,
    DivNode,
    MulNode,
    Node,
    NumNode,
    SubNode,
    expression_text,
)
from stackcc.errors import CodeGenError

logger = logging.getLogger(__name__)


# Largest value PUSH can take as a sign-extended 32-bit immediate
MAX_PUSH_IMMEDIATE = 2**31 - 1

# Symbols accepted by GNU as for the entry label
LABEL_PATTERN = re.compile(r"[A-Za-z_.$][A-Za-z0-9_.$]*")


class CodeGenerator(ASTVisitor):
    """
    Generates x86-64 assembly from an expression AST.

    The generator keeps its output buffer per call, so one instance can be
    reused for any number of trees.

    Attributes:
        comments: Emit a comment naming each operator's sub-expression
        entry_label: Name of the routine emitted by generate_program()
    """

    def __init__(self, comments: bool = False, entry_label: str = "main"):
        """
        Initialize the code generator.

        Args:
            comments: If True, annotate each operator sequence with the
                      sub-expression it computes
            entry_label: Global label of the generated routine

        Raises:
            ValueError: If entry_label is not a valid assembler symbol
        """
        if not LABEL_PATTERN.fullmatch(entry_label):
            raise ValueError(f"invalid entry label: {entry_label!r}")

        self.comments = comments
        self.entry_label = entry_label
        self._output: list[str] = []

    def generate(self, node: Node) -> list[str]:
        """
        Generate the instruction lines for an expression tree.

        The lines leave the value of the expression on top of the runtime
        stack. No framing is included.

        Args:
            node: Root of the expression tree

        Returns:
            Instruction lines in emission order

        Raises:
            CodeGenError: If node is not an expression tree
        """
        if not isinstance(node, Node):
            raise CodeGenError(f"cannot generate code for {type(node).__name__}")

        self._output = []
        self.visit(node)
        logger.debug(f"generated {len(self._output)} lines")
        return self._output

    def generate_program(self, node: Node) -> str:
        """
        Generate a complete listing: directives, entry label, body, and the
        final pop/return that hands the result back in RAX.

        Returns:
            Assembly source, newline terminated
        """
        return self.frame_program(self.generate(node))

    def frame_program(self, body: list[str]) -> str:
        """Wrap already generated instruction lines in the entry routine."""
        lines = [
            ".intel_syntax noprefix",
            f".globl {self.entry_label}",
            f"{self.entry_label}:",
        ]
        lines.extend(body)
        lines.append(self._instruction("pop", "rax"))
        lines.append(self._instruction("ret"))
        return "\n".join(lines) + "\n"

    # =========================================================================
    # Assembly Output Methods
    # =========================================================================

    @staticmethod
    def _instruction(mnemonic: str, operands: str = "") -> str:
        if operands:
            return f"    {mnemonic} {operands}"
        return f"    {mnemonic}"

    def _emit_instruction(self, mnemonic: str, operands: str = "") -> None:
        """Emit an instruction with optional operands."""
        self._output.append(self._instruction(mnemonic, operands))

    def _emit_comment(self, comment: str) -> None:
        self._output.append(f"    # {comment}")

    # =========================================================================
    # Node Visitors
    # =========================================================================

    def visit_NumNode(self, node: NumNode) -> None:
        if node.value <= MAX_PUSH_IMMEDIATE:
            self._emit_instruction("push", str(node.value))
        else:
            # PUSH has no 64-bit immediate form
            self._emit_instruction("mov", f"rax, {node.value}")
            self._emit_instruction("push", "rax")

    def visit_AddNode(self, node: AddNode) -> None:
        self._generate_binary(node)
        self._emit_instruction("add", "rax, rdi")
        self._emit_instruction("push", "rax")

    def visit_SubNode(self, node: SubNode) -> None:
        self._generate_binary(node)
        self._emit_instruction("sub", "rax, rdi")
        self._emit_instruction("push", "rax")

    def visit_MulNode(self, node: MulNode) -> None:
        self._generate_binary(node)
        self._emit_instruction("imul", "rax, rdi")
        self._emit_instruction("push", "rax")

    def visit_DivNode(self, node: DivNode) -> None:
        self._generate_binary(node)
        self._emit_instruction("cqo")
        self._emit_instruction("idiv", "rdi")
        self._emit_instruction("push", "rax")

    def _generate_binary(self, node: BinaryNode) -> None:
        """
        Generate both operands, then pop them into RAX (left) and RDI
        (right). The caller emits the operation and the final push.
        """
        self.visit(node.left)
        self.visit(node.right)

        if self.comments:
            self._emit_comment(expression_text(node))
        self._emit_instruction("pop", "rdi")
        self._emit_instruction("pop", "rax")

    def generic_visit(self, node: Node) -> None:
        raise CodeGenError(
            f"unsupported node type {type(node).__name__}",
            getattr(node, "offset", None),
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def generate(node: Node) -> list[str]:
    """Generate the instruction lines for an expression tree."""
    return CodeGenerator().generate(node)
