"""
Abstract Syntax Tree (AST) Definitions
======================================

This module defines the node types built by the parser and consumed by
the code generator.

Node Hierarchy
--------------
Node (base)
├── NumNode - integer literal
└── BinaryNode - operator with two operands
    ├── AddNode - left + right
    ├── SubNode - left - right
    ├── MulNode - left * right
    └── DivNode - left / right

Design Notes
------------
- All nodes are frozen dataclasses; a tree cannot change once built
- Each operator node owns its two children; there is no sharing
- Each node records the source offset of the token it came from, for
  diagnostics. The offset does not take part in equality, so trees built
  from inputs that differ only in whitespace compare equal.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar


# =============================================================================
# Node Classes
# =============================================================================

@dataclass(frozen=True)
class Node:
    """
    Base class for all AST nodes.

    Attributes:
        offset: Source offset of the token this node was built from
    """
    offset: int = field(default=0, compare=False, repr=False, kw_only=True)


@dataclass(frozen=True)
class NumNode(Node):
    """
    Integer literal.

    Attributes:
        value: The non-negative literal value
    """
    value: int


@dataclass(frozen=True)
class BinaryNode(Node):
    """
    Base class for the four arithmetic operators.

    Attributes:
        left: Left operand
        right: Right operand
        symbol: Source spelling of the operator (class constant)
    """
    symbol: ClassVar[str] = "?"

    left: Node
    right: Node


@dataclass(frozen=True)
class AddNode(BinaryNode):
    """Addition (left + right)."""
    symbol: ClassVar[str] = "+"


@dataclass(frozen=True)
class SubNode(BinaryNode):
    """Subtraction (left - right)."""
    symbol: ClassVar[str] = "-"


@dataclass(frozen=True)
class MulNode(BinaryNode):
    """Signed multiplication (left * right)."""
    symbol: ClassVar[str] = "*"


@dataclass(frozen=True)
class DivNode(BinaryNode):
    """Signed division truncating toward zero (left / right)."""
    symbol: ClassVar[str] = "/"


# Operator character -> node class, shared by the parser
BINARY_NODES: dict[str, type[BinaryNode]] = {
    cls.symbol: cls for cls in (AddNode, SubNode, MulNode, DivNode)
}


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Dispatches on the node's class name. Subclasses override the visit_*
    methods they care about.

    Usage:
        class Counter(ASTVisitor):
            def visit_NumNode(self, node):
                self.count += 1

        Counter().visit(tree)
    """

    def visit(self, node: Node) -> Any:
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: Node) -> None:
        """Visit the children of an operator node, left first."""
        if isinstance(node, BinaryNode):
            self.visit(node.left)
            self.visit(node.right)

    def visit_NumNode(self, node: NumNode): return self.generic_visit(node)
    def visit_AddNode(self, node: AddNode): return self.generic_visit(node)
    def visit_SubNode(self, node: SubNode): return self.generic_visit(node)
    def visit_MulNode(self, node: MulNode): return self.generic_visit(node)
    def visit_DivNode(self, node: DivNode): return self.generic_visit(node)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(tree))

    Output for ``1 + 2 * 3``:
        Add
          Num 1
          Mul
            Num 2
            Num 3
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: Node) -> str:
        """Print the AST and return it as a string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def visit_NumNode(self, node: NumNode):
        self._emit(f"Num {node.value}")

    def generic_visit(self, node: Node) -> None:
        if not isinstance(node, BinaryNode):
            raise TypeError(f"cannot print {type(node).__name__}")
        # Strip the "Node" suffix: AddNode -> Add
        self._emit(node.__class__.__name__[:-4])
        self.indent_level += 1
        super().generic_visit(node)
        self.indent_level -= 1


def expression_text(node: Node) -> str:
    """
    Render a tree back to a fully parenthesized expression.

    >>> expression_text(AddNode(NumNode(1), MulNode(NumNode(2), NumNode(3))))
    '(1 + (2 * 3))'
    """
    if isinstance(node, NumNode):
        return str(node.value)
    if isinstance(node, BinaryNode):
        return f"({expression_text(node.left)} {node.symbol} {expression_text(node.right)})"
    raise TypeError(f"cannot render {type(node).__name__}")
