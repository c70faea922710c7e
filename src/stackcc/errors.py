"""
stackcc Error Hierarchy
=======================

This module defines the exception hierarchy for the expression compiler.
All exceptions inherit from StackCCError, allowing callers to catch every
compiler error with a single except clause.

Exception Hierarchy
-------------------
StackCCError (base)
├── TokenizeError - character that cannot start a token
├── ParseError - token that does not fit the grammar
└── CodeGenError - code generator handed something that is not a tree

Error Message Format
--------------------
Errors carry the offset of the offending character (0-indexed, counted in
characters from the start of the input) together with the input text, and
render as the source line with a caret under the offending position:

    1 & 2
      ^ invalid character '&'

Without source text only the message is shown.
"""

from typing import Optional


# =============================================================================
# Base Exception
# =============================================================================

class StackCCError(Exception):
    """
    Base exception for all compiler errors.

    Attributes:
        message: The error description
        offset: Character offset of the error in the input (optional)
        source: The complete input text (optional)
    """

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        source: Optional[str] = None,
    ):
        self.message = message
        self.offset = offset
        self.source = source
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the message with the source line and a caret pointer.

        Only the line holding the offset is echoed, so multi-line input
        still gets a correctly aligned caret. Tabs before the error are
        kept in the padding so the caret lines up in a terminal.

        An error at end of input that follows only blank lines is shown
        just past the last non-blank character instead.
        """
        if self.source is None or self.offset is None:
            return self.message

        position = self.offset
        line_start = self.source.rfind("\n", 0, position) + 1
        if (
            position == len(self.source)
            and line_start > 0
            and self.source.strip()
            and not self.source[line_start:].strip()
        ):
            position = len(self.source.rstrip())
            line_start = self.source.rfind("\n", 0, position) + 1

        line_end = self.source.find("\n", position)
        if line_end == -1:
            line_end = len(self.source)
        line = self.source[line_start:line_end]

        padding = "".join(
            "\t" if char == "\t" else " "
            for char in self.source[line_start:position]
        )
        return f"{line}\n{padding}^ {self.message}"

    @property
    def column(self) -> Optional[int]:
        """Column of the error within its line (0-indexed)."""
        if self.offset is None:
            return None
        if self.source is None:
            return self.offset
        return self.offset - (self.source.rfind("\n", 0, self.offset) + 1)


# =============================================================================
# Lexer and Parser Errors
# =============================================================================

class TokenizeError(StackCCError):
    """
    Input character that cannot be tokenized.

    Raised for anything other than whitespace, a decimal digit, or one of
    the reserved characters ``+ - * / ( )``, and for integer literals too
    large for a 64-bit register.
    """
    pass


class ParseError(StackCCError):
    """
    Token that does not fit the expression grammar.

    Attributes:
        expected: What the parser was looking for ("number", "')'", ...)
    """

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        source: Optional[str] = None,
        expected: Optional[str] = None,
    ):
        self.expected = expected
        super().__init__(message, offset, source)


# =============================================================================
# Code Generation Errors
# =============================================================================

class CodeGenError(StackCCError):
    """
    Error during code generation.

    A tree produced by the parser never triggers this; it is raised when
    the generator is called directly with an object that is not a node.
    """
    pass
