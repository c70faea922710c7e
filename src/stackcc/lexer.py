"""
Expression Lexer (Tokenizer)
============================

This module converts an expression string into a list of tokens for the
parser.

Token Categories
----------------
- Reserved: the single characters ``+ - * / ( )``
- Numbers: runs of decimal digits (no sign, no prefixes)
- EOF: end-of-input sentinel, always the last token

Whitespace is skipped. Every other character is a TokenizeError.

Example Usage
-------------
>>> from stackcc.lexer import tokenize
>>> tokenize("12 + (3)")
[Token(NUMBER, 12, 0), Token(RESERVED, '+', 3), Token(RESERVED, '(', 5),
 Token(NUMBER, 3, 6), Token(RESERVED, ')', 7), Token(EOF, 8)]
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from stackcc.errors import TokenizeError

logger = logging.getLogger(__name__)


# =============================================================================
# Token Types
# =============================================================================

class TokenType(Enum):
    """Token categories for the expression language."""
    RESERVED = auto()   # + - * / ( )
    NUMBER = auto()     # Non-negative decimal integer
    EOF = auto()        # End of input


# Characters that form a RESERVED token on their own
RESERVED_CHARS = "+-*/()"

# Same set as C isspace() in the "C" locale
WHITESPACE = " \t\n\r\f\v"

# Largest literal that still fits a signed 64-bit register
MAX_LITERAL = 2**63 - 1


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token.

    Attributes:
        type: The TokenType classification
        value: The reserved character, the integer value, or None for EOF
        offset: Character offset of the token in the input (0-indexed)
    """
    type: TokenType
    value: str | int | None
    offset: int

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.type.name}, {self.offset})"
        return f"Token({self.type.name}, {self.value!r}, {self.offset})"

    def is_reserved(self, char: str) -> bool:
        """Return True if this is the reserved token for ``char``."""
        return self.type == TokenType.RESERVED and self.value == char


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes an arithmetic expression.

    One left-to-right pass, no backtracking. A fresh Lexer is created for
    each input.

    Usage:
        tokens = list(Lexer("1 + 2").tokenize())

    Attributes:
        source: The text being tokenized
    """

    def __init__(self, source: str):
        self.source = source
        self._pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source.

        Yields:
            Token objects, ending with exactly one EOF token

        Raises:
            TokenizeError: On a character that starts no token
        """
        while not self._at_end():
            char = self._peek()

            if char in WHITESPACE:
                self._pos += 1
                continue

            if char in RESERVED_CHARS:
                token = Token(TokenType.RESERVED, char, self._pos)
                self._pos += 1
            elif char in string.digits:
                token = self._scan_number()
            else:
                raise TokenizeError(
                    f"invalid character {char!r}", self._pos, self.source
                )

            logger.debug(f"token {token!r}")
            yield token

        yield Token(TokenType.EOF, None, self._pos)

    # =========================================================================
    # Character Access
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self) -> str:
        """Current character, or empty string past the end."""
        if self._at_end():
            return ""
        return self.source[self._pos]

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_number(self) -> Token:
        """Scan a run of decimal digits into a NUMBER token."""
        start = self._pos
        while self._peek() and self._peek() in string.digits:
            self._pos += 1

        value = int(self.source[start:self._pos])
        if value > MAX_LITERAL:
            raise TokenizeError("number too large", start, self.source)

        return Token(TokenType.NUMBER, value, start)


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: str) -> list[Token]:
    """
    Tokenize an expression string.

    Args:
        source: The expression text

    Returns:
        List of tokens terminated by one EOF token

    Raises:
        TokenizeError: If the input contains an invalid character
    """
    return list(Lexer(source).tokenize())
