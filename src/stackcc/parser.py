"""
Recursive Descent Parser
========================

This module builds an AST from the token list produced by the lexer.

Grammar (EBNF)
--------------
expr    ::= mul (('+' | '-') mul)*
mul     ::= primary (('*' | '/') primary)*
primary ::= '(' expr ')' | NUMBER

Precedence is encoded by the call hierarchy: ``mul`` is the only caller of
``primary``, so ``*`` and ``/`` always bind tighter than ``+`` and ``-``.
Both binary levels fold left, which makes every operator left-associative.

Trailing Input
--------------
By default the parser stops after one complete ``expr`` and ignores any
tokens left over (``1 + 2)`` parses as ``1 + 2``). Pass ``strict=True`` to
require that the expression is followed by end of input.

Example Usage
-------------
>>> from stackcc.lexer import tokenize
>>> from stackcc.parser import Parser
>>> Parser(tokenize("1 + 2 * 3")).parse()
AddNode(left=NumNode(value=1), right=MulNode(left=NumNode(value=2), right=NumNode(value=3)))
"""

import logging
from typing import Callable, Optional

from stackcc.ast import BINARY_NODES, Node, NumNode
from stackcc.errors import ParseError
from stackcc.lexer import Token, TokenType, tokenize

logger = logging.getLogger(__name__)


class Parser:
    """
    Recursive descent parser for arithmetic expressions.

    A Parser owns its cursor into the token list, so each instance parses
    exactly one token list and no state is shared between instances.

    Attributes:
        tokens: Tokens to parse, terminated by an EOF token
        source: Original input text, used for error context
        strict: Reject tokens left over after the expression
    """

    def __init__(
        self,
        tokens: list[Token],
        source: Optional[str] = None,
        strict: bool = False,
    ):
        """
        Initialize the parser.

        Args:
            tokens: Token list from the lexer
            source: Original input text for diagnostics (None: message only)
            strict: If True, require end of input after the expression

        Raises:
            ValueError: If the token list does not end with an EOF token
        """
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token list must end with an EOF token")

        self.tokens = tokens
        self.source = source
        self.strict = strict

        # Current position in token stream
        self._pos = 0

    def parse(self) -> Node:
        """
        Parse the token list into an AST.

        Returns:
            Root node of the expression tree

        Raises:
            ParseError: If the tokens do not form an expression
        """
        node = self._parse_expr()

        if self.strict and not self._at_end():
            token = self._peek()
            raise self._error("unexpected trailing input", token, expected="end of input")
        if not self._at_end():
            logger.debug(f"ignoring trailing input at offset {self._peek().offset}")

        return node

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if the cursor is on the EOF token."""
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        """Look at the token under the cursor."""
        return self.tokens[self._pos]

    def _advance(self) -> Token:
        """Consume and return the current token. Never moves past EOF."""
        token = self.tokens[self._pos]
        if not self._at_end():
            self._pos += 1
        return token

    def _check(self, *chars: str) -> bool:
        """Check if the current token is one of the reserved characters."""
        token = self._peek()
        return token.type == TokenType.RESERVED and token.value in chars

    def _match(self, *chars: str) -> Optional[Token]:
        """
        Consume the current token if it is one of the reserved characters.

        Returns:
            The consumed token, or None if no match
        """
        if self._check(*chars):
            return self._advance()
        return None

    def _expect(self, char: str) -> Token:
        """
        Consume a required reserved character.

        Raises:
            ParseError: If the current token is anything else
        """
        token = self._match(char)
        if token is None:
            raise self._error(f"expected '{char}'", self._peek(), expected=f"'{char}'")
        return token

    def _expect_number(self) -> Token:
        """
        Consume a required NUMBER token.

        Raises:
            ParseError: If the current token is not a number
        """
        token = self._peek()
        if token.type != TokenType.NUMBER:
            raise self._error("expected a number", token, expected="number")
        return self._advance()

    def _error(self, message: str, token: Token, expected: str) -> ParseError:
        """Create a ParseError located at ``token``."""
        return ParseError(message, token.offset, self.source, expected=expected)

    # =========================================================================
    # Grammar Rules
    # =========================================================================

    def _parse_expr(self) -> Node:
        """Parse additive expression (+ -)."""
        return self._parse_binary(self._parse_mul, "+-")

    def _parse_mul(self) -> Node:
        """Parse multiplicative expression (* /)."""
        return self._parse_binary(self._parse_primary, "*/")

    def _parse_binary(
        self,
        operand_parser: Callable[[], Node],
        operators: str,
    ) -> Node:
        """
        Generic left-folding binary expression parser.

        Args:
            operand_parser: Function to parse operands
            operators: Reserved characters handled at this level
        """
        node = operand_parser()

        while self._check(*operators):
            op_token = self._advance()
            right = operand_parser()
            node = BINARY_NODES[op_token.value](node, right, offset=op_token.offset)

        return node

    def _parse_primary(self) -> Node:
        """Parse primary expression (number or parenthesized expr)."""
        if self._match("("):
            node = self._parse_expr()
            self._expect(")")
            return node

        token = self._expect_number()
        return NumNode(token.value, offset=token.offset)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(tokens: list[Token], source: Optional[str] = None, strict: bool = False) -> Node:
    """
    Parse a token list into an AST.

    Raises:
        ParseError: If parsing fails
    """
    return Parser(tokens, source, strict).parse()


def parse_source(source: str, strict: bool = False) -> Node:
    """
    Tokenize and parse an expression string.

    Raises:
        TokenizeError: If the input cannot be tokenized
        ParseError: If parsing fails
    """
    return Parser(tokenize(source), source, strict).parse()
