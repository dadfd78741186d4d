"""
Token Stream Cursor
===================

A one-token lookahead buffer over the lexer's token stream. Every
parsing layer reads tokens through a TokenCursor, and every "wrong
token here" failure is built by it, so all layers report errors the
same way.

The cursor pulls tokens from the underlying iterator one at a time. A
LexError raised by the lexer therefore surfaces on the first peek() or
advance() that reaches the bad character.

Once EOF has been read it is sticky: advancing past it keeps returning
the same EOF token.
"""

from typing import Iterable, Optional

from yatc.frontend.errors import (
    ParseError,
    UnexpectedEndOfInputError,
    UnexpectedTokenError,
)
from yatc.frontend.lexer import Token, TokenType


class TokenCursor:
    """
    One-token lookahead over a token iterable.

    Attributes:
        source_lines: Source text split into lines, used to attach
            context to errors (may be empty)
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        source_lines: Optional[list[str]] = None,
    ):
        self._tokens = iter(tokens)
        self._current: Optional[Token] = None
        self._previous: Optional[Token] = None
        self.source_lines = source_lines or []

    # =========================================================================
    # Token Access
    # =========================================================================

    def peek(self) -> Token:
        """Return the current token without consuming it."""
        if self._current is None:
            self._current = next(self._tokens)
        return self._current

    def advance(self) -> Token:
        """Consume and return the current token."""
        token = self.peek()
        if token.type != TokenType.EOF:
            self._current = None
        self._previous = token
        return token

    def last_seen(self) -> Optional[Token]:
        """
        Return the buffered token, or the last one consumed.

        Never pulls from the token stream, so it is safe to call after
        the stream has failed.
        """
        return self._current or self._previous

    def at_end(self) -> bool:
        """Check if the current token is EOF."""
        return self.peek().type == TokenType.EOF

    def check(self, *types: TokenType) -> bool:
        """Check if the current token is one of the given types."""
        return self.peek().type in types

    def match(self, *types: TokenType) -> Optional[Token]:
        """
        Consume the current token if it is one of the given types.

        Returns:
            The consumed token, or None if no match
        """
        if self.check(*types):
            return self.advance()
        return None

    def expect(
        self,
        token_type: TokenType,
        description: str,
        construct: Optional[str] = None,
    ) -> Token:
        """
        Expect and consume a specific token type.

        Args:
            token_type: The expected token type
            description: How the expected token is named in messages
            construct: The construct still open if input runs out

        Returns:
            The consumed token

        Raises:
            UnexpectedEndOfInputError: If the input ended instead
            UnexpectedTokenError: If a different token was found
        """
        if self.check(token_type):
            return self.advance()
        raise self.unexpected((description,), construct)

    # =========================================================================
    # Error Construction
    # =========================================================================

    def unexpected(
        self,
        expected: tuple[str, ...],
        construct: Optional[str] = None,
    ) -> ParseError:
        """
        Build the error for finding the current token where one of
        `expected` was needed.

        Returns an UnexpectedEndOfInputError at EOF and an
        UnexpectedTokenError otherwise. The caller raises it.
        """
        token = self.peek()
        if token.type == TokenType.EOF:
            return UnexpectedEndOfInputError(
                expected,
                construct,
                location=token.location,
                source_line=self.source_line(token.line),
            )
        return UnexpectedTokenError(
            token.describe(),
            expected,
            location=token.location,
            source_line=self.source_line(token.line),
        )

    def source_line(self, line: int) -> Optional[str]:
        """Get source line for error reporting."""
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None
