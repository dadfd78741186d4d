"""
Front-End Error Hierarchy
=========================

This module defines the exceptions raised by the yatc lexer and parser.
All of them inherit from FrontendError, which itself inherits from the
base YatcError for consistent error handling across the toolchain.

Exception Hierarchy
-------------------
FrontendError (base for all front-end errors)
├── LexError - lexical errors
│   └── InvalidCharacterError - character outside the language alphabet
└── ParseError - syntax errors
    ├── UnexpectedTokenError - a token outside the expected set
    ├── UnexpectedEndOfInputError - input ended inside an open construct
    ├── UnsupportedFeatureError - recognized but unimplemented construct
    ├── MalformedDeclarationError - function/extern shape violations
    └── NestingTooDeepError - input nested past the parser's stack limit

The parser is fail-fast: the first error raised ends the parse and is
handed to the caller unchanged. Nothing in the front end recovers from
an error or collects several of them.

Error Message Format
--------------------
    gcd.toy:3:12: error: unexpected token '&&'
        if a && b {
             ^
    hint: expected '{'
"""

from typing import Optional

from yatc.errors import YatcError, SourceLocation


# =============================================================================
# Base Front-End Exception
# =============================================================================

class FrontendError(YatcError):
    """
    Base exception for all lexer and parser errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example:

            fib.toy:2:8: error: unsupported feature: logical not operator '!'
                if !n {
                   ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


def _describe_expected(expected: tuple[str, ...]) -> Optional[str]:
    """Render an expected-token set as "expected 'a', 'b' or 'c'"."""
    if not expected:
        return None
    if len(expected) == 1:
        return f"expected {expected[0]}"
    return f"expected {', '.join(expected[:-1])} or {expected[-1]}"


# =============================================================================
# Lexical Errors
# =============================================================================

class LexError(FrontendError):
    """
    Lexical error in source text.

    Raised by the lexer when the source cannot be split into tokens.
    Because the lexer is lazy, a LexError surfaces when the token
    stream reaches the bad character, which is usually in the middle
    of a parse.
    """
    pass


class InvalidCharacterError(LexError):
    """
    Character that cannot start any token.

    Example:
        var x: i64 = 4 $ 2;     # '$' is not part of the language
    """

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"invalid character '{char}' (U+{ord(char):04X})",
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Syntax Errors
# =============================================================================

class ParseError(FrontendError):
    """
    Syntax error in source text.

    Base class for every error the parser raises on its own account.
    """
    pass


class UnexpectedTokenError(ParseError):
    """
    Unexpected token during parsing.

    Raised when the parser needs one of a specific set of tokens and
    finds a different one.

    Attributes:
        found: Spelling of the token that was found
        expected: Descriptions of the tokens that would have been accepted
    """

    def __init__(
        self,
        found: str,
        expected: tuple[str, ...] = (),
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = tuple(expected)
        super().__init__(
            f"unexpected token '{found}'",
            location=location,
            hint=_describe_expected(self.expected),
            source_line=source_line,
        )


class UnexpectedEndOfInputError(ParseError):
    """
    Input ended while a construct was still open.

    Raised for an unterminated block, parameter list, argument list or
    parenthesized expression, or any other place where the parser still
    needed a token when it reached the end of the input.

    Attributes:
        expected: Descriptions of the tokens that would have been accepted
        construct: Name of the open construct, when known
    """

    def __init__(
        self,
        expected: tuple[str, ...] = (),
        construct: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = tuple(expected)
        self.construct = construct

        message = "unexpected end of input"
        if construct:
            message = f"{message} in {construct}"

        super().__init__(
            message,
            location=location,
            hint=_describe_expected(self.expected),
            source_line=source_line,
        )


class UnsupportedFeatureError(ParseError):
    """
    Grammatically valid construct that is not implemented.

    The grammar reserves syntax for several features the rest of the
    toolchain cannot handle yet. The parser recognizes them so the
    message names the construct exactly, then refuses them.

    Examples:
        - pointer and array types: *i64, [i64], [i64; 4]
        - unary operators '!', '&' and '*'
        - logical '||'/'&&' and shifts '<<'/'>>' when their tier is entered
        - integer literals too long to convert to a Python int
    """

    def __init__(
        self,
        feature: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        alternative: Optional[str] = None,
    ):
        self.feature = feature
        super().__init__(
            f"unsupported feature: {feature}",
            location=location,
            hint=alternative,
            source_line=source_line,
        )


class MalformedDeclarationError(ParseError):
    """
    Function or extern declaration with the wrong shape.

    Raised when:
        - a 'func' definition is followed by anything but a body
        - an 'extern' declaration has a body
        - a parameter has no type annotation
    """

    def __init__(
        self,
        name: str,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.name = name
        super().__init__(
            message,
            location=location,
            hint=hint,
            source_line=source_line,
        )


class NestingTooDeepError(ParseError):
    """
    Input nested deeper than the parser can follow.

    Parentheses, calls, unary operators and blocks all recurse. When the
    interpreter's recursion limit is hit the parser unwinds and reports
    the token it was looking at.
    """

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "construct nested too deeply",
            location=location,
            hint="split the expression using local variables",
            source_line=source_line,
        )
