"""
yatc Lexer (Tokenizer)
======================

This module implements the lexer for the yatc toy language. It converts
source text into a lazy stream of tokens for the parser.

Token Categories
----------------
- Keywords: func, extern, var, if, else, while, return
- Identifiers: [A-Za-z_][A-Za-z0-9_]*
- Numbers: maximal runs of decimal digits
- Operators: + - * / % ~ ! = == != < <= > >= << >> & && | || ^
- Delimiters: ( ) { } [ ] : ; ,

Keywords are ordinary identifiers looked up in the KEYWORDS table, so
there is no separate grammar rule for them.

Two-character operators are matched greedily: '<=' is always one token,
never '<' followed by '='.

Comments
--------
- Line comment: # comment (runs to the end of the line)

Example Usage
-------------
>>> from yatc.frontend.lexer import Lexer
>>> lexer = Lexer('extern gcd(a: i64, b: i64): i64;', "gcd.toy")
>>> for token in lexer.tokenize():
...     print(token)
Token(EXTERN, 'extern', 1:1)
Token(IDENTIFIER, 'gcd', 1:8)
Token(LPAREN, '(', 1:11)
Token(IDENTIFIER, 'a', 1:12)
Token(COLON, ':', 1:13)
Token(IDENTIFIER, 'i64', 1:15)
Token(COMMA, ',', 1:18)
Token(IDENTIFIER, 'b', 1:20)
Token(COLON, ':', 1:21)
Token(IDENTIFIER, 'i64', 1:23)
Token(RPAREN, ')', 1:26)
Token(COLON, ':', 1:27)
Token(IDENTIFIER, 'i64', 1:29)
Token(SEMICOLON, ';', 1:32)
Token(EOF, 1:33)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import string

from yatc.errors import SourceLocation
from yatc.frontend.errors import InvalidCharacterError


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for the yatc language.

    Each token type represents a category of lexical element that can
    appear in source text. Keywords are distinguished from identifiers
    to simplify parsing.
    """

    # === Structural Tokens ===
    EOF = auto()            # End of input

    # === Identifiers and Literals ===
    IDENTIFIER = auto()     # Variable/function/type names
    NUMBER = auto()         # Decimal integer literals

    # === Keywords ===
    FUNC = auto()           # func
    EXTERN = auto()         # extern
    VAR = auto()            # var
    IF = auto()             # if
    ELSE = auto()           # else
    WHILE = auto()          # while
    RETURN = auto()         # return

    # === Arithmetic Operators ===
    PLUS = auto()           # +
    MINUS = auto()          # - (subtract or negate)
    STAR = auto()           # * (multiply or dereference)
    SLASH = auto()          # /
    PERCENT = auto()        # %

    # === Comparison Operators ===
    EQ = auto()             # ==
    NE = auto()             # !=
    LT = auto()             # <
    GT = auto()             # >
    LE = auto()             # <=
    GE = auto()             # >=

    # === Logical Operators ===
    AND = auto()            # &&
    OR = auto()             # ||
    NOT = auto()            # !

    # === Bitwise Operators ===
    AMPERSAND = auto()      # & (bitwise AND or address-of)
    PIPE = auto()           # |
    CARET = auto()          # ^
    TILDE = auto()          # ~
    LSHIFT = auto()         # <<
    RSHIFT = auto()         # >>

    # === Assignment ===
    ASSIGN = auto()         # =

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    LBRACKET = auto()       # [
    RBRACKET = auto()       # ]
    COLON = auto()          # :
    SEMICOLON = auto()      # ;
    COMMA = auto()          # ,


# =============================================================================
# Keyword and Operator Tables
# =============================================================================

# Map keyword strings to their token types
KEYWORDS: dict[str, TokenType] = {
    "func": TokenType.FUNC,
    "extern": TokenType.EXTERN,
    "var": TokenType.VAR,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "return": TokenType.RETURN,
}

# Operators that may be followed by a second character forming a longer
# operator. Each entry maps the second character to the combined token.
TWO_CHAR_OPERATORS: dict[str, dict[str, TokenType]] = {
    "=": {"=": TokenType.EQ},
    "!": {"=": TokenType.NE},
    "<": {"=": TokenType.LE, "<": TokenType.LSHIFT},
    ">": {"=": TokenType.GE, ">": TokenType.RSHIFT},
    "&": {"&": TokenType.AND},
    "|": {"|": TokenType.OR},
}

SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "=": TokenType.ASSIGN,
    "!": TokenType.NOT,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "&": TokenType.AMPERSAND,
    "|": TokenType.PIPE,
    "^": TokenType.CARET,
    "~": TokenType.TILDE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    Represents a single token from yatc source text.

    Tokens are immutable. The parser consumes them and never keeps them
    once the AST node built from them has been created.

    Attributes:
        type: The TokenType classification
        lexeme: The exact source text of the token ("" for EOF)
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        offset: Byte offset of the token in the UTF-8 source (0-indexed)
        filename: Name of the source file
    """
    type: TokenType
    lexeme: str
    line: int
    column: int
    offset: int = 0
    filename: str = "<input>"

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.lexeme:
            return f"Token({self.type.name}, {self.lexeme!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column, self.offset)

    def describe(self) -> str:
        """Return the spelling used for this token in error messages."""
        if self.type == TokenType.EOF:
            return "end of input"
        return self.lexeme


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes yatc source text.

    The lexer never fails up front. Tokens are produced on demand, and a
    character outside the language raises InvalidCharacterError only
    when the stream reaches it.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Each call to tokenize() starts again from the beginning of the
    source, so the same lexer can be iterated more than once.

    Attributes:
        source: The source text being tokenized
        filename: Name of the source file (for error reporting)
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters + "_"

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    WHITESPACE = " \t\r\n\f\v"

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer with source text.

        Args:
            source: The source text to tokenize
            filename: Name of the source file (for error messages)
        """
        self.source = source
        self.filename = filename
        self._reset()

    def _reset(self) -> None:
        """Rewind to the start of the source."""
        self._pos = 0
        self._offset = 0
        self._line = 1
        self._column = 1

        # Track line start position for error reporting
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source text.

        Yields:
            Token objects for each lexical element, ending with one EOF

        Raises:
            InvalidCharacterError: When an invalid character is reached
        """
        self._reset()

        while True:
            self._skip_whitespace_and_comments()

            if self._at_end():
                break

            yield self._scan_token()

        yield self._make_token(TokenType.EOF, "", self._line, self._column, self._offset)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """
        Look at character at current position + offset without advancing.

        Returns empty string if past end of source.
        """
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """
        Consume and return the current character, advancing position.

        Updates line, column and byte offset tracking.
        """
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1
        self._offset += len(char.encode("utf-8"))

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(
        self,
        token_type: TokenType,
        lexeme: str,
        start_line: int,
        start_column: int,
        start_offset: int,
    ) -> Token:
        """Create a token that starts at the given position."""
        return Token(
            type=token_type,
            lexeme=lexeme,
            line=start_line,
            column=start_column,
            offset=start_offset,
            filename=self.filename,
        )

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        """Skip all whitespace and '#' comments."""
        while not self._at_end():
            char = self._peek()

            if char in self.WHITESPACE:
                self._advance()
                continue

            if char == "#":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
                continue

            break

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        """Scan the next token from source."""
        start_line = self._line
        start_column = self._column
        start_offset = self._offset

        char = self._peek()

        # Identifiers and keywords
        if char in self.IDENT_START:
            return self._scan_identifier(start_line, start_column, start_offset)

        # Numbers
        if char in string.digits:
            return self._scan_number(start_line, start_column, start_offset)

        return self._scan_operator(start_line, start_column, start_offset)

    def _scan_identifier(self, start_line: int, start_column: int, start_offset: int) -> Token:
        """
        Scan an identifier or keyword.

        Keywords are distinguished by an exact lookup in the keyword table.
        """
        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())

        name = "".join(chars)
        token_type = KEYWORDS.get(name, TokenType.IDENTIFIER)
        return self._make_token(token_type, name, start_line, start_column, start_offset)

    def _scan_number(self, start_line: int, start_column: int, start_offset: int) -> Token:
        """Scan a maximal run of decimal digits."""
        chars = []
        while self._peek() and self._peek() in string.digits:
            chars.append(self._advance())

        return self._make_token(
            TokenType.NUMBER, "".join(chars), start_line, start_column, start_offset
        )

    def _scan_operator(self, start_line: int, start_column: int, start_offset: int) -> Token:
        """
        Scan an operator or delimiter.

        Two-character operators win over their one-character prefixes.
        """
        char = self._advance()

        follow = TWO_CHAR_OPERATORS.get(char)
        if follow and self._peek() in follow:
            second = self._advance()
            return self._make_token(
                follow[second], char + second, start_line, start_column, start_offset
            )

        if char in SINGLE_CHAR_TOKENS:
            return self._make_token(
                SINGLE_CHAR_TOKENS[char], char, start_line, start_column, start_offset
            )

        raise InvalidCharacterError(
            char,
            SourceLocation(self.filename, start_line, start_column, start_offset),
            self._get_current_line(),
        )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end].removesuffix("\r")


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: str, filename: str = "<input>") -> Iterator[Token]:
    """
    Tokenize source text.

    Args:
        source: The source text
        filename: Source filename for error messages

    Returns:
        A lazy iterator of tokens ending with EOF
    """
    return Lexer(source, filename).tokenize()


def split_lines(source: str) -> list[str]:
    """
    Split source text into lines the way the lexer counts them.

    Only '\\n' ends a line; a trailing '\\r' is dropped from each line.
    str.splitlines() also breaks on form feeds, vertical tabs and Unicode
    separators, which would put error context on the wrong line.
    """
    return [line.removesuffix("\r") for line in source.split("\n")]
