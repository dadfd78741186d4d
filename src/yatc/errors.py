"""
yatc Error Hierarchy
====================

This module defines the root of the exception hierarchy for yatc.
Every exception raised by the toolchain inherits from YatcError, so
callers can catch all toolchain errors with a single except clause.

Exception Hierarchy
-------------------
YatcError (base)
└── FrontendError (yatc.frontend.errors)
    ├── LexError - invalid characters in source text
    └── ParseError - grammar violations and unsupported constructs

Source Locations
----------------
Errors that point at source text carry a SourceLocation. Messages
follow the usual compiler layout:

    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class YatcError(Exception):
    """
    Base exception for all yatc errors.

    All exceptions in the toolchain inherit from this class, allowing
    callers to catch every yatc error with a single except clause:

        try:
            program = parse_source(text, "gcd.toy")
        except YatcError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Tokens, AST nodes and errors all refer back to the source through
    this class. It is frozen so a location can be shared freely between
    tokens and the nodes built from them.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        offset: Byte offset into the UTF-8 encoded source (0-indexed)
    """
    filename: str
    line: int
    column: int
    offset: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"
