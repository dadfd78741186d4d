"""
yatc - Yet Another Toy Compiler
===============================

This package provides the front end of a small, statically typed,
C-like language: a lexer and parser that turn `.toy` source text into a
typed Abstract Syntax Tree for a native code generator.

Main Components
---------------
- **frontend**: lexer, token cursor, parser and AST model
    Converts source text into a ProgramNode

- **cli**: command-line tool (yatc)
    Checks source files and dumps their tokens or AST

Quick Start
-----------
Parse a program:
    >>> from yatc import parse_source
    >>> program = parse_source("extern gcd(a: i64, b: i64): i64;")
    >>> program.declarations[0].name
    'gcd'

Get a result instead of an exception:
    >>> from yatc import Frontend
    >>> result = Frontend().try_parse_source("func f() {")
    >>> result.success
    False

Or use the command-line tool:
    $ yatc gcd.toy --ast

Version History
---------------
1.0.0 - Initial release with lexer, parser and AST
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from yatc.errors import YatcError, SourceLocation
from yatc.frontend import (
    Frontend,
    FrontendOptions,
    ParseResult,
    FrontendError,
    LexError,
    ParseError,
    ProgramNode,
    ASTPrinter,
    parse_source,
)

__all__ = [
    "__version__",
    # Errors
    "YatcError",
    "SourceLocation",
    "FrontendError",
    "LexError",
    "ParseError",
    # Front end
    "Frontend",
    "FrontendOptions",
    "ParseResult",
    "ProgramNode",
    "ASTPrinter",
    "parse_source",
]
