"""
yatc Front-End Driver
=====================

This module ties the lexer and parser together behind one interface.
It is what the command-line tool and any embedding application use:

    Source → Lex → Parse → ProgramNode

Usage
-----
    >>> from yatc.frontend import Frontend
    >>> program = Frontend().parse_source("extern gcd(a: i64, b: i64): i64;")

Error Reporting
---------------
parse_source() and parse_file() raise the first FrontendError. For
callers that prefer a value over an exception, try_parse_source() and
try_parse_file() return a ParseResult that holds either the program or
the error, never both.

Each parse gets its own lexer, cursor and parser. A Frontend holds only
its options, so one instance can serve any number of parses.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from yatc.frontend.ast import ProgramNode
from yatc.frontend.errors import FrontendError
from yatc.frontend.lexer import Lexer, Token, split_lines
from yatc.frontend.parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class FrontendOptions:
    """
    Front-end configuration options.

    Attributes:
        encoding: Text encoding used when reading source files
        source_context: Attach the offending source line to errors
        allow_stray_semicolons: Skip bare ';' between top-level declarations
    """
    encoding: str = "utf-8"
    source_context: bool = True
    allow_stray_semicolons: bool = True


@dataclass
class ParseResult:
    """
    Result of a parse.

    Attributes:
        filename: Source filename
        success: True if parsing succeeded
        program: The AST root (only when successful)
        error: The first error (only when unsuccessful)
        token_count: Number of tokens read before parsing stopped
    """
    filename: str = ""
    success: bool = False
    program: Optional[ProgramNode] = None
    error: Optional[FrontendError] = None
    token_count: int = 0


class Frontend:
    """
    yatc front end: source text in, AST out.

    Example:
        frontend = Frontend()
        program = frontend.parse_file("gcd.toy")
        print(ASTPrinter().print(program))

    Attributes:
        options: Front-end configuration options
    """

    def __init__(self, options: Optional[FrontendOptions] = None):
        """
        Initialize the front end.

        Args:
            options: Front-end configuration (uses defaults if None)
        """
        self.options = options or FrontendOptions()

    def parse_source(self, source: str, filename: str = "<input>") -> ProgramNode:
        """
        Parse source text into an AST.

        Args:
            source: The source code
            filename: Source filename for error messages

        Returns:
            The root ProgramNode

        Raises:
            FrontendError: On the first lexical or syntax error
        """
        return self._run(source, filename, ParseResult(filename=filename))

    def parse_file(self, filepath: str | Path) -> ProgramNode:
        """
        Parse a source file into an AST.

        Raises:
            FrontendError: On the first lexical or syntax error
            FileNotFoundError: If the source file does not exist
        """
        source = self.read_source(filepath)
        return self.parse_source(source, str(filepath))

    def try_parse_source(self, source: str, filename: str = "<input>") -> ParseResult:
        """
        Parse source text, returning the outcome instead of raising.

        Front-end errors are captured in the result. Anything else (a
        bug, an interrupt) still propagates.
        """
        result = ParseResult(filename=filename)
        try:
            result.program = self._run(source, filename, result)
            result.success = True
        except FrontendError as e:
            result.error = e
        return result

    def try_parse_file(self, filepath: str | Path) -> ParseResult:
        """
        Parse a source file, returning the outcome instead of raising.

        Raises:
            FileNotFoundError: If the source file does not exist
        """
        source = self.read_source(filepath)
        return self.try_parse_source(source, str(filepath))

    def tokenize(self, source: str, filename: str = "<input>") -> Iterator[Token]:
        """Return the lazy token stream for source text."""
        return Lexer(source, filename).tokenize()

    def read_source(self, filepath: str | Path) -> str:
        """
        Read a source file with the configured encoding.

        Raises:
            FileNotFoundError: If the source file does not exist
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding=self.options.encoding)
        logger.debug(f"Read {path} ({len(source)} characters)")
        return source

    # =========================================================================
    # Internals
    # =========================================================================

    def _run(self, source: str, filename: str, result: ParseResult) -> ProgramNode:
        """Lex and parse, recording the token count on the result."""
        source_lines = split_lines(source) if self.options.source_context else None
        tokens = self._counted(self.tokenize(source, filename), result)
        parser = Parser(
            tokens,
            filename,
            source_lines,
            allow_stray_semicolons=self.options.allow_stray_semicolons,
        )

        try:
            program = parser.parse()
        except FrontendError as e:
            logger.debug(
                f"{filename}: parse stopped after {result.token_count} tokens: {e.message}"
            )
            raise

        logger.debug(
            f"{filename}: {result.token_count} tokens, "
            f"{len(program.declarations)} declarations"
        )
        return program

    @staticmethod
    def _counted(tokens: Iterable[Token], result: ParseResult) -> Iterator[Token]:
        """Pass tokens through, counting them on the result."""
        for token in tokens:
            result.token_count += 1
            yield token
