"""
yatc - Command-Line Interface
=============================

This module implements the command-line front end for yatc. It reads
`.toy` source files, runs them through the lexer and parser, and
reports either a summary, the token stream or the AST.

Usage Examples
--------------
Check a file:
    $ yatc gcd.toy
    gcd.toy: ok (1 function, 1 extern)

Dump the AST:
    $ yatc --ast gcd.toy

Dump the token stream:
    $ yatc --tokens gcd.toy

Verbose mode (debug logging on stderr):
    $ yatc -v gcd.toy
"""

import logging
import sys
from pathlib import Path

import click

from yatc import __version__
from yatc.cli.errors import ExitCode, handle_cli_exception
from yatc.frontend import ASTPrinter, Frontend, ProgramNode


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def summarize(filename: str, program: ProgramNode) -> str:
    """One-line summary of a parsed file."""
    functions = _plural(len(program.functions), "function")
    externs = _plural(len(program.externs), "extern")
    return f"{filename}: ok ({functions}, {externs})"


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "files",
    nargs=-1,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the AST of each file",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream of each file",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="yatc")
def main(
    files: tuple[Path, ...],
    ast: bool,
    tokens: bool,
    verbose: bool,
) -> None:
    """
    Parse yatc source files.

    FILES are the source files (.toy) to parse. Processing stops at the
    first file with an error.

    \b
    Examples:
        yatc gcd.toy                 # Check syntax
        yatc --ast gcd.toy           # Print the AST
        yatc --tokens gcd.toy        # Print the token stream
        yatc -v a.toy b.toy          # Debug logging
    """
    setup_logging(verbose)

    if not files:
        click.echo("error: no input files", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    frontend = Frontend()
    show_headers = len(files) > 1 and (ast or tokens)

    for path in files:
        try:
            source = frontend.read_source(path)

            if show_headers:
                click.echo(f"==> {path} <==")

            if tokens:
                for token in frontend.tokenize(source, str(path)):
                    click.echo(repr(token))

            program = frontend.parse_source(source, str(path))

            if ast:
                click.echo(ASTPrinter().print(program))
            elif not tokens:
                click.echo(summarize(str(path), program))

        except Exception as e:
            handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
