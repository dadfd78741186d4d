"""
yatc Command-Line Interface
===========================

This package provides the `yatc` command-line tool. It is a Click-based
application that parses source files and reports errors with source
context.
"""

__all__ = ["yatc"]
