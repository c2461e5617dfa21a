"""
SPASM Command-Line Interface
============================

- **spasm**: lex and parse a sis16 assembly file, printing a diagnostic
  on the first error

The tool is a Click-based CLI application.
"""

__all__ = ["spasm"]
