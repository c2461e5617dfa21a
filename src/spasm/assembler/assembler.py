"""
sis16 Assembler - Main Interface
================================

This module provides the Assembler class, the primary interface to the
spasm front end. It runs the lexer and parser over source text and hands
back the parsed Program; code generation is a later stage.

Example Usage
-------------
>>> from spasm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> program = asm.parse_string('''
... .text
... main:
...     mov %eax, #$00FF
...     ret
... ''')
>>> program.find_subroutine_label("main").instructions[0]
MovImmediateToRegister(register=<Register.EAX: 'eax'>, value=255)

Errors are raised as AssemblerError subclasses. To print a diagnostic
with source context and exit, pass the error to report():

>>> try:
...     asm.parse_file("boot.asm")
... except AssemblerError as e:
...     asm.report(e)
"""

from pathlib import Path
from typing import NoReturn, Optional, Sequence
import logging

from spasm.config import AssemblerConfig
from spasm.errors import AssemblerError
from spasm.assembler.ast import Program
from spasm.assembler.lexer import Token, tokenize
from spasm.assembler.parser import build_program
from spasm.assembler.reporter import DiagnosticReporter

logger = logging.getLogger(__name__)


class Assembler:
    """
    Main sis16 assembler front end.

    The assembler keeps the lines and path of the most recent source it
    processed so that report() can show context for errors raised from it.

    Attributes:
        config: Run configuration (context lines, colour)
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        self.config = config or AssemblerConfig()
        self._lines: Sequence[str] = []
        self._path: Optional[Path] = None

    # =========================================================================
    # Front End Stages
    # =========================================================================

    def tokenize_lines(self, lines: Sequence[str], filename: str = "<input>") -> list[Token]:
        """
        Tokenize source lines.

        Raises:
            LexicalError: On the first malformed token
        """
        self._path = None
        return self._tokenize(lines, filename)

    def parse_lines(self, lines: Sequence[str], filename: str = "<input>") -> Program:
        """
        Tokenize and parse source lines.

        Args:
            lines: Source split into lines (no terminators)
            filename: Name shown in error locations

        Returns:
            The parsed Program

        Raises:
            AssemblerError: On the first lexical, syntax or semantic error
        """
        self._path = None
        return self._parse(lines, filename)

    def parse_string(self, source: str, filename: str = "<input>") -> Program:
        """Tokenize and parse complete source text."""
        return self.parse_lines(source.splitlines(), filename)

    def _tokenize(self, lines: Sequence[str], filename: str) -> list[Token]:
        self._lines = lines
        return tokenize(lines, filename)

    def _parse(self, lines: Sequence[str], filename: str) -> Program:
        tokens = self._tokenize(lines, filename)
        program = build_program(tokens, lines)
        logger.debug(
            "%s: parsed data=%s text=%s",
            filename,
            program.data is not None,
            program.text is not None,
        )
        return program

    def parse_file(self, filepath: str | Path) -> Program:
        """
        Parse source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            The parsed Program

        Raises:
            AssemblerError: If parsing fails
            FileNotFoundError: If source file not found
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        filepath = Path(filepath)
        self._path = filepath
        logger.info("Parsing %s", filepath)

        source = filepath.read_text(encoding="utf-8")
        return self._parse(source.splitlines(), str(filepath))

    def tokenize_file(self, filepath: str | Path) -> list[Token]:
        """Tokenize a source file without parsing it."""
        filepath = Path(filepath)
        self._path = filepath

        source = filepath.read_text(encoding="utf-8")
        return self._tokenize(source.splitlines(), str(filepath))

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def reporter(self) -> DiagnosticReporter:
        """Create a reporter for the most recently processed source."""
        return DiagnosticReporter(
            self._lines,
            self._path,
            context_lines=self.config.context_lines,
            color=self.config.color,
        )

    def format_error(self, error: AssemblerError) -> str:
        """Render an error against the most recent source, without styling."""
        return self.reporter().format(error)

    def report(self, error: AssemblerError) -> NoReturn:
        """Print a diagnostic for error to stderr and exit with status 1."""
        self.reporter().report(error)


def parse_file(filepath: str | Path) -> Program:
    """
    Convenience function to parse a file.

    Raises:
        AssemblerError: If parsing fails
    """
    return Assembler().parse_file(filepath)
