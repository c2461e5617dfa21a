"""
SPASM - Assembler Front End for the sis16
=========================================

This package lexes and parses assembly source for sis16, a small 16-bit
instruction set, into a validated Program tree. Every instruction in the
tree is one of the operand combinations the machine supports; anything
else is rejected with a located diagnostic.

Main Components
---------------
- **assembler**: Lexer, parser, instruction overloads and diagnostics
- **cpu**: sis16 registers, mnemonics and directive names
- **errors**: Exception hierarchy with source locations
- **config**: Run settings from defaults and environment

Quick Start
-----------
Parse a file:
    >>> from spasm import Assembler
    >>> program = Assembler().parse_file("boot.asm")
    >>> for label in program.text.labels:
    ...     print(label.name, len(label.instructions))

Or use the command-line tool:
    $ spasm boot.asm --ast
"""

__version__ = "0.1.0"

# =============================================================================
# Public API Exports
# =============================================================================

from spasm.assembler import Assembler, Program, parse_file, parse_source
from spasm.config import AssemblerConfig
from spasm.errors import (
    SpasmError,
    SourceLocation,
    AssemblerError,
    LexicalError,
    AssemblySyntaxError,
    AssemblySemanticError,
)

__all__ = [
    "__version__",
    "Assembler",
    "AssemblerConfig",
    "Program",
    "parse_file",
    "parse_source",
    "SpasmError",
    "SourceLocation",
    "AssemblerError",
    "LexicalError",
    "AssemblySyntaxError",
    "AssemblySemanticError",
]
