"""
sis16 Assembler Front End
=========================

This package turns sis16 assembly source into a validated Program tree of
sections, labels, constants and instructions.

Main Components
---------------
- **Assembler**: Facade that runs the pipeline over lines, strings or files
- **Lexer**: Tokenizes source lines; classification depends on position in line
- **Parser**: Builds the Program and resolves instruction overloads
- **DiagnosticReporter**: Prints an error with source context and exits

Pipeline
--------
1. **Lexing**: each line is scanned independently into Tokens
2. **Parsing**: tokens are grouped into sections, labels and lines
3. **Overload resolution**: each instruction line becomes exactly one
   instruction variant, or is rejected

The first error stops the pipeline. Errors are raised, never printed,
until they reach the reporter.

Example Usage
-------------
>>> from spasm.assembler import parse_source
>>> program = parse_source('''
... .data
... msg: .ascii "hi"
... .text
... main: add #2
... ''')
>>> program.find_constant_label("msg").constants
(StringLiteral(value='hi'),)
"""

from spasm.assembler.assembler import Assembler, parse_file
from spasm.assembler.lexer import Lexer, Token, TokenType, tokenize
from spasm.assembler.parser import Parser, build_program, parse_source
from spasm.assembler.reporter import DiagnosticReporter
from spasm.assembler.ast import (
    ConstantLabel,
    DataSection,
    ImmediateValue,
    LabelAddress,
    LabelValue,
    MemoryAddress,
    MemoryAddressIndirect,
    Program,
    RegisterRef,
    StringLiteral,
    SubroutineLabel,
    TextSection,
    Word,
)
from spasm.assembler.instructions import Instruction, OVERLOAD_TABLE, resolve_instruction

__all__ = [
    # Pipeline
    "Assembler",
    "parse_file",
    "parse_source",
    "build_program",
    "tokenize",
    "Lexer",
    "Token",
    "TokenType",
    "Parser",
    "DiagnosticReporter",
    # Program tree
    "Program",
    "DataSection",
    "TextSection",
    "ConstantLabel",
    "SubroutineLabel",
    "StringLiteral",
    "Word",
    "ImmediateValue",
    "MemoryAddress",
    "MemoryAddressIndirect",
    "LabelAddress",
    "LabelValue",
    "RegisterRef",
    # Instructions
    "Instruction",
    "OVERLOAD_TABLE",
    "resolve_instruction",
]
