"""
SPASM CPU Package
=================

Architecture definitions for the sis16 machine shared by the lexer, the
parser, and the instruction overload resolver.

Modules:
    sis16: Registers, mnemonics, directive names and word width.

Usage:
    from spasm.cpu import Register, MNEMONICS

    Register.from_name("EAX")  # Register.EAX
"""

from spasm.cpu.sis16 import (
    # Machine word
    WORD_BITS,
    WORD_MAX,
    Radix,
    BINARY,
    DECIMAL,
    HEXADECIMAL,
    # Registers
    Register,
    REGISTER_NAMES,
    # Directives
    SECTION_DIRECTIVES,
    ASCII_DIRECTIVE,
    WORD_DIRECTIVE,
    CONSTANT_DIRECTIVES,
    # Mnemonics
    MNEMONICS,
    is_valid_mnemonic,
    describe_mnemonic,
)

__all__ = [
    "WORD_BITS",
    "WORD_MAX",
    "Radix",
    "BINARY",
    "DECIMAL",
    "HEXADECIMAL",
    "Register",
    "REGISTER_NAMES",
    "SECTION_DIRECTIVES",
    "ASCII_DIRECTIVE",
    "WORD_DIRECTIVE",
    "CONSTANT_DIRECTIVES",
    "MNEMONICS",
    "is_valid_mnemonic",
    "describe_mnemonic",
]
