"""
sis16 Instruction Set Definition
================================

This module is the single static lookup table for the sis16 machine. The
lexer-adjacent validation, the parser, and the overload resolver all read
register names, mnemonics, and directive names from here so that each name
set is spelled exactly once.

Registers
---------
The sis16 has five general purpose registers, each addressable in a narrow
and a wide form. Register names are case-insensitive in source:

| Narrow | Wide  |
|--------|-------|
| %ax    | %eax  |
| %bx    | %ebx  |
| %cx    | %ecx  |
| %dx    | %edx  |
| %ex    | %eex  |

Words
-----
The machine word is 16 bits wide and unsigned. Every numeric literal in
source (memory addresses, immediates, .word constants) must fit in a word.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# =============================================================================
# Machine Word
# =============================================================================

WORD_BITS = 16
WORD_MAX = (1 << WORD_BITS) - 1


@dataclass(frozen=True)
class Radix:
    """
    A numeric literal base accepted by the assembler.

    Attributes:
        name: Human-readable radix name used in diagnostics
        base: Numeric base passed to int()
        prefix: Source prefix character ("" for decimal)
        maximum: WORD_MAX spelled in this radix, including its prefix
    """
    name: str
    base: int
    prefix: str
    maximum: str

    @property
    def max_digits(self) -> int:
        """Digits in WORD_MAX spelled in this radix, prefix excluded."""
        return len(self.maximum) - len(self.prefix)


BINARY = Radix("binary", 2, "%", "%" + format(WORD_MAX, "b"))
DECIMAL = Radix("decimal", 10, "", str(WORD_MAX))
HEXADECIMAL = Radix("hexadecimal", 16, "$", "$" + format(WORD_MAX, "X"))


# =============================================================================
# Registers
# =============================================================================

class Register(Enum):
    """sis16 registers. Values are the canonical lowercase names."""

    # Narrow
    AX = "ax"
    BX = "bx"
    CX = "cx"
    DX = "dx"
    EX = "ex"
    # Wide
    EAX = "eax"
    EBX = "ebx"
    ECX = "ecx"
    EDX = "edx"
    EEX = "eex"

    @classmethod
    def from_name(cls, name: str) -> Optional["Register"]:
        """Resolve a register name case-insensitively, or return None."""
        return REGISTER_NAMES.get(name.lower())

    def __str__(self) -> str:
        return f"%{self.value}"


REGISTER_NAMES: dict[str, Register] = {reg.value: reg for reg in Register}


# =============================================================================
# Directives
# =============================================================================

# Directives that open a program section
SECTION_DIRECTIVES = frozenset({"data", "text"})

# Directives allowed inside a data label
ASCII_DIRECTIVE = "ascii"
WORD_DIRECTIVE = "word"
CONSTANT_DIRECTIVES = frozenset({ASCII_DIRECTIVE, WORD_DIRECTIVE})


# =============================================================================
# Mnemonics
# =============================================================================
# Key: mnemonic as written in source (case-sensitive)
# Value: one-line description, shown in overload hints
# The operand shapes each mnemonic accepts live next to the instruction
# variants in spasm.assembler.instructions.
# =============================================================================

MNEMONICS: dict[str, str] = {
    "nop": "no operation",
    "mov": "copy a value between registers, memory and immediates",
    "add": "add to the accumulator or to a register",
    "inc": "increment the accumulator or a register",
    "dec": "decrement the accumulator or a register",
    "jmp": "jump without saving the return address",
    "jsr": "push the program counter and jump to a subroutine",
    "ret": "pop the return address and jump back",
    "syscall": "jump to the syscall handler",
    "ssc": "set the syscall handler address",
    "push": "push a value onto the stack",
    "pop": "pop the top of the stack",
}


def is_valid_mnemonic(mnemonic: str) -> bool:
    """Check whether a mnemonic belongs to the sis16 instruction set."""
    return mnemonic in MNEMONICS


def describe_mnemonic(mnemonic: str) -> Optional[str]:
    """Return the one-line description of a mnemonic, or None if unknown."""
    return MNEMONICS.get(mnemonic)
