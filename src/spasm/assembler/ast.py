"""
sis16 Abstract Syntax Tree
==========================

Data classes produced by the parser. Every node is frozen and built from
tuples, so a Program is read-only once constructed and two parses of the
same source compare equal.

Program Structure
-----------------
```
Program
├── data: DataSection | None
│   └── ConstantLabel(name, constants: StringLiteral | Word, ...)
└── text: TextSection | None
    └── SubroutineLabel(name, instructions: Instruction, ...)
```

Instruction Arguments
---------------------
| Syntax   | Argument              | Shape   |
|----------|-----------------------|---------|
| #42      | ImmediateValue        | imm     |
| $0400    | MemoryAddress         | mem     |
| ($0400)  | MemoryAddressIndirect | (mem)   |
| main     | LabelAddress          | label   |
| [msg]    | LabelValue            | [label] |
| %eax     | RegisterRef           | reg     |

Instruction variants live in spasm.assembler.instructions.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Optional, Union

from spasm.cpu import Register

if TYPE_CHECKING:
    from spasm.assembler.instructions import Instruction


# =============================================================================
# Instruction Arguments
# =============================================================================

@dataclass(frozen=True)
class ImmediateValue:
    """A '#'-prefixed literal used as a value."""
    shape: ClassVar[str] = "imm"
    value: int


@dataclass(frozen=True)
class MemoryAddress:
    """A bare literal used as a direct memory address."""
    shape: ClassVar[str] = "mem"
    address: int


@dataclass(frozen=True)
class MemoryAddressIndirect:
    """A parenthesised literal: the address of a memory address."""
    shape: ClassVar[str] = "(mem)"
    address: int


@dataclass(frozen=True)
class LabelAddress:
    """A bare identifier: the address a label resolves to."""
    shape: ClassVar[str] = "label"
    name: str


@dataclass(frozen=True)
class LabelValue:
    """A bracketed identifier: the value stored at a label."""
    shape: ClassVar[str] = "[label]"
    name: str


@dataclass(frozen=True)
class RegisterRef:
    shape: ClassVar[str] = "reg"
    register: Register


InstructionArgument = Union[
    ImmediateValue,
    MemoryAddress,
    MemoryAddressIndirect,
    LabelAddress,
    LabelValue,
    RegisterRef,
]


# =============================================================================
# Data Section
# =============================================================================

@dataclass(frozen=True)
class StringLiteral:
    """Contents of an .ascii constant (escapes already decoded)."""
    value: str


@dataclass(frozen=True)
class Word:
    """A 16-bit .word constant."""
    value: int


ConstantValue = Union[StringLiteral, Word]


@dataclass(frozen=True)
class ConstantLabel:
    """
    A named run of constants in the data section.

    Attributes:
        name: Label name without the trailing ':'
        constants: Constants in source order (never empty)
    """
    name: str
    constants: tuple[ConstantValue, ...]


@dataclass(frozen=True)
class DataSection:
    labels: tuple[ConstantLabel, ...] = ()


# =============================================================================
# Text Section
# =============================================================================

@dataclass(frozen=True)
class SubroutineLabel:
    """
    A named run of instructions in the text section.

    Attributes:
        name: Label name without the trailing ':'
        instructions: Instruction variants in source order (never empty)
    """
    name: str
    instructions: tuple["Instruction", ...]


@dataclass(frozen=True)
class TextSection:
    labels: tuple[SubroutineLabel, ...] = ()


# =============================================================================
# Program
# =============================================================================

@dataclass(frozen=True)
class Program:
    """
    A parsed sis16 program.

    Either section may be absent. An empty program is valid at this
    stage; later stages decide whether it can be assembled.
    """
    data: Optional[DataSection] = None
    text: Optional[TextSection] = None

    def find_constant_label(self, name: str) -> Optional[ConstantLabel]:
        """Look up a data label by name."""
        if self.data is None:
            return None
        for label in self.data.labels:
            if label.name == name:
                return label
        return None

    def find_subroutine_label(self, name: str) -> Optional[SubroutineLabel]:
        """Look up a text label by name."""
        if self.text is None:
            return None
        for label in self.text.labels:
            if label.name == name:
                return label
        return None
