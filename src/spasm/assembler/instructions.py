"""
sis16 Instruction Variants
==========================

Every legal combination of mnemonic and operand shapes has its own frozen
data class. An Instruction value can therefore only describe something the
sis16 actually supports: argument lists that match no overload are rejected
by resolve_instruction() and never reach the AST.

Payload fields follow operand order, so ``mov %eax, #$00FF`` becomes
``MovImmediateToRegister(register=Register.EAX, value=0x00FF)``.

Overload Table
--------------
| Mnemonic | Arity  | Shapes                                        |
|----------|--------|-----------------------------------------------|
| nop      | 0      | ()                                            |
| mov      | 2      | (mem, reg) (reg, mem) (reg, imm) (reg, reg) (mem, imm) |
| add      | 1 or 2 | (reg) (imm) (reg, reg) (reg, imm)             |
| inc/dec  | 0 or 1 | () (reg)                                      |
| jmp      | 1      | (imm) (reg) (mem) (label)                     |
| jsr      | 1      | (label)                                       |
| ret      | 0      | ()                                            |
| syscall  | 0      | ()                                            |
| ssc      | 1      | (imm)                                         |
| push     | 1      | (imm) (mem) (reg)                             |
| pop      | 1      | (mem) (reg)                                   |
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Sequence
import logging

from spasm.cpu import Register, describe_mnemonic, is_valid_mnemonic
from spasm.errors import (
    ArgumentCountError,
    OverloadError,
    SourceLocation,
    UnknownInstructionError,
)
from spasm.assembler.ast import (
    ImmediateValue,
    InstructionArgument,
    LabelAddress,
    LabelValue,
    MemoryAddress,
    MemoryAddressIndirect,
    RegisterRef,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Instruction Base Class
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """Base class for all instruction variants."""
    mnemonic: ClassVar[str] = ""


# =============================================================================
# No Operation
# =============================================================================

@dataclass(frozen=True)
class Nop(Instruction):
    mnemonic: ClassVar[str] = "nop"


# =============================================================================
# Move
# =============================================================================

@dataclass(frozen=True)
class MovRegisterToMemory(Instruction):
    """mov $addr, %reg"""
    mnemonic: ClassVar[str] = "mov"
    address: int
    source: Register


@dataclass(frozen=True)
class MovMemoryToRegister(Instruction):
    """mov %reg, $addr"""
    mnemonic: ClassVar[str] = "mov"
    destination: Register
    address: int


@dataclass(frozen=True)
class MovImmediateToRegister(Instruction):
    """mov %reg, #value"""
    mnemonic: ClassVar[str] = "mov"
    register: Register
    value: int


@dataclass(frozen=True)
class MovRegisterToRegister(Instruction):
    """mov %dst, %src"""
    mnemonic: ClassVar[str] = "mov"
    destination: Register
    source: Register


@dataclass(frozen=True)
class MovImmediateToMemory(Instruction):
    """mov $addr, #value (16-bit store)"""
    mnemonic: ClassVar[str] = "mov"
    address: int
    value: int


# =============================================================================
# Arithmetic
# =============================================================================

@dataclass(frozen=True)
class AddRegisterToAccumulator(Instruction):
    """add %reg"""
    mnemonic: ClassVar[str] = "add"
    register: Register


@dataclass(frozen=True)
class AddImmediateToAccumulator(Instruction):
    """add #value"""
    mnemonic: ClassVar[str] = "add"
    value: int


@dataclass(frozen=True)
class AddRegisterToRegister(Instruction):
    """add %dst, %src"""
    mnemonic: ClassVar[str] = "add"
    destination: Register
    source: Register


@dataclass(frozen=True)
class AddImmediateToRegister(Instruction):
    """add %reg, #value"""
    mnemonic: ClassVar[str] = "add"
    register: Register
    value: int


@dataclass(frozen=True)
class IncAccumulator(Instruction):
    mnemonic: ClassVar[str] = "inc"


@dataclass(frozen=True)
class DecAccumulator(Instruction):
    mnemonic: ClassVar[str] = "dec"


@dataclass(frozen=True)
class IncRegister(Instruction):
    mnemonic: ClassVar[str] = "inc"
    register: Register


@dataclass(frozen=True)
class DecRegister(Instruction):
    mnemonic: ClassVar[str] = "dec"
    register: Register


# =============================================================================
# Control Flow
# =============================================================================

@dataclass(frozen=True)
class JmpImmediate(Instruction):
    mnemonic: ClassVar[str] = "jmp"
    address: int


@dataclass(frozen=True)
class JmpRegister(Instruction):
    mnemonic: ClassVar[str] = "jmp"
    register: Register


@dataclass(frozen=True)
class JmpMemory(Instruction):
    mnemonic: ClassVar[str] = "jmp"
    address: int


@dataclass(frozen=True)
class JmpLabel(Instruction):
    mnemonic: ClassVar[str] = "jmp"
    label: str


@dataclass(frozen=True)
class Jsr(Instruction):
    """Push the program counter and jump to a subroutine label."""
    mnemonic: ClassVar[str] = "jsr"
    label: str


@dataclass(frozen=True)
class Ret(Instruction):
    mnemonic: ClassVar[str] = "ret"


@dataclass(frozen=True)
class Syscall(Instruction):
    mnemonic: ClassVar[str] = "syscall"


@dataclass(frozen=True)
class Ssc(Instruction):
    """Set the syscall handler address."""
    mnemonic: ClassVar[str] = "ssc"
    address: int


# =============================================================================
# Stack
# =============================================================================

@dataclass(frozen=True)
class PushImmediate(Instruction):
    mnemonic: ClassVar[str] = "push"
    value: int


@dataclass(frozen=True)
class PushMemory(Instruction):
    mnemonic: ClassVar[str] = "push"
    address: int


@dataclass(frozen=True)
class PushRegister(Instruction):
    mnemonic: ClassVar[str] = "push"
    register: Register


@dataclass(frozen=True)
class PopMemory(Instruction):
    mnemonic: ClassVar[str] = "pop"
    address: int


@dataclass(frozen=True)
class PopRegister(Instruction):
    mnemonic: ClassVar[str] = "pop"
    register: Register


# =============================================================================
# Overload Table
# =============================================================================
# Key: (mnemonic, tuple of argument classes in operand order)
# Value: the instruction variant built from the arguments' payloads
# =============================================================================

Imm = ImmediateValue
Mem = MemoryAddress
Reg = RegisterRef
Label = LabelAddress

OVERLOAD_TABLE: dict[tuple[str, tuple[type, ...]], type[Instruction]] = {
    ("nop", ()): Nop,

    ("mov", (Mem, Reg)): MovRegisterToMemory,
    ("mov", (Reg, Mem)): MovMemoryToRegister,
    ("mov", (Reg, Imm)): MovImmediateToRegister,
    ("mov", (Reg, Reg)): MovRegisterToRegister,
    ("mov", (Mem, Imm)): MovImmediateToMemory,

    ("add", (Reg,)): AddRegisterToAccumulator,
    ("add", (Imm,)): AddImmediateToAccumulator,
    ("add", (Reg, Reg)): AddRegisterToRegister,
    ("add", (Reg, Imm)): AddImmediateToRegister,

    ("inc", ()): IncAccumulator,
    ("inc", (Reg,)): IncRegister,
    ("dec", ()): DecAccumulator,
    ("dec", (Reg,)): DecRegister,

    ("jmp", (Imm,)): JmpImmediate,
    ("jmp", (Reg,)): JmpRegister,
    ("jmp", (Mem,)): JmpMemory,
    ("jmp", (Label,)): JmpLabel,
    ("jsr", (Label,)): Jsr,
    ("ret", ()): Ret,

    ("syscall", ()): Syscall,
    ("ssc", (Imm,)): Ssc,

    ("push", (Imm,)): PushImmediate,
    ("push", (Mem,)): PushMemory,
    ("push", (Reg,)): PushRegister,
    ("pop", (Mem,)): PopMemory,
    ("pop", (Reg,)): PopRegister,
}


# =============================================================================
# Lookup Functions
# =============================================================================

def get_valid_shapes(mnemonic: str) -> list[tuple[type, ...]]:
    """
    Get every argument-class tuple a mnemonic accepts.

    Args:
        mnemonic: The instruction mnemonic

    Returns:
        Argument class tuples in table order (empty for unknown mnemonics)
    """
    return [shapes for (m, shapes) in OVERLOAD_TABLE if m == mnemonic]


def get_arities(mnemonic: str) -> tuple[int, ...]:
    """Return the sorted argument counts a mnemonic accepts."""
    return tuple(sorted({len(shapes) for shapes in get_valid_shapes(mnemonic)}))


def describe_shapes(shapes: Sequence[type]) -> str:
    """Render an argument class tuple as e.g. '(reg, imm)'."""
    return "(" + ", ".join(cls.shape for cls in shapes) + ")"


def _payload(argument: InstructionArgument):
    """Extract the value an argument contributes to an instruction."""
    if isinstance(argument, ImmediateValue):
        return argument.value
    if isinstance(argument, (MemoryAddress, MemoryAddressIndirect)):
        return argument.address
    if isinstance(argument, (LabelAddress, LabelValue)):
        return argument.name
    if isinstance(argument, RegisterRef):
        return argument.register
    raise TypeError(f"not an instruction argument: {argument!r}")


def resolve_instruction(
    mnemonic: str,
    arguments: Sequence[InstructionArgument],
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> Instruction:
    """
    Select the instruction variant matching a mnemonic and its arguments.

    Resolution runs in three steps: the mnemonic must be implemented, the
    argument count must be one the mnemonic accepts, and the tuple of
    argument classes must match one of its overloads exactly.

    Args:
        mnemonic: Instruction mnemonic as written in source
        arguments: Parsed arguments in operand order
        location: Span of the whole instruction line
        source_line: Source text for error display

    Returns:
        The constructed instruction variant

    Raises:
        UnknownInstructionError: Mnemonic is not in the instruction set
        ArgumentCountError: Wrong number of arguments
        OverloadError: No overload accepts these argument classes
    """
    if not is_valid_mnemonic(mnemonic):
        raise UnknownInstructionError(mnemonic, location, source_line)

    arities = get_arities(mnemonic)
    if len(arguments) not in arities:
        raise ArgumentCountError(mnemonic, arities, len(arguments), location, source_line)

    shapes = tuple(type(arg) for arg in arguments)
    variant = OVERLOAD_TABLE.get((mnemonic, shapes))
    if variant is None:
        raise OverloadError(
            mnemonic,
            tuple(cls.shape for cls in shapes),
            location,
            source_line,
            valid_shapes=[describe_shapes(s) for s in get_valid_shapes(mnemonic)],
            description=describe_mnemonic(mnemonic),
        )

    instruction = variant(*(_payload(arg) for arg in arguments))
    logger.debug("resolved %s %s -> %r", mnemonic, describe_shapes(shapes), instruction)
    return instruction
