# =============================================================================
# test_instructions.py - Instruction Overload Tests
# =============================================================================
# Tests for the sis16 instruction variants and overload resolution.
#
# Test coverage includes:
#   - Overload table completeness against the mnemonic list
#   - Variant selection and payload order
#   - Ordering of unknown-mnemonic, arity and overload checks
#   - Immutability of instruction values
# =============================================================================

import dataclasses

import pytest
from spasm.assembler.ast import (
    ImmediateValue,
    LabelAddress,
    LabelValue,
    MemoryAddress,
    RegisterRef,
)
from spasm.assembler.instructions import (
    OVERLOAD_TABLE,
    AddImmediateToRegister,
    AddRegisterToAccumulator,
    DecRegister,
    IncAccumulator,
    JmpImmediate,
    JmpMemory,
    JmpRegister,
    MovRegisterToMemory,
    PopMemory,
    PushImmediate,
    Ssc,
    Syscall,
    describe_shapes,
    get_arities,
    get_valid_shapes,
    resolve_instruction,
)
from spasm.cpu import MNEMONICS, Register, describe_mnemonic, is_valid_mnemonic
from spasm.errors import (
    ArgumentCountError,
    OverloadError,
    UnknownInstructionError,
)

EAX = RegisterRef(Register.EAX)
BX = RegisterRef(Register.BX)


# =============================================================================
# Overload Table Tests
# =============================================================================

class TestOverloadTable:
    """The overload table covers exactly the sis16 mnemonics."""

    def test_every_mnemonic_has_overloads(self):
        assert {mnemonic for mnemonic, _ in OVERLOAD_TABLE} == set(MNEMONICS)

    def test_mnemonic_lookup(self):
        assert all(is_valid_mnemonic(mnemonic) for mnemonic in MNEMONICS)
        assert not is_valid_mnemonic("hlt")
        assert not is_valid_mnemonic("MOV")
        assert describe_mnemonic("nop") == "no operation"
        assert describe_mnemonic("hlt") is None

    def test_variant_mnemonics_match_keys(self):
        for (mnemonic, _), variant in OVERLOAD_TABLE.items():
            assert variant.mnemonic == mnemonic

    def test_variants_are_distinct(self):
        """Every legal shape maps to its own variant."""
        assert len(set(OVERLOAD_TABLE.values())) == len(OVERLOAD_TABLE)

    @pytest.mark.parametrize("mnemonic,arities", [
        ("nop", (0,)),
        ("mov", (2,)),
        ("add", (1, 2)),
        ("inc", (0, 1)),
        ("jmp", (1,)),
        ("hlt", ()),
    ])
    def test_arities(self, mnemonic, arities):
        assert get_arities(mnemonic) == arities

    def test_valid_shapes(self):
        assert get_valid_shapes("pop") == [(MemoryAddress,), (RegisterRef,)]

    def test_describe_shapes(self):
        assert describe_shapes((RegisterRef, ImmediateValue)) == "(reg, imm)"
        assert describe_shapes(()) == "()"


# =============================================================================
# Resolution Tests
# =============================================================================

class TestResolve:
    """Test variant selection and payload order."""

    def test_payload_follows_operand_order(self):
        instruction = resolve_instruction("mov", [MemoryAddress(0x10), BX])
        assert instruction == MovRegisterToMemory(address=0x10, source=Register.BX)

    def test_add_one_and_two_arguments(self):
        assert resolve_instruction("add", [EAX]) == AddRegisterToAccumulator(Register.EAX)
        assert resolve_instruction("add", [BX, ImmediateValue(3)]) == AddImmediateToRegister(
            Register.BX, 3
        )

    def test_inc_dec(self):
        assert resolve_instruction("inc", []) == IncAccumulator()
        assert resolve_instruction("dec", [BX]) == DecRegister(Register.BX)

    def test_jmp_variants(self):
        assert resolve_instruction("jmp", [ImmediateValue(8)]) == JmpImmediate(8)
        assert resolve_instruction("jmp", [EAX]) == JmpRegister(Register.EAX)
        assert resolve_instruction("jmp", [MemoryAddress(8)]) == JmpMemory(8)

    def test_syscalls(self):
        assert resolve_instruction("syscall", []) == Syscall()
        assert resolve_instruction("ssc", [ImmediateValue(0x0100)]) == Ssc(0x0100)

    def test_stack(self):
        assert resolve_instruction("push", [ImmediateValue(1)]) == PushImmediate(1)
        assert resolve_instruction("pop", [MemoryAddress(2)]) == PopMemory(2)

    def test_jsr_needs_label_address(self):
        with pytest.raises(OverloadError):
            resolve_instruction("jsr", [LabelValue("print")])
        assert resolve_instruction("jsr", [LabelAddress("print")]).label == "print"


# =============================================================================
# Error Ordering Tests
# =============================================================================

class TestResolveErrors:
    """Unknown mnemonic, arity and overload errors are never conflated."""

    def test_unknown_before_arity(self):
        with pytest.raises(UnknownInstructionError) as exc_info:
            resolve_instruction("hlt", [EAX, EAX, EAX])
        assert exc_info.value.mnemonic == "hlt"

    def test_arity_before_overload(self):
        with pytest.raises(ArgumentCountError) as exc_info:
            resolve_instruction("mov", [ImmediateValue(1)])
        assert exc_info.value.actual == 1

    def test_singular_argument_message(self):
        with pytest.raises(ArgumentCountError, match="expects 1 argument, but got 0"):
            resolve_instruction("jmp", [])

    def test_overload_hint_lists_shapes(self):
        with pytest.raises(OverloadError) as exc_info:
            resolve_instruction("mov", [ImmediateValue(1), EAX])
        error = exc_info.value
        assert error.shapes == ("imm", "reg")
        assert "(reg, imm)" in error.hint
        assert error.hint.startswith("mov (copy a value between registers, memory and immediates) supports:")
        assert error.category == "semantic"


# =============================================================================
# Immutability Tests
# =============================================================================

class TestImmutability:

    def test_instruction_is_frozen(self):
        instruction = resolve_instruction("push", [ImmediateValue(1)])
        with pytest.raises(dataclasses.FrozenInstanceError):
            instruction.value = 2

    def test_equal_instructions_hash_equal(self):
        assert hash(PushImmediate(1)) == hash(PushImmediate(1))
