# =============================================================================
# test_parser.py - Parser Unit Tests
# =============================================================================
# Tests for the sis16 assembler parser.
#
# Test coverage includes:
#   - Section handling: order, duplicates, missing sections
#   - Data section constants (.ascii, .word)
#   - Text section instruction lines and argument shapes
#   - Argument separator and argument shape errors
#   - Arity, overload and unknown-mnemonic errors
#   - Idempotence of parsing
# =============================================================================

import pytest
from spasm.assembler.parser import Parser, build_program, parse_source
from spasm.assembler.lexer import tokenize
from spasm.assembler.ast import (
    ConstantLabel,
    DataSection,
    Program,
    StringLiteral,
    Word,
)
from spasm.assembler.instructions import (
    AddImmediateToAccumulator,
    AddRegisterToRegister,
    JmpLabel,
    Jsr,
    MovImmediateToMemory,
    MovImmediateToRegister,
    MovMemoryToRegister,
    MovRegisterToMemory,
    MovRegisterToRegister,
    Nop,
    Ret,
)
from spasm.cpu import Register
from spasm.errors import (
    ArgumentCountError,
    ArgumentSeparatorError,
    AssemblySyntaxError,
    DirectiveError,
    DuplicateSectionError,
    EmptyLabelError,
    InvalidRegisterError,
    LiteralOverflowError,
    MissingSectionError,
    OverloadError,
    UnknownInstructionError,
)


# =============================================================================
# Helper Functions
# =============================================================================

def parse(*lines: str) -> Program:
    """Parse source given as separate lines."""
    return parse_source("\n".join(lines), "<test>")


def instructions(*body: str) -> tuple:
    """Parse instruction lines under a single 'main:' label."""
    program = parse(".text", "main:", *body)
    return program.text.labels[0].instructions


def constants(*body: str) -> tuple:
    """Parse data lines under a single 'value:' label."""
    program = parse(".data", "value:", *body)
    return program.data.labels[0].constants


# =============================================================================
# Section Tests
# =============================================================================

class TestSections:
    """Test top-level section handling."""

    def test_empty_program(self):
        """No tokens at all is a legal (empty) program."""
        assert parse("") == Program(data=None, text=None)

    def test_comments_only(self):
        assert parse("; nothing", "  ; to see") == Program()

    def test_empty_data_section(self):
        assert parse(".data") == Program(data=DataSection(()))

    def test_both_sections(self):
        program = parse(
            ".data",
            'msg: .ascii "hi"',
            ".text",
            "main: nop",
        )
        assert program.data.labels == (ConstantLabel("msg", (StringLiteral("hi"),)),)
        assert program.text.labels[0].instructions == (Nop(),)

    def test_text_before_data(self):
        program = parse(".text", "main: ret", ".data", "w: .word 1")
        assert program.text.labels[0].instructions == (Ret(),)
        assert program.data.labels[0].constants == (Word(1),)

    def test_duplicate_data(self):
        with pytest.raises(DuplicateSectionError) as exc_info:
            parse(".data", "a: .word 1", ".text", "main: nop", ".data", "b: .word 2")
        assert exc_info.value.section == "data"
        assert exc_info.value.location.line == 4

    def test_duplicate_empty_sections(self):
        """Duplicates are rejected regardless of contents."""
        with pytest.raises(DuplicateSectionError, match=r"duplicate section '\.data'"):
            parse(".data", ".data")

    def test_duplicate_text(self):
        with pytest.raises(DuplicateSectionError, match=r"'\.text'"):
            parse(".text", "main: nop", ".text", "other: nop")

    def test_must_start_with_section(self):
        with pytest.raises(MissingSectionError, match="unexpected token `nop`"):
            parse("nop")

    def test_other_directive_first(self):
        with pytest.raises(MissingSectionError, match="expected program to start"):
            parse(".word 5")


# =============================================================================
# Data Section Tests
# =============================================================================

class TestDataSection:
    """Test constant labels in the data section."""

    def test_ascii(self):
        assert constants('.ascii "Hello"') == (StringLiteral("Hello"),)

    def test_words_in_every_radix(self):
        assert constants(".word 10 .word $FF .word %11") == (Word(10), Word(255), Word(3))

    def test_pairs_across_lines(self):
        assert constants(".word 1", '.ascii "x"') == (Word(1), StringLiteral("x"))

    def test_label_on_own_line(self):
        program = parse(".data", "a:", ".word 1", "b: .word 2")
        assert [label.name for label in program.data.labels] == ["a", "b"]

    def test_empty_label_before_label(self):
        with pytest.raises(EmptyLabelError, match="label `a` cannot be empty") as exc_info:
            parse(".data", "a:", "b: .word 2")
        assert exc_info.value.label == "a"

    def test_empty_label_at_end(self):
        with pytest.raises(EmptyLabelError):
            parse(".data", "a:")

    def test_empty_label_before_section(self):
        with pytest.raises(EmptyLabelError):
            parse(".data", "a:", ".text", "main: nop")

    def test_non_label(self):
        with pytest.raises(AssemblySyntaxError, match="unexpected token `42` in data section"):
            parse(".data", "42")

    def test_illegal_directive_instead_of_label(self):
        with pytest.raises(DirectiveError, match=r"illegal directive token `\.word`"):
            parse(".data", ".word 5")

    def test_single_leftover_token(self):
        with pytest.raises(AssemblySyntaxError, match="expected at least 2 tokens in constant"):
            constants(".word 1 .ascii")

    def test_first_token_not_directive(self):
        with pytest.raises(AssemblySyntaxError, match="first token in a constant must be a directive"):
            constants("5 5")

    def test_ascii_needs_string(self):
        with pytest.raises(AssemblySyntaxError, match="expected string literal after .ascii"):
            constants(".ascii 5")

    def test_word_needs_number(self):
        with pytest.raises(AssemblySyntaxError, match="expected a number literal after .word"):
            constants('.word "x"')

    def test_word_rejects_immediate_marker(self):
        with pytest.raises(DirectiveError, match="does not require an immediate `#` marker"):
            constants(".word #5")

    def test_unknown_constant_directive(self):
        with pytest.raises(DirectiveError, match=r"unknown constant directive `\.byte`"):
            constants(".byte 5")

    @pytest.mark.parametrize("literal,radix", [
        ("65536", "decimal"),
        ("$1FFFF", "hexadecimal"),
        ("%11111111111111111", "binary"),
    ])
    def test_word_overflow(self, literal, radix):
        with pytest.raises(LiteralOverflowError) as exc_info:
            constants(f".word {literal}")
        assert exc_info.value.radix_name == radix
        assert exc_info.value.source_line == f".word {literal}"

    def test_word_with_thousands_of_digits(self):
        with pytest.raises(LiteralOverflowError) as exc_info:
            constants(".word " + "9" * 5000)
        assert exc_info.value.radix_name == "decimal"

    def test_word_with_long_zero_padding(self):
        assert constants(".word " + "0" * 5000 + "7") == (Word(7),)


# =============================================================================
# Text Section Tests
# =============================================================================

class TestTextSection:
    """Test subroutine labels and instruction lines."""

    def test_mov_immediate_to_register(self):
        assert instructions("mov %eax, #$00FF") == (
            MovImmediateToRegister(Register.EAX, 0x00FF),
        )

    def test_add_register_to_register(self):
        assert instructions("add %ebx, %ecx") == (
            AddRegisterToRegister(Register.EBX, Register.ECX),
        )

    def test_add_immediate_to_accumulator(self):
        assert instructions("add #2") == (AddImmediateToAccumulator(2),)

    def test_immediate_with_thousands_of_digits(self):
        with pytest.raises(LiteralOverflowError) as exc_info:
            instructions("mov %eax, #" + "1" * 4301)
        assert exc_info.value.radix_name == "decimal"
        assert exc_info.value.location.line == 2

    def test_one_instruction_per_line(self):
        assert instructions("nop", "ret") == (Nop(), Ret())

    def test_instruction_on_label_line(self):
        program = parse(".text", "main: nop", "  ret", "next: ret")
        main, following = program.text.labels
        assert main.instructions == (Nop(), Ret())
        assert following.name == "next"

    def test_empty_subroutine(self):
        with pytest.raises(EmptyLabelError, match="label `main` cannot be empty"):
            parse(".text", "main:", "other: ret")

    def test_line_must_start_with_instruction(self):
        with pytest.raises(AssemblySyntaxError, match="must start with an instruction"):
            instructions("%eax")

    def test_non_label_in_text(self):
        with pytest.raises(AssemblySyntaxError, match="in text section"):
            parse(".text", "42")

    def test_register_case_insensitive(self):
        assert instructions("mov %EAX, %Ebx") == (
            MovRegisterToRegister(Register.EAX, Register.EBX),
        )

    def test_memory_operands(self):
        assert instructions(
            "mov %eax, $0400",
            "mov $0400, %ebx",
            "mov 16, #7",
        ) == (
            MovMemoryToRegister(Register.EAX, 0x0400),
            MovRegisterToMemory(0x0400, Register.EBX),
            MovImmediateToMemory(16, 7),
        )

    def test_label_operands(self):
        assert instructions("jmp main", "jsr print") == (JmpLabel("main"), Jsr("print"))

    def test_label_value_shape(self):
        """[label] parses, but no instruction accepts it yet."""
        with pytest.raises(OverloadError) as exc_info:
            instructions("push [msg]")
        assert exc_info.value.shapes == ("[label]",)

    def test_indirect_address_shape(self):
        with pytest.raises(OverloadError) as exc_info:
            instructions("jmp ($0400)")
        assert exc_info.value.shapes == ("(mem)",)


# =============================================================================
# Argument List Tests
# =============================================================================

class TestArgumentErrors:
    """Test comma splitting and argument shape errors."""

    @pytest.mark.parametrize("line", [
        "mov %eax,, %ebx",
        "mov , %eax",
        "mov %eax,",
    ])
    def test_misplaced_comma(self, line):
        with pytest.raises(ArgumentSeparatorError, match="unexpected argument separator"):
            instructions(line)

    def test_invalid_register(self):
        with pytest.raises(InvalidRegisterError, match="register name `ezx` is invalid") as exc_info:
            instructions("mov %ezx, #1")
        error = exc_info.value
        assert error.name == "ezx"
        assert (error.location.column, error.location.end_column) == (4, 8)
        assert "%eax" in error.hint

    @pytest.mark.parametrize("line,message", [
        ("push 5 6", "unexpected token `6` after number literal"),
        ("push #", "expected number literal after immediate specifier `#`"),
        ("push # %eax", "unexpected token `%eax` after immediate specifier"),
        ("push #1 2", "unexpected token `2` after immediate number literal"),
        ("jmp (", "expected memory address after opening parenthesis"),
        ("jmp ()", "unexpected token `\\)` after opening parenthesis"),
        ("jmp (42", "expected closing parenthesis after memory address"),
        ("jmp (42]", "unexpected token `]` after memory address"),
        ("jmp (42) 1", "unexpected token `1` after indirect memory address"),
        ("jmp main x", "unexpected token `x` after label identifier"),
        ("push [", "expected label identifier after opening bracket"),
        ("push [42]", "unexpected token `42` after opening bracket"),
        ("push [msg", "expected closing bracket after label identifier"),
        ("push [msg)", "unexpected token `\\)` after label identifier"),
        ("push [msg] 1", "unexpected token `1` after label dereference"),
        ("push %eax %ebx", "unexpected token `%ebx` after register name"),
        ("push ]", "unexpected token `]` in argument list"),
        ('push "s"', "unexpected token `\"s\"` in argument list"),
    ])
    def test_shape_errors(self, line, message):
        with pytest.raises(AssemblySyntaxError, match=message):
            instructions(line)


# =============================================================================
# Overload Resolution Tests
# =============================================================================

class TestOverloadErrors:
    """Arity, overload and unknown-mnemonic errors are distinct."""

    def test_arity(self):
        with pytest.raises(ArgumentCountError) as exc_info:
            instructions("mov %eax")
        error = exc_info.value
        assert error.message == "`mov` instruction expects 2 arguments, but got 1"
        assert error.expected == (2,)

    def test_arity_with_alternatives(self):
        with pytest.raises(ArgumentCountError, match="expects 1 or 2 arguments, but got 0"):
            instructions("add")

    def test_arity_span_covers_line(self):
        with pytest.raises(ArgumentCountError) as exc_info:
            instructions("    mov %eax")
        location = exc_info.value.location
        assert (location.column, location.end_column) == (4, 12)

    def test_no_matching_overload(self):
        with pytest.raises(OverloadError, match="could not find valid overload of `mov`"):
            instructions("mov #1, %eax")

    def test_unknown_mnemonic(self):
        with pytest.raises(UnknownInstructionError, match="instruction `hlt` is not implemented"):
            instructions("hlt")

    def test_error_keeps_source_line(self):
        with pytest.raises(OverloadError) as exc_info:
            instructions("mov #1, %eax")
        assert exc_info.value.source_line == "mov #1, %eax"


# =============================================================================
# Parser API Tests
# =============================================================================

class TestParserApi:
    """Test the Parser class and convenience functions."""

    SOURCE = [
        ".data",
        'msg: .ascii "Hello\\n"',
        "size: .word 6",
        ".text",
        "main:",
        "    mov %eax, #0",
        "    jsr print",
        "print: ret",
    ]

    def test_parsing_is_idempotent(self):
        text = "\n".join(self.SOURCE)
        assert parse_source(text) == parse_source(text)

    def test_parser_reusable(self):
        tokens = tokenize(self.SOURCE)
        parser = Parser(tokens, self.SOURCE)
        assert parser.parse() == parser.parse()

    def test_build_program_matches_parse_source(self):
        tokens = tokenize(self.SOURCE, "<test>")
        assert build_program(tokens) == parse("\n".join(self.SOURCE))

    def test_escape_in_data(self):
        program = build_program(tokenize(self.SOURCE))
        assert program.find_constant_label("msg").constants == (StringLiteral("Hello\n"),)

    def test_find_labels(self):
        program = build_program(tokenize(self.SOURCE))
        assert program.find_constant_label("size").constants == (Word(6),)
        assert program.find_subroutine_label("print").instructions == (Ret(),)
        assert program.find_subroutine_label("missing") is None
        assert Program().find_constant_label("msg") is None
