"""
sis16 Assembly Language Parser
==============================

This module implements the parser for sis16 assembly language. It converts
the token list produced by the lexer into a Program tree of sections,
labels, constants and instructions.

Program Layout
--------------
A program is a sequence of sections, each introduced by a directive:

```asm
.data
msg:    .ascii "Hello"      ; ConstantLabel with one StringLiteral
table:  .word $0400 .word 7 ; ConstantLabel with two Words

.text
main:   mov %eax, #$00FF    ; SubroutineLabel with two instructions
        jsr print
```

Each of .data and .text may appear at most once, in either order. Inside a
section every label owns the tokens up to the next label or section
directive. In the text section those tokens are split into instructions by
source line, since an instruction has no explicit terminator.

Argument Shapes
---------------
| Tokens          | Argument              |
|-----------------|-----------------------|
| 42 / $2A / %101 | MemoryAddress         |
| # literal       | ImmediateValue        |
| ( literal )     | MemoryAddressIndirect |
| identifier      | LabelAddress          |
| [ identifier ]  | LabelValue            |
| %register       | RegisterRef           |

The parser reads the token list through an index cursor and never changes
the tokens themselves. Section ends are found by looking one token ahead.
"""

from itertools import groupby
from typing import Optional, Sequence
import logging

from spasm.errors import (
    ArgumentSeparatorError,
    AssemblySyntaxError,
    DirectiveError,
    DuplicateSectionError,
    EmptyLabelError,
    InvalidRegisterError,
    MissingSectionError,
    SourceLocation,
)
from spasm.cpu import (
    ASCII_DIRECTIVE,
    CONSTANT_DIRECTIVES,
    SECTION_DIRECTIVES,
    WORD_DIRECTIVE,
    Register,
)
from spasm.assembler.lexer import Token, TokenType, tokenize
from spasm.assembler.ast import (
    ConstantLabel,
    ConstantValue,
    DataSection,
    ImmediateValue,
    InstructionArgument,
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
from spasm.assembler.instructions import Instruction, resolve_instruction

logger = logging.getLogger(__name__)


# =============================================================================
# Parser Implementation
# =============================================================================

class Parser:
    """
    Parses a sis16 token list into a Program.

    The parser is fail-fast: the first structural or semantic problem
    raises an AssemblerError subclass and no Program is produced.

    Usage:
        tokens = tokenize(lines, "boot.asm")
        parser = Parser(tokens, lines)
        program = parser.parse()

    Attributes:
        tokens: The token list (never modified)
        lines: Source lines, used to attach source text to errors
    """

    def __init__(self, tokens: Sequence[Token], lines: Optional[Sequence[str]] = None):
        self.tokens = tokens
        self.lines = lines
        self._pos = 0

    def parse(self) -> Program:
        """
        Parse the whole token list.

        Returns:
            The parsed Program

        Raises:
            AssemblerError: On the first invalid construct
        """
        self._pos = 0
        data: Optional[DataSection] = None
        text: Optional[TextSection] = None

        while not self._at_end():
            token = self._pop()

            if token.type != TokenType.DIRECTIVE:
                raise MissingSectionError(
                    f"unexpected token `{token.text}`, program should start with "
                    f"either .data or .text section directive",
                    token.location,
                    hint="add a '.data' or '.text' line before this",
                    source_line=self._source_line(token),
                )

            if token.value == "data":
                if data is not None:
                    raise DuplicateSectionError("data", token.location, self._source_line(token))
                data = self._parse_data_section()
            elif token.value == "text":
                if text is not None:
                    raise DuplicateSectionError("text", token.location, self._source_line(token))
                text = self._parse_text_section()
            else:
                raise MissingSectionError(
                    "expected program to start with either .data or .text section",
                    token.location,
                    source_line=self._source_line(token),
                )

        return Program(data=data, text=text)

    # =========================================================================
    # Cursor
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.tokens)

    def _peek(self) -> Optional[Token]:
        """Return the token at the cursor without consuming it."""
        if self._at_end():
            return None
        return self.tokens[self._pos]

    def _pop(self) -> Token:
        """Consume and return the token at the cursor."""
        token = self.tokens[self._pos]
        self._pos += 1
        return token

    def _pushback(self) -> None:
        """Un-consume the most recently popped token."""
        self._pos -= 1

    @staticmethod
    def _is_section_directive(token: Token) -> bool:
        return token.type == TokenType.DIRECTIVE and token.value in SECTION_DIRECTIVES

    def _take_label_body(self) -> list[Token]:
        """Consume tokens up to the next label or section directive."""
        body = []
        while not self._at_end():
            token = self._peek()
            if token.type == TokenType.LABEL or self._is_section_directive(token):
                break
            body.append(self._pop())
        return body

    # =========================================================================
    # Error Helpers
    # =========================================================================

    def _source_line(self, token: Token) -> Optional[str]:
        """Return the source text of the token's line, when known."""
        if self.lines is None or token.line >= len(self.lines):
            return None
        return self.lines[token.line]

    def _error(self, message: str, token: Token) -> AssemblySyntaxError:
        return AssemblySyntaxError(message, token.location, source_line=self._source_line(token))

    def _expect_label(self, token: Token, section: str) -> None:
        """Raise unless token is a label opening a new run."""
        if token.type == TokenType.LABEL:
            return
        if token.type == TokenType.DIRECTIVE:
            raise DirectiveError(
                f"illegal directive token `{token.text}`",
                token.location,
                hint="only .data and .text may appear between labels",
                source_line=self._source_line(token),
            )
        raise self._error(f"unexpected token `{token.text}` in {section} section", token)

    # =========================================================================
    # Data Section
    # =========================================================================

    def _parse_data_section(self) -> DataSection:
        """Parse constant labels until the next section directive."""
        labels: list[ConstantLabel] = []

        while not self._at_end():
            token = self._pop()
            if self._is_section_directive(token):
                self._pushback()
                break

            self._expect_label(token, "data")
            body = self._take_label_body()
            if not body:
                raise EmptyLabelError(token.value, token.location, self._source_line(token))

            labels.append(ConstantLabel(token.value, tuple(self._parse_constants(body))))

        logger.debug("data section: %d labels", len(labels))
        return DataSection(tuple(labels))

    def _parse_constants(self, body: list[Token]) -> list[ConstantValue]:
        """Parse a label body as directive/value pairs."""
        constants: list[ConstantValue] = []
        index = 0

        while index < len(body):
            if len(body) - index == 1:
                raise self._error("expected at least 2 tokens in constant", body[index])

            directive, value = body[index], body[index + 1]
            index += 2

            if directive.type != TokenType.DIRECTIVE:
                raise self._error("first token in a constant must be a directive", directive)

            if directive.value not in CONSTANT_DIRECTIVES:
                raise DirectiveError(
                    f"unknown constant directive `{directive.text}`",
                    directive.location,
                    hint="constants are declared with .ascii or .word",
                    source_line=self._source_line(directive),
                )

            if directive.value == ASCII_DIRECTIVE:
                if value.type != TokenType.ASCII_STRING:
                    raise self._error("expected string literal after .ascii directive", value)
                constants.append(StringLiteral(value.value))

            elif directive.value == WORD_DIRECTIVE:
                if value.type == TokenType.IMMEDIATE:
                    raise DirectiveError(
                        "the .word directive does not require an immediate `#` marker",
                        value.location,
                        source_line=self._source_line(value),
                    )
                if not value.is_numeric:
                    raise self._error("expected a number literal after .word directive", value)
                constants.append(Word(value.to_word(self._source_line(value))))

        return constants

    # =========================================================================
    # Text Section
    # =========================================================================

    def _parse_text_section(self) -> TextSection:
        """Parse subroutine labels until the next section directive."""
        labels: list[SubroutineLabel] = []

        while not self._at_end():
            token = self._pop()
            if self._is_section_directive(token):
                self._pushback()
                break

            self._expect_label(token, "text")
            body = self._take_label_body()
            if not body:
                raise EmptyLabelError(token.value, token.location, self._source_line(token))

            instructions = tuple(
                self._parse_instruction(list(line_tokens))
                for _, line_tokens in groupby(body, key=lambda t: t.line)
            )
            labels.append(SubroutineLabel(token.value, instructions))

        logger.debug("text section: %d labels", len(labels))
        return TextSection(tuple(labels))

    def _parse_instruction(self, line_tokens: list[Token]) -> Instruction:
        """Parse one source line of a subroutine into an instruction."""
        head = line_tokens[0]
        if head.type != TokenType.INSTRUCTION:
            raise self._error("lines inside a subroutine must start with an instruction", head)

        arguments = [
            self._parse_argument(group)
            for group in self._split_arguments(line_tokens[1:])
        ]

        # Arity and overload errors point at the whole instruction
        location = SourceLocation(
            head.filename, head.line, head.column, line_tokens[-1].end_column
        )
        return resolve_instruction(head.value, arguments, location, self._source_line(head))

    # =========================================================================
    # Argument Lists
    # =========================================================================

    def _split_arguments(self, tokens: list[Token]) -> list[list[Token]]:
        """Split argument tokens on commas into non-empty groups."""
        groups: list[list[Token]] = []
        current: list[Token] = []

        for index, token in enumerate(tokens):
            if token.type != TokenType.COMMA:
                current.append(token)
                continue

            # Leading, doubled or trailing comma
            if not current or index == len(tokens) - 1:
                raise ArgumentSeparatorError(token.location, self._source_line(token))

            groups.append(current)
            current = []

        if current:
            groups.append(current)
        return groups

    def _expect_end(self, rest: list[Token], after: str) -> None:
        """Raise if tokens remain after a complete argument."""
        if rest:
            raise self._error(f"unexpected token `{rest[0].text}` after {after}", rest[0])

    def _parse_argument(self, tokens: list[Token]) -> InstructionArgument:
        """Parse one comma-separated group into an instruction argument."""
        first, rest = tokens[0], tokens[1:]

        # 42, $2A, %101
        if first.is_numeric:
            self._expect_end(rest, "number literal")
            return MemoryAddress(first.to_word(self._source_line(first)))

        # #literal
        if first.type == TokenType.IMMEDIATE:
            if not rest:
                raise self._error("expected number literal after immediate specifier `#`", first)
            value = rest[0]
            if not value.is_numeric:
                raise self._error(f"unexpected token `{value.text}` after immediate specifier", value)
            self._expect_end(rest[1:], "immediate number literal")
            return ImmediateValue(value.to_word(self._source_line(value)))

        # (literal)
        if first.type == TokenType.OPEN_PAREN:
            if not rest:
                raise self._error("expected memory address after opening parenthesis `(`", first)
            address = rest[0]
            if not address.is_numeric:
                raise self._error(
                    f"unexpected token `{address.text}` after opening parenthesis", address
                )
            if len(rest) < 2:
                raise self._error("expected closing parenthesis after memory address", address)
            if rest[1].type != TokenType.CLOSE_PAREN:
                raise self._error(
                    f"unexpected token `{rest[1].text}` after memory address, "
                    f"expected closing parenthesis",
                    rest[1],
                )
            self._expect_end(rest[2:], "indirect memory address")
            return MemoryAddressIndirect(address.to_word(self._source_line(address)))

        # label
        if first.type == TokenType.IDENTIFIER:
            self._expect_end(rest, "label identifier")
            return LabelAddress(first.value)

        # [label]
        if first.type == TokenType.OPEN_BRACKET:
            if not rest:
                raise self._error("expected label identifier after opening bracket `[`", first)
            name = rest[0]
            if name.type != TokenType.IDENTIFIER:
                raise self._error(f"unexpected token `{name.text}` after opening bracket", name)
            if len(rest) < 2:
                raise self._error("expected closing bracket after label identifier", name)
            if rest[1].type != TokenType.CLOSE_BRACKET:
                raise self._error(
                    f"unexpected token `{rest[1].text}` after label identifier, "
                    f"expected closing bracket",
                    rest[1],
                )
            self._expect_end(rest[2:], "label dereference")
            return LabelValue(name.value)

        # %register
        if first.type == TokenType.REGISTER:
            self._expect_end(rest, "register name")
            register = Register.from_name(first.value)
            if register is None:
                raise InvalidRegisterError(
                    first.value,
                    first.location,
                    self._source_line(first),
                    valid_names=[reg.value for reg in Register],
                )
            return RegisterRef(register)

        raise self._error(f"unexpected token `{first.text}` in argument list", first)


# =============================================================================
# Convenience Functions
# =============================================================================

def build_program(tokens: Sequence[Token], lines: Optional[Sequence[str]] = None) -> Program:
    """
    Parse a token list into a Program.

    Args:
        tokens: Tokens from the lexer
        lines: Source lines for error context (optional)

    Returns:
        The parsed Program
    """
    return Parser(tokens, lines).parse()


def parse_source(text: str, filename: str = "<input>") -> Program:
    """
    Tokenize and parse assembly source text.

    Args:
        text: Complete source text
        filename: Source filename for error reporting

    Returns:
        The parsed Program
    """
    lines = text.splitlines()
    return build_program(tokenize(lines, filename), lines)
