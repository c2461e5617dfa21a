"""
SPASM Error Hierarchy
=====================

This module defines the exception hierarchy for the sis16 assembler front
end. All exceptions inherit from SpasmError, allowing callers to catch every
assembler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
SpasmError (base)
└── AssemblerError (located in source)
    ├── LexicalError - malformed token, bad literal characters
    ├── AssemblySyntaxError - structural violations
    │   ├── MissingSectionError - program does not start with .data/.text
    │   ├── DuplicateSectionError - second .data or .text section
    │   ├── EmptyLabelError - label with no body
    │   ├── ArgumentSeparatorError - misplaced comma in argument list
    │   ├── InvalidRegisterError - unknown register name
    │   └── DirectiveError - unknown/illegal directive
    └── AssemblySemanticError - well-formed but meaningless input
        ├── LiteralOverflowError - literal exceeds a 16-bit word
        ├── ArgumentCountError - wrong number of instruction arguments
        ├── OverloadError - no overload matches the argument shapes
        └── UnknownInstructionError - mnemonic is not implemented

Design Philosophy
-----------------
The lexer and parser never print and never exit. They raise one of these
exceptions carrying a SourceLocation span, and the top-level driver hands
it to the DiagnosticReporter which renders the source context and ends the
process. This keeps both components testable by asserting on the raised
error value.

The short form of an error (str(error)) follows this format:
    filename:line:column: error: description
        source_line_text
        ^^^^^ (pointer to error span)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class SpasmError(Exception):
    """
    Base exception for all SPASM errors.

        try:
            program = Assembler().parse_file("boot.asm")
        except SpasmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A half-open span on a single source line.

    Positions are stored 0-based, exactly as the lexer counts them, and
    rendered 1-based for humans.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line index (0-based)
        column: First column of the span (0-based)
        end_column: Column one past the end of the span (0-based, exclusive)
    """
    filename: str
    line: int
    column: int
    end_column: int

    def __post_init__(self) -> None:
        # A zero-width span still gets one caret.
        if self.end_column <= self.column:
            object.__setattr__(self, "end_column", self.column + 1)

    @property
    def width(self) -> int:
        """Number of columns covered by the span."""
        return self.end_column - self.column

    def __str__(self) -> str:
        """Format as 'filename:line:column' (1-based) for error messages."""
        return f"{self.filename}:{self.line + 1}:{self.column + 1}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(SpasmError):
    """
    Base exception for all errors anchored in assembly source.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    #: Coarse error kind: "lexical", "syntax" or "semantic"
    category = "assembler"

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            boot.asm:4:9: error: register name `ezx` is invalid
                mov %ezx, #1
                    ^^^^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            padding = " " * (4 + self.location.column)
            parts.append(f"{padding}{'^' * self.location.width}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexicalError(AssemblerError):
    """
    A token could not be formed from the source characters.

    Examples:
        - Unterminated string literal
        - '%102' (not a binary literal)
        - '$FG' (not a hex literal)
        - A character that cannot start any token
    """
    category = "lexical"


class AssemblySyntaxError(AssemblerError):
    """
    The token stream does not follow the assembly grammar.

    Raised by the parser for misplaced tokens, malformed argument shapes,
    and similar structural violations.
    """
    category = "syntax"


class MissingSectionError(AssemblySyntaxError):
    """Program content appears before any .data or .text directive."""
    pass


class DuplicateSectionError(AssemblySyntaxError):
    """
    A section directive appears more than once.

    A program has at most one .data and one .text section, regardless of
    their contents.
    """

    def __init__(
        self,
        section: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.section = section
        super().__init__(
            f"duplicate section '.{section}'",
            location=location,
            hint=f"merge both '.{section}' blocks into one section",
            source_line=source_line,
        )


class EmptyLabelError(AssemblySyntaxError):
    """A label is followed directly by another label or a section end."""

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        super().__init__(
            f"label `{label}` cannot be empty",
            location=location,
            source_line=source_line,
        )


class ArgumentSeparatorError(AssemblySyntaxError):
    """Leading, trailing or doubled comma in an argument list."""

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unexpected argument separator `,`",
            location=location,
            source_line=source_line,
        )


class InvalidRegisterError(AssemblySyntaxError):
    """A %name operand does not name a sis16 register."""

    def __init__(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        valid_names: Optional[list[str]] = None,
    ):
        self.name = name
        self.valid_names = valid_names or []

        hint = None
        if self.valid_names:
            hint = "valid registers: " + ", ".join(f"%{n}" for n in self.valid_names)

        super().__init__(
            f"register name `{name}` is invalid",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DirectiveError(AssemblySyntaxError):
    """
    A directive is used where it is not allowed or is not recognised.

    Examples:
        - '.byte 1' inside a data label (only .ascii and .word exist)
        - '.org' where a label is expected
    """
    pass


class AssemblySemanticError(AssemblerError):
    """
    Input that is well-formed but cannot be given a meaning.

    Covers literal range violations and operand shapes that the target
    instruction set does not support.
    """
    category = "semantic"


class LiteralOverflowError(AssemblySemanticError):
    """
    A numeric literal does not fit in a 16-bit word.

    The message names the largest value representable in the literal's
    own radix so the user can compare digit counts directly.
    """

    def __init__(
        self,
        radix_name: str,
        maximum: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.radix_name = radix_name
        self.maximum = maximum
        super().__init__(
            f"{radix_name} literal is larger than expected 16-bit word (max is {maximum})",
            location=location,
            source_line=source_line,
        )


class ArgumentCountError(AssemblySemanticError):
    """An instruction was given the wrong number of arguments."""

    def __init__(
        self,
        mnemonic: str,
        expected: tuple[int, ...],
        actual: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        self.expected = expected
        self.actual = actual

        counts = " or ".join(str(n) for n in expected)
        noun = "argument" if expected == (1,) else "arguments"
        super().__init__(
            f"`{mnemonic}` instruction expects {counts} {noun}, but got {actual}",
            location=location,
            source_line=source_line,
        )


class OverloadError(AssemblySemanticError):
    """
    The argument shapes match none of the mnemonic's overloads.

    Example:
        mov #1, %eax   ; Error: cannot move into an immediate
    """

    def __init__(
        self,
        mnemonic: str,
        shapes: tuple[str, ...],
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        valid_shapes: Optional[list[str]] = None,
        description: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        self.shapes = shapes
        self.valid_shapes = valid_shapes or []

        hint = None
        if self.valid_shapes:
            name = f"{mnemonic} ({description})" if description else mnemonic
            hint = f"{name} supports: " + "; ".join(self.valid_shapes)

        super().__init__(
            f"could not find valid overload of `{mnemonic}` instruction "
            f"for supplied argument types",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnknownInstructionError(AssemblySemanticError):
    """The mnemonic is not part of the implemented instruction set."""

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        super().__init__(
            f"instruction `{mnemonic}` is not implemented",
            location=location,
            source_line=source_line,
        )
