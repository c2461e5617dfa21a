"""
sis16 Assembly Language Lexer
=============================

This module implements the lexer (tokenizer) for sis16 assembly language.
It converts source lines into a flat list of tokens that the parser can
process. Lines are scanned independently; a token never spans two lines.

Token Types
-----------
- LABEL: identifier followed by ':' (``main:``)
- DIRECTIVE: '.' followed by an identifier (``.data``, ``.word``)
- INSTRUCTION: first bare identifier on a line (``mov``)
- IDENTIFIER: any later bare identifier on the same line (``boot_loader``)
- REGISTER: '%' followed by a name (``%eax``)
- BINARY / DECIMAL / HEX: numeric literals (``%1010``, ``42``, ``$FF``)
- ASCII_STRING: double-quoted string (``"Hello"``)
- Structural: COMMA, IMMEDIATE ('#'), brackets and parentheses

Position Decides
----------------
Whether a bare identifier is an INSTRUCTION or an IDENTIFIER depends only
on where it sits in the line: the first one on a line that has not yet
produced an instruction or directive is the mnemonic, every later one is
an operand. Labels do not count, so ``main: mov %eax, %ebx`` still yields
an INSTRUCTION for ``mov``.

Number Formats
--------------
| Format      | Prefix | Example | Value |
|-------------|--------|---------|-------|
| Decimal     | (none) | 123     | 123   |
| Hexadecimal | $      | $7F     | 127   |
| Binary      | %      | %1010   | 10    |

``%`` is shared with register names: if everything after the ``%`` is a
digit the token is a binary literal, otherwise it is a register.

Comments
--------
``;`` starts a comment that runs to the end of the line.

Example
-------
>>> from spasm.assembler.lexer import tokenize
>>> for token in tokenize(["mov %eax, #$00FF"]):
...     print(token)
Token(INSTRUCTION, 'mov', 1:1)
Token(REGISTER, 'eax', 1:5)
Token(COMMA, 1:9)
Token(IMMEDIATE, 1:11)
Token(HEX, '00FF', 1:12)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Sequence
import logging
import re
import string

from spasm.cpu import WORD_MAX, Radix, BINARY, DECIMAL, HEXADECIMAL
from spasm.errors import LexicalError, LiteralOverflowError, SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token kinds for sis16 assembly language."""

    # Named tokens (value holds the name without delimiters)
    LABEL = auto()         # name:
    DIRECTIVE = auto()     # .name
    INSTRUCTION = auto()   # first bare identifier on a line
    REGISTER = auto()      # %name
    IDENTIFIER = auto()    # later bare identifiers

    # Literals (value holds the digits or the decoded string contents)
    DECIMAL = auto()       # 123
    BINARY = auto()        # %1010
    HEX = auto()           # $FF
    ASCII_STRING = auto()  # "text"

    # Structural tokens (value is None)
    COMMA = auto()         # ,
    IMMEDIATE = auto()     # #
    OPEN_BRACKET = auto()  # [
    CLOSE_BRACKET = auto() # ]
    OPEN_PAREN = auto()    # (
    CLOSE_PAREN = auto()   # )


NUMERIC_TOKENS = frozenset({TokenType.BINARY, TokenType.DECIMAL, TokenType.HEX})

_RADIX_BY_TYPE: dict[TokenType, Radix] = {
    TokenType.BINARY: BINARY,
    TokenType.DECIMAL: DECIMAL,
    TokenType.HEX: HEXADECIMAL,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from the source code.

    Attributes:
        type: The TokenType classification
        value: Payload (name, digits or string contents), None for structural tokens
        line: Line index in source (0-based)
        column: First column of the token (0-based)
        end_column: Column one past the last character (0-based, exclusive)
        text: Raw source text of the token, prefixes and quotes included
        filename: Name of the source file
    """
    type: TokenType
    value: Optional[str]
    line: int
    column: int
    end_column: int
    text: str
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line + 1}:{self.column + 1})"
        return f"Token({self.type.name}, {self.line + 1}:{self.column + 1})"

    @property
    def location(self) -> SourceLocation:
        """Return the token's span for error reporting."""
        return SourceLocation(self.filename, self.line, self.column, self.end_column)

    @property
    def is_numeric(self) -> bool:
        """True for BINARY, DECIMAL and HEX literals."""
        return self.type in NUMERIC_TOKENS

    def to_word(self, source_line: Optional[str] = None) -> int:
        """
        Convert a numeric literal token to its 16-bit value.

        Args:
            source_line: Source text attached to an overflow error

        Raises:
            LiteralOverflowError: If the literal exceeds a 16-bit word
            TypeError: If the token is not a numeric literal
        """
        radix = _RADIX_BY_TYPE.get(self.type)
        if radix is None:
            raise TypeError(f"cannot convert {self.type.name} token to a word")

        # Reject on digit count first so int() never sees an oversized string
        digits = self.value.lstrip("0")
        if len(digits) > radix.max_digits or int(digits or "0", radix.base) > WORD_MAX:
            raise LiteralOverflowError(radix.name, radix.maximum, self.location, source_line)
        return int(digits or "0", radix.base)


# =============================================================================
# Character Classes
# =============================================================================

# Payload validity checks are anchored over the whole payload
ALPHANUMERIC_RE = re.compile(r"[a-zA-Z0-9_]*")
NUMERIC_RE = re.compile(r"[0-9]*")
BINARY_RE = re.compile(r"[01]*")
HEX_RE = re.compile(r"[0-9a-fA-F]*")


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes sis16 assembly source, one line at a time.

    The lexer is fail-fast: the first malformed token raises a LexicalError
    carrying the span from the token start to the scan position.

    Usage:
        lexer = Lexer(source.splitlines(), "boot.asm")
        tokens = lexer.tokenize()

    Attributes:
        lines: The source lines being tokenized
        filename: Name of the source file (for error reporting)
    """

    # Characters that can start a bare identifier or label
    IDENT_START = string.ascii_letters + "_"

    # Whitespace skipped between tokens
    WHITESPACE = " \t"

    # Characters that end a directive, identifier, register or number
    DELIMITERS = frozenset(" \t,;()[]")

    # Single-character tokens
    SINGLE_CHAR_TOKENS = {
        ",": TokenType.COMMA,
        "#": TokenType.IMMEDIATE,
        "[": TokenType.OPEN_BRACKET,
        "]": TokenType.CLOSE_BRACKET,
        "(": TokenType.OPEN_PAREN,
        ")": TokenType.CLOSE_PAREN,
    }

    # Escape sequences in strings
    ESCAPE_SEQUENCES = {
        "n": "\n",
        "r": "\r",
        "t": "\t",
        "0": "\0",
        "\\": "\\",
        '"': '"',
    }

    def __init__(self, lines: Sequence[str], filename: str = "<input>"):
        self.lines = lines
        self.filename = filename

        # Per-line scan state, reset by _tokenize_line()
        self._line = 0
        self._text = ""
        self._col = 0
        self._found_instruction = False
        self._found_directive = False

    def tokenize(self) -> list[Token]:
        """
        Tokenize every line of the source.

        Returns:
            Tokens in source order

        Raises:
            LexicalError: On the first malformed token
        """
        tokens: list[Token] = []
        for line_index, text in enumerate(self.lines):
            tokens.extend(self._tokenize_line(line_index, text))

        logger.debug(
            "%s: %d tokens from %d lines", self.filename, len(tokens), len(self.lines)
        )
        return tokens

    # =========================================================================
    # Line Scanning
    # =========================================================================

    def _tokenize_line(self, line_index: int, text: str) -> list[Token]:
        """Scan a single line left to right, one token per iteration."""
        self._line = line_index
        self._text = text
        self._col = 0
        self._found_instruction = False
        self._found_directive = False

        tokens: list[Token] = []
        while self._col < len(text):
            char = text[self._col]

            if char in self.WHITESPACE:
                self._col += 1
                continue

            # Comment runs to end of line
            if char == ";":
                break

            tokens.append(self._scan_token(char))

        return tokens

    def _scan_token(self, char: str) -> Token:
        """Classify and scan the token starting with char."""
        start = self._col

        if char == ".":
            return self._scan_directive(start)

        if char in self.IDENT_START:
            return self._scan_word(start)

        if char == '"':
            return self._scan_string(start)

        if char == "%":
            return self._scan_percent(start)

        if char == "$":
            return self._scan_hex(start)

        if char in string.digits:
            return self._scan_decimal(start)

        if char in self.SINGLE_CHAR_TOKENS:
            self._col += 1
            return self._make_token(self.SINGLE_CHAR_TOKENS[char], None, start)

        self._col += 1
        raise self._error(f"unexpected value '{char}' at start of token", start)

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(self, token_type: TokenType, value: Optional[str], start: int) -> Token:
        """Create a token spanning from start to the current column."""
        return Token(
            type=token_type,
            value=value,
            line=self._line,
            column=start,
            end_column=self._col,
            text=self._text[start:self._col],
            filename=self.filename,
        )

    def _error(self, message: str, start: int) -> LexicalError:
        """Create a lexical error spanning from start to the current column."""
        location = SourceLocation(self.filename, self._line, start, self._col)
        return LexicalError(message, location, source_line=self._text)

    def _read_to_delimiter(self) -> str:
        """Consume characters up to (not including) the next delimiter."""
        begin = self._col
        while self._col < len(self._text) and self._text[self._col] not in self.DELIMITERS:
            self._col += 1
        return self._text[begin:self._col]

    # =========================================================================
    # Token Scanners
    # =========================================================================

    def _scan_directive(self, start: int) -> Token:
        """Scan '.name'."""
        self._col += 1  # consume .
        name = self._read_to_delimiter()

        if not name:
            raise self._error("unexpected end of directive token", start)
        if not ALPHANUMERIC_RE.fullmatch(name):
            raise self._error("directive names must be alphanumeric", start)

        self._found_directive = True
        return self._make_token(TokenType.DIRECTIVE, name, start)

    def _scan_word(self, start: int) -> Token:
        """
        Scan a label, instruction mnemonic, or identifier.

        A trailing ':' makes a label. Otherwise the first bare word on a
        line with no instruction or directive yet is the mnemonic.
        """
        word = self._read_to_delimiter()

        if word.endswith(":"):
            name = word[:-1]
            if not ALPHANUMERIC_RE.fullmatch(name):
                raise self._error("label name must be alphanumeric", start)
            return self._make_token(TokenType.LABEL, name, start)

        if not self._found_instruction and not self._found_directive:
            if not ALPHANUMERIC_RE.fullmatch(word):
                raise self._error("instruction name must be alphanumeric", start)
            self._found_instruction = True
            return self._make_token(TokenType.INSTRUCTION, word, start)

        if not ALPHANUMERIC_RE.fullmatch(word):
            raise self._error("identifier name must be alphanumeric", start)
        return self._make_token(TokenType.IDENTIFIER, word, start)

    def _scan_string(self, start: int) -> Token:
        """
        Scan a double-quoted string literal.

        Supports escape sequences: \\n, \\r, \\t, \\0, \\\\, \\"
        Unknown escapes are kept as written.
        """
        self._col += 1  # consume opening "

        chars = []
        while self._col < len(self._text):
            char = self._text[self._col]

            if char == '"':
                self._col += 1  # consume closing "
                return self._make_token(TokenType.ASCII_STRING, "".join(chars), start)

            if char == "\\" and self._col + 1 < len(self._text):
                escaped = self._text[self._col + 1]
                chars.append(self.ESCAPE_SEQUENCES.get(escaped, "\\" + escaped))
                self._col += 2
                continue

            chars.append(char)
            self._col += 1

        raise self._error("expected closing '\"' for string literal", start)

    def _scan_percent(self, start: int) -> Token:
        """Scan '%...' as a binary literal or a register name."""
        self._col += 1  # consume %
        value = self._read_to_delimiter()

        if not value:
            raise self._error("unexpected end of token", start)

        if NUMERIC_RE.fullmatch(value):
            if not BINARY_RE.fullmatch(value):
                raise self._error("'%' can only be used for binary literals", start)
            return self._make_token(TokenType.BINARY, value, start)

        if not ALPHANUMERIC_RE.fullmatch(value):
            raise self._error("register names must be alphanumeric", start)
        return self._make_token(TokenType.REGISTER, value, start)

    def _scan_hex(self, start: int) -> Token:
        """Scan '$' followed by hexadecimal digits."""
        self._col += 1  # consume $
        value = self._read_to_delimiter()

        if not value:
            raise self._error("unexpected end of hex literal token", start)
        if not ALPHANUMERIC_RE.fullmatch(value):
            raise self._error("unexpected non-alphanumeric characters in hex literal", start)
        if not HEX_RE.fullmatch(value):
            raise self._error("'$' can only be used for hex literals", start)

        return self._make_token(TokenType.HEX, value, start)

    def _scan_decimal(self, start: int) -> Token:
        """Scan a decimal literal; the payload keeps the leading digit."""
        value = self._read_to_delimiter()

        if not NUMERIC_RE.fullmatch(value):
            raise self._error("unexpected non-numeric characters in decimal literal", start)

        return self._make_token(TokenType.DECIMAL, value, start)


# =============================================================================
# Convenience Function
# =============================================================================

def tokenize(lines: Sequence[str], filename: str = "<input>") -> list[Token]:
    """
    Tokenize source lines.

    Args:
        lines: Source text split into lines (no line terminators)
        filename: Source filename for error reporting

    Returns:
        Tokens in source order

    Raises:
        LexicalError: On the first malformed token
    """
    return Lexer(lines, filename).tokenize()
