"""
SPASM Configuration
===================

Settings shared by the assembler facade and the command line. Values come
from, in increasing order of precedence:
- Default values (defined here)
- Environment variables (AssemblerConfig.from_env)
- Command-line flags (applied by the CLI on top of from_env)
"""

from dataclasses import dataclass
from typing import Optional
import os


# Accepted spellings for boolean environment variables
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _parse_bool(value: str) -> Optional[bool]:
    """Parse a boolean environment value, or return None if unrecognised."""
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


@dataclass
class AssemblerConfig:
    """
    Configuration for a spasm run.

    Attributes:
        context_lines: Source lines shown above and including an error (default: 3)
        color: Force coloured diagnostics on/off; None lets click decide
        verbose: Emit debug logging (default: False)
        source_suffix: Required extension of input files (default: ".asm")
    """

    context_lines: int = 3
    color: Optional[bool] = None
    verbose: bool = False
    source_suffix: str = ".asm"

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Environment variables (all optional):
            SPASM_CONTEXT_LINES: Number of context lines (positive integer)
            SPASM_COLOR: 1/0, true/false, yes/no
            SPASM_VERBOSE: 1/0, true/false, yes/no

        Invalid values are ignored and the default is kept.

        Returns:
            AssemblerConfig with values from environment variables
        """
        config = cls()

        if context := os.environ.get("SPASM_CONTEXT_LINES"):
            try:
                lines = int(context)
            except ValueError:
                lines = 0
            if lines > 0:
                config.context_lines = lines

        if color := os.environ.get("SPASM_COLOR"):
            parsed = _parse_bool(color)
            if parsed is not None:
                config.color = parsed

        if verbose := os.environ.get("SPASM_VERBOSE"):
            parsed = _parse_bool(verbose)
            if parsed is not None:
                config.verbose = parsed

        return config
