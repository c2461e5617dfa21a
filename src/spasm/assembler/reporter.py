"""
Diagnostic Reporter
===================

Renders an AssemblerError against the source it came from and ends the
run. The lexer and parser only raise; this is the single place where a
diagnostic is printed.

Output Format
-------------
```
[ERROR] register name `ezx` is invalid
/home/user/boot.asm:4:9
  2: main:
  3:     mov %eax, #1
  4:     mov %ezx, %eax
             ^^^^
             here
hint: valid registers: %ax, %bx, ...
```

Line numbers and columns are shown 1-based. Up to ``context_lines`` lines
of source are printed, ending with the error line. The caret row is padded
by the width of the line-number gutter so it sits under the span.
"""

from pathlib import Path
from typing import NoReturn, Optional, Sequence, Union
import sys

import click

from spasm.errors import AssemblerError


def _gutter(line: int) -> str:
    """Line-number gutter for a 0-based line, e.g. '  4:'."""
    return f"{line + 1:>3}:"


class DiagnosticReporter:
    """
    Formats located errors with source context.

    Attributes:
        lines: Source lines of the file being assembled
        path: Path of that file, shown resolved (None to use the error's filename)
        context_lines: Maximum number of source lines shown per diagnostic
        color: Force colour on/off, or None to let click decide
    """

    def __init__(
        self,
        lines: Sequence[str],
        path: Optional[Union[str, Path]] = None,
        context_lines: int = 3,
        color: Optional[bool] = None,
    ):
        self.lines = lines
        self.path = Path(path) if path is not None else None
        self.context_lines = max(1, context_lines)
        self.color = color

    def _display_path(self, error: AssemblerError) -> str:
        if self.path is not None:
            return str(self.path.resolve())
        return error.location.filename

    def format(self, error: AssemblerError, styled: bool = False) -> str:
        """
        Build the diagnostic text for an error.

        Args:
            error: The error to render
            styled: Apply click.style colouring

        Returns:
            Multi-line diagnostic text (no trailing newline)
        """
        def style(text: str, **kwargs) -> str:
            return click.style(text, **kwargs) if styled else text

        out = [style("[ERROR]", fg="red", bold=True) + " " + error.message]

        location = error.location
        if location is not None:
            out.append(style(
                f"{self._display_path(error)}:{location.line + 1}:{location.column + 1}",
                dim=True,
            ))

            first = max(0, location.line - (self.context_lines - 1))
            for number in range(first, min(location.line + 1, len(self.lines))):
                gutter = style(_gutter(number), fg="blue")
                out.append(f"{gutter} {self.lines[number]}")

            padding = " " * (location.column + len(_gutter(location.line)) + 1)
            out.append(padding + style("^" * location.width, fg="red", bold=True))
            out.append(padding + style("here", fg="red"))

        if error.hint:
            out.append(style("hint:", fg="cyan") + f" {error.hint}")

        return "\n".join(out)

    def report(self, error: AssemblerError) -> NoReturn:
        """Print the diagnostic to stderr and exit with status 1."""
        click.echo(self.format(error, styled=True), err=True, color=self.color)
        sys.exit(1)
