"""
spasm - sis16 Assembler Command-Line Interface
==============================================

This module implements the command-line interface for the sis16 assembler
front end. It loads a source file, runs the lexer and parser, and prints a
diagnostic with source context on the first error.

Usage Examples
--------------
Check a file:
    $ spasm boot.asm

Show the token stream:
    $ spasm --tokens boot.asm

Show the parsed program:
    $ spasm --ast boot.asm

Verbose mode:
    $ spasm -v boot.asm

Environment
-----------
SPASM_CONTEXT_LINES, SPASM_COLOR and SPASM_VERBOSE set defaults that the
command-line flags override.
"""

from pathlib import Path
from typing import Optional
import logging

import click

from spasm import __version__
from spasm.config import AssemblerConfig
from spasm.errors import AssemblerError
from spasm.assembler import Assembler, Program, Token
from spasm.cli.errors import handle_cli_exception


# =============================================================================
# Output Formatting
# =============================================================================

def format_token(token: Token) -> str:
    """One line per token: position, kind, raw text."""
    position = f"{token.line + 1}:{token.column + 1}-{token.end_column}"
    return f"{position:<12} {token.type.name:<14} {token.text}"


def format_program(program: Program) -> str:
    """Render a Program as an indented outline."""
    out = []
    if program.data is not None:
        out.append(".data")
        for label in program.data.labels:
            out.append(f"  {label.name}:")
            out.extend(f"    {constant!r}" for constant in label.constants)
    if program.text is not None:
        out.append(".text")
        for label in program.text.labels:
            out.append(f"  {label.name}:")
            out.extend(f"    {instruction!r}" for instruction in label.instructions)
    return "\n".join(out)


def summarize(program: Program) -> str:
    constants = sum(len(label.constants) for label in program.data.labels) if program.data else 0
    instructions = sum(len(label.instructions) for label in program.text.labels) if program.text else 0
    return f"{constants} constants, {instructions} instructions"


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--tokens", "show_tokens",
    is_flag=True,
    help="Print the token stream",
)
@click.option(
    "--ast", "show_ast",
    is_flag=True,
    help="Print the parsed program",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output with debug logging",
)
@click.option(
    "--color/--no-color",
    default=None,
    help="Force coloured diagnostics on or off (default: auto)",
)
@click.version_option(version=__version__, prog_name="spasm")
def main(
    input_file: Path,
    show_tokens: bool,
    show_ast: bool,
    verbose: bool,
    color: Optional[bool],
) -> None:
    """
    Lex and parse sis16 assembly source.

    INPUT_FILE is the assembly source file (.asm) to check.

    On the first error a diagnostic with source context is printed to
    stderr and the exit status is 1.

    \b
    Examples:
        spasm boot.asm            # Check syntax
        spasm --tokens boot.asm   # Dump tokens
        spasm --ast boot.asm      # Dump the parsed program
    """
    config = AssemblerConfig.from_env()
    if verbose:
        config.verbose = True
    if color is not None:
        config.color = color

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s" if config.verbose else "%(message)s",
    )

    asm = Assembler(config)

    try:
        if input_file.suffix != config.source_suffix:
            raise click.BadParameter(
                f"expected a '{config.source_suffix}' file, got '{input_file.name}'",
                param_hint="INPUT_FILE",
            )

        if show_tokens:
            for token in asm.tokenize_file(input_file):
                click.echo(format_token(token))

        program = asm.parse_file(input_file)

        if show_ast:
            click.echo(format_program(program))
        elif not show_tokens:
            click.echo(f"{input_file}: ok ({summarize(program)})")

    except AssemblerError as e:
        asm.report(e)
    except Exception as e:
        handle_cli_exception(e, verbose=config.verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
