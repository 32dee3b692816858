"""
mlc - Minilang Compiler Command-Line Interface
==============================================

This module implements the command-line interface for the minilang
compiler.

Usage Examples
--------------
Basic compilation (writes add.wat, then runs wat2wasm to get add.wasm):
    $ mlc add.ml

With output file:
    $ mlc add.ml -o build/add.wat

Text output only:
    $ mlc --no-assemble add.ml

Inspect the front end:
    $ mlc --tokens add.ml
    $ mlc --ast add.ml
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from minilang import __version__
from minilang.ast import ASTPrinter
from minilang.cli.errors import ExitCode, handle_cli_exception
from minilang.compiler import CompilerOptions, MinilangCompiler
from minilang.lexer import Lexer


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output text module (default: input.wat)",
)
@click.option(
    "--no-assemble",
    is_flag=True,
    help="Write the .wat file only; do not run the assembler",
)
@click.option(
    "--assembler",
    default="wat2wasm",
    show_default=True,
    help="Assembler used to produce the binary module",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit (for debugging)",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print AST and exit (for debugging)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="mlc")
def main(
    input_file: Path,
    output: Optional[Path],
    no_assemble: bool,
    assembler: str,
    tokens: bool,
    ast: bool,
    verbose: bool,
) -> None:
    """
    Compile a minilang program to WebAssembly.

    INPUT_FILE is the minilang source file to compile.

    \b
    Examples:
        mlc add.ml                   # Outputs add.wat and add.wasm
        mlc add.ml -o out.wat        # Specify output file
        mlc --no-assemble add.ml     # Text module only
        mlc --ast add.ml             # Dump the syntax tree
    """
    setup_logging(verbose)

    if output is None:
        output = input_file.with_suffix(".wat")

    options = CompilerOptions(
        assemble=not no_assemble,
        assembler=assembler,
    )

    try:
        if tokens:
            with input_file.open("rb") as src:
                for token in Lexer(src).tokens():
                    click.echo(str(token))
            return

        compiler = MinilangCompiler(options)

        if ast:
            with input_file.open("rb") as src:
                program, errors = compiler.parse(src)
            click.echo(ASTPrinter().print(program))
            if errors.has_errors():
                report_diagnostics(errors)
                sys.exit(ExitCode.BUILD_ERROR)
            return

        if verbose:
            click.echo(f"Compiling {input_file}...")

        result = compiler.compile_file(input_file, output)

        if not result.success:
            report_diagnostics(result.diagnostics)
            sys.exit(ExitCode.BUILD_ERROR)

        if verbose:
            click.echo(f"Wrote {len(result.module_text)} bytes to {output}")
            click.echo(f"Parsed: {len(result.program)} definitions")

        if result.wasm_path:
            click.echo(f"Compiled {input_file} -> {output} -> {result.wasm_path}")
        else:
            click.echo(f"Compiled {input_file} -> {output}")

    except Exception as e:
        handle_cli_exception(e, verbose)


def report_diagnostics(diagnostics) -> None:
    """Print every diagnostic on stderr."""
    for diagnostic in diagnostics:
        click.echo(f"SYNTAX ERROR: {diagnostic}", err=True)


if __name__ == "__main__":
    main()
