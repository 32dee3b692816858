"""
Unified CLI Error Handling
==========================

Provides consistent error handling and exit codes for the command-line tool.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from minilang.errors import AssemblerError, InternalCompilerError, MinilangError


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Syntax errors, decode errors or assembler failure
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report ``error`` on stderr and exit with the matching code.

    Args:
        error: The exception that was raised
        verbose: If True, print a traceback for internal errors

    Raises:
        SystemExit: Always
    """
    if isinstance(error, InternalCompilerError):
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)

    elif isinstance(error, AssemblerError):
        click.echo(f"Assembler error: {error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, MinilangError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, (FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
