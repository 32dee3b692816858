"""
Minilang Compiler Main Module
=============================

This module orchestrates the complete compilation process:

    Source bytes → Lex → Parse → (diagnostics?) → Generate → .wat → wat2wasm → .wasm

Usage
-----
Command line:
    $ mlc program.ml -o program.wat

Programmatic:
    >>> from minilang import compile_wat
    >>> text = compile_wat('def one() 1;')

Compilation Pipeline
--------------------
1. **Lexing and Parsing**: the parser pulls tokens from the lexer and
   records syntax errors in an ErrorLogger instead of stopping.
2. **Gate**: if any diagnostic was logged, nothing is generated and
   nothing is written.
3. **Code Generation**: the TranslationUnit becomes WebAssembly text.
4. **Assembly** (optional): an external assembler (wat2wasm by default)
   turns the text file into a binary module.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TextIO

from minilang.ast import TranslationUnit
from minilang.char import Source
from minilang.codegen import CodeGenerator
from minilang.errors import AssemblerError, Diagnostic, ErrorLogger
from minilang.parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        assemble: Run the external assembler after writing the text module
        assembler: Assembler executable (looked up on PATH)
        assembler_timeout: Seconds before the assembler is abandoned
    """
    assemble: bool = True
    assembler: str = "wat2wasm"
    assembler_timeout: float = 60


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filename: Source filename
        success: True if no diagnostics were logged
        module_text: Generated module text (empty on failure)
        program: Parsed translation unit
        diagnostics: Syntax errors in source order
        wasm_path: Binary module written by the assembler, if it ran
    """
    filename: str = ""
    success: bool = False
    module_text: str = ""
    program: Optional[TranslationUnit] = None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    wasm_path: Optional[Path] = None


class MinilangCompiler:
    """
    Minilang to WebAssembly compiler.

    Example:
        compiler = MinilangCompiler(CompilerOptions(assemble=False))
        result = compiler.compile_file("add.ml", "add.wat")
        for diagnostic in result.diagnostics:
            print(diagnostic)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def parse(self, source: Source) -> tuple[TranslationUnit, ErrorLogger]:
        """Parse ``source`` and return the tree with its diagnostics."""
        parser = Parser(source)
        program = parser.parse()
        return program, parser.error_logger

    def compile_to_sink(self, source: Source, sink: TextIO) -> ErrorLogger:
        """
        Compile ``source`` into ``sink``.

        The sink is only written when parsing produced no diagnostics.

        Returns:
            The diagnostics snapshot, for the caller to report
        """
        program, errors = self.parse(source)
        if errors.has_errors():
            logger.debug(f"Skipping code generation: {errors.error_count()} diagnostics")
            return errors

        CodeGenerator(sink).run(program)
        return errors

    def compile_source(self, source: Source, filename: str = "<input>") -> CompilerResult:
        """
        Compile program text to a module string.

        Args:
            source: Program text as bytes, str, or a binary stream
            filename: Source filename for the result record

        Returns:
            CompilerResult; check ``success`` before using ``module_text``
        """
        program, errors = self.parse(source)
        result = CompilerResult(
            filename=filename,
            program=program,
            diagnostics=errors.diagnostics,
        )
        if errors.has_errors():
            return result

        result.module_text = CodeGenerator().generate(program)
        result.success = True
        return result

    def compile_file(self, input_path, output_path=None) -> CompilerResult:
        """
        Compile a source file to a ``.wat`` file and optionally assemble it.

        Args:
            input_path: Source file
            output_path: Text module destination (default: input with .wat)

        Returns:
            CompilerResult for the file

        Raises:
            FileNotFoundError: If the source file does not exist
            AssemblerError: If the assembler runs and fails
        """
        input_path = Path(input_path)
        output_path = Path(output_path) if output_path else input_path.with_suffix(".wat")

        with input_path.open("rb") as src:
            result = self.compile_source(src, str(input_path))

        if not result.success:
            return result

        output_path.write_text(result.module_text, encoding="utf-8")
        logger.debug(f"Wrote {len(result.module_text)} bytes to {output_path}")

        if self.options.assemble:
            result.wasm_path = self.assemble(output_path)

        return result

    def assemble(self, wat_path, wasm_path=None) -> Path:
        """
        Run the external assembler on a text module.

        Returns:
            Path of the binary module

        Raises:
            AssemblerError: If the assembler is missing, times out or fails
        """
        wat_path = Path(wat_path)
        wasm_path = Path(wasm_path) if wasm_path else wat_path.with_suffix(".wasm")
        cmd = [self.options.assembler, str(wat_path), "-o", str(wasm_path)]
        command = " ".join(cmd)
        logger.debug(f"Running assembler: {command}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.options.assembler_timeout,
            )
        except subprocess.TimeoutExpired:
            raise AssemblerError(f"{self.options.assembler} timed out", command=command)
        except FileNotFoundError:
            raise AssemblerError(
                f"{self.options.assembler} not found - is it installed?",
                command=command,
            )

        if result.returncode != 0:
            logger.warning(f"{self.options.assembler} exited with status {result.returncode}")
            raise AssemblerError(
                f"{self.options.assembler} failed for {wat_path}",
                command=command,
                stdout=result.stdout,
                stderr=result.stderr,
                return_code=result.returncode,
            )

        return wasm_path


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_wat(source: Source) -> str:
    """
    Compile program text to a WebAssembly text module.

    Raises:
        CompilationError: If the source has syntax errors

    Example:
        >>> print(compile_wat('def half(x) x / 2;'), end="")
        (module
        (func $half (param $x f32) (result f32)
        local.get $x
        f32.const 2
        f32.div
        )
        (export "half" (func $half))
        )
    """
    program, errors = MinilangCompiler().parse(source)
    errors.raise_if_errors()
    return CodeGenerator().generate(program)
