"""
Stacklet Compiler Main Module
=============================

This module provides the programmatic compiler interface. It runs one
fresh Scanner/Parser pair over one input buffer:

    Source bytes → Scanner → Parser → Instruction lines

Usage
-----
Command line:
    $ stlc prog.let

Programmatic:
    >>> from stacklet import compile_let
    >>> compile_let("let y = a + 1;")
    ['push a', 'push 1', 'add', 'pop y']

Error Handling
--------------
Compilation stops at the first error. LexicalError and ParseError
propagate to the caller unchanged so the two can be told apart; a
failed compilation never returns a result.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from stacklet.emitter import ListSink
from stacklet.lexer import Scanner, Token
from stacklet.parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        string_encoding: Codec used to decode string literal bodies
        trace_tokens: Record in the result every token the parser pulled
    """
    string_encoding: str = "utf-8"
    trace_tokens: bool = False


@dataclass
class CompilerResult:
    """
    Result of a successful compilation.

    Failed compilations raise instead of returning a result.

    Attributes:
        filename: Source name
        instructions: Emitted instruction lines, in order
        tokens: Tokens read by the parser, when CompilerOptions.trace_tokens
                is set; ends with the lookahead token after ';'
    """
    filename: str
    instructions: list[str] = field(default_factory=list)
    tokens: list[Token] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Instruction lines joined, one per line."""
        if not self.instructions:
            return ""
        return "\n".join(self.instructions) + "\n"


class TracingScanner(Scanner):
    """Scanner that also appends every token it hands out to `trace`."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.trace: list[Token] = []

    def next_token(self) -> Token:
        token = super().next_token()
        self.trace.append(token)
        return token


class LetCompiler:
    """
    Compiles one let statement to stack-machine instructions.

    Example:
        compiler = LetCompiler()
        result = compiler.compile_file("prog.let")
        print(result.text)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(
        self,
        source: Union[bytes, str],
        filename: str = "<input>",
    ) -> CompilerResult:
        """
        Compile a let statement.

        Args:
            source: Statement text (bytes, or str encoded as UTF-8)
            filename: Source name for error messages

        Returns:
            CompilerResult holding the instruction lines

        Raises:
            LexicalError: If the scanner hits an unterminated block comment
            ParseError: If the input is not a valid let statement
        """
        result = CompilerResult(filename=filename)

        if self.options.trace_tokens:
            scanner = TracingScanner(
                source, filename, string_encoding=self.options.string_encoding
            )
        else:
            scanner = self._scanner(source, filename)

        sink = ListSink()
        Parser(scanner, sink).parse()

        result.instructions = list(sink.lines)
        if isinstance(scanner, TracingScanner):
            result.tokens = scanner.trace
            logger.debug(f"Traced {filename}: {len(result.tokens)} tokens")
        logger.debug(f"Compiled {filename}: {len(result.instructions)} instructions")
        return result

    def compile_file(self, filepath: Union[str, Path]) -> CompilerResult:
        """
        Compile a source file.

        Raises:
            FileNotFoundError: If the source file does not exist
            StackletError: If compilation fails
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        return self.compile_source(path.read_bytes(), str(filepath))

    def tokenize(self, source: Union[bytes, str], filename: str = "<input>"):
        """Return an iterator over the tokens of source, EOF included."""
        return self._scanner(source, filename).tokenize()

    def _scanner(self, source: Union[bytes, str], filename: str) -> Scanner:
        return Scanner(source, filename, string_encoding=self.options.string_encoding)


def compile_let(source: Union[bytes, str], filename: str = "<input>") -> list[str]:
    """
    Compile a let statement with default options.

    Returns:
        The instruction lines
    """
    return LetCompiler().compile_source(source, filename).instructions
