"""
Stacklet - Let Statement to Stack Machine Compiler
==================================================

This package translates a single statement of the form

    let identifier = expression;

where expression is a chain of '+' and '-' over numbers and identifiers,
into instructions for a stack machine:

    push <value>   add   sub   pop <name>

Pipeline
--------
    Source bytes → Scanner → Parser → InstructionSink

The scanner is pull-based: the parser asks for one token at a time. The
parser emits instructions while it descends, so there is no syntax tree.

Usage
-----
>>> from stacklet import compile_let
>>> compile_let("let x = 1 + 2 - 3;")
['push 1', 'push 2', 'add', 'push 3', 'sub', 'pop x']

Or from the command line:
    $ stlc prog.let
    $ stlc -e "let x = a - 1;"
"""

__version__ = "1.0.0"

from stacklet.compiler import LetCompiler, CompilerOptions, CompilerResult, compile_let
from stacklet.emitter import InstructionSink, ListSink, StreamSink
from stacklet.errors import (
    SourceLocation,
    StackletError,
    LexicalError,
    UnterminatedCommentError,
    ParseError,
    UnexpectedTokenError,
)
from stacklet.lexer import KEYWORDS, Scanner, Token, TokenType
from stacklet.parser import Parser, parse_source

__all__ = [
    # Version
    "__version__",
    # Main API
    "LetCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_let",
    # Errors
    "SourceLocation",
    "StackletError",
    "LexicalError",
    "UnterminatedCommentError",
    "ParseError",
    "UnexpectedTokenError",
    # Scanner
    "KEYWORDS",
    "Scanner",
    "Token",
    "TokenType",
    # Parser
    "Parser",
    "parse_source",
    # Emission
    "InstructionSink",
    "ListSink",
    "StreamSink",
]
