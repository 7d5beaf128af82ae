"""
Stacklet Error Hierarchy
========================

This module defines the exception hierarchy for the let-statement compiler.
All exceptions inherit from StackletError, allowing callers to catch every
compiler error with a single except clause, while still telling the two
failure classes apart.

Exception Hierarchy
-------------------
StackletError (base)
├── LexicalError - the scanner cannot continue
│   └── UnterminatedCommentError - block comment runs into end of input
└── ParseError - the token stream does not fit the grammar
    └── UnexpectedTokenError - current token is not the one required

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source text for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for in-memory input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Base Exception Class
# =============================================================================

class StackletError(Exception):
    """
    Base exception for all compiler errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text of the offending line (optional)
    """

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
            prog.let:1:9: error: unexpected token '*'
                let x = * 2;
                        ^
            hint: expected number or identifier
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Lexical Errors
# =============================================================================

class LexicalError(StackletError):
    """
    Error raised by the scanner itself.

    Unrecognised characters are not lexical errors: they come back as
    ILLEGAL tokens and only fail if the parser cannot use them.
    """
    pass


class UnterminatedCommentError(LexicalError):
    """
    Block comment without a closing '*/'.

    Example:
        let x = 5; /* never closed
    """

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unterminated block comment",
            location=location,
            hint="add closing */ to terminate the comment",
            source_line=source_line,
        )


# =============================================================================
# Syntax Errors
# =============================================================================

class ParseError(StackletError):
    """
    Syntax error found by the parser.

    Examples:
        - Missing 'let'
        - Missing '=' after the target name
        - Expression starting with an operator
        - Missing closing ';'
    """
    pass


class UnexpectedTokenError(ParseError):
    """
    Current token does not match what the grammar requires.

    Attributes:
        found: Lexeme of the offending token
        expected: Human readable description of what was required
    """

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}"

        super().__init__(
            f"unexpected token '{found}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )
