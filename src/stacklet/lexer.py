"""
Stacklet Scanner (Tokenizer)
============================

This module implements the lexical scanner for the let-statement language.
It turns a raw byte buffer into a lazy, pull-based stream of tokens: each
call to Scanner.next_token() consumes zero or more characters and returns
exactly one token. Nothing is tokenized ahead of time.

Token Categories
----------------
- Keywords: let, while, int, class, constructor, function, method, field,
  static, var, char, boolean, void, true, false, null, this, do, if, else,
  return
- Identifiers: letters, digits and '_' (not starting with a digit)
- Numbers: runs of decimal digits (see "Leading Zero" below)
- Strings: "double quoted", no escape sequences
- Punctuation: + - * / . & | ~ > < = ( ) { } [ ] ; ,
- ILLEGAL: any other single character
- EOF: end of input

There are no multi-character operators: '==' scans as two EQ tokens.

Comments
--------
- Single-line: // comment
- Multi-line: /* comment */ (no nesting; unterminated is a LexicalError)

Leading Zero
------------
A '0' is always a complete NUMBER token on its own, so '05' scans as
NUMBER '0' followed by NUMBER '5'.

End of Input
------------
The scanner reads one byte per character. Past the end of the buffer it
sees the sentinel character NUL; a NUL byte inside the buffer reads the
same way. Once the sentinel is reached every further call returns EOF
and the position no longer moves.

Example Usage
-------------
>>> from stacklet.lexer import Scanner
>>> scanner = Scanner(b"let x = 5;")
>>> for token in scanner.tokenize():
...     print(token)
Token(LET, 'let', 1:1)
Token(IDENT, 'x', 1:5)
Token(EQ, '=', 1:7)
Token(NUMBER, '5', 1:9)
Token(SEMICOLON, ';', 1:10)
Token(EOF, 'EOF', 1:11)
"""

import logging
import string
from dataclasses import dataclass, field
from enum import Enum, auto
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Union

from stacklet.errors import SourceLocation, UnterminatedCommentError

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for the let-statement language.

    The set is closed. Keywords get their own types so the parser can
    tell them apart from identifiers without looking at the lexeme.
    """

    # === Structural Tokens ===
    EOF = auto()            # End of input
    ILLEGAL = auto()        # Unrecognised character

    # === Literals and Identifiers ===
    NUMBER = auto()
    IDENT = auto()
    STRING = auto()

    # === Keywords ===
    LET = auto()
    WHILE = auto()
    INT = auto()
    CLASS = auto()
    CONSTRUCTOR = auto()
    FUNCTION = auto()
    METHOD = auto()
    FIELD = auto()
    STATIC = auto()
    VAR = auto()
    CHAR = auto()
    BOOLEAN = auto()
    VOID = auto()
    TRUE = auto()
    FALSE = auto()
    NULL = auto()
    THIS = auto()
    DO = auto()
    IF = auto()
    ELSE = auto()
    RETURN = auto()

    # === Operators ===
    PLUS = auto()           # +
    MINUS = auto()          # -
    ASTERISK = auto()       # *
    SLASH = auto()          # /
    DOT = auto()            # .
    AND = auto()            # &
    OR = auto()             # |
    NOT = auto()            # ~
    GT = auto()             # >
    LT = auto()             # <
    EQ = auto()             # =

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    LBRACKET = auto()       # [
    RBRACKET = auto()       # ]
    SEMICOLON = auto()      # ;
    COMMA = auto()          # ,


# =============================================================================
# Keyword and Punctuation Tables
# =============================================================================

# Read-only after import; shared by every Scanner instance.
KEYWORDS: Mapping[str, TokenType] = MappingProxyType({
    "let": TokenType.LET,
    "while": TokenType.WHILE,
    "int": TokenType.INT,
    "class": TokenType.CLASS,
    "constructor": TokenType.CONSTRUCTOR,
    "function": TokenType.FUNCTION,
    "method": TokenType.METHOD,
    "field": TokenType.FIELD,
    "static": TokenType.STATIC,
    "var": TokenType.VAR,
    "char": TokenType.CHAR,
    "boolean": TokenType.BOOLEAN,
    "void": TokenType.VOID,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "null": TokenType.NULL,
    "this": TokenType.THIS,
    "do": TokenType.DO,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
})

PUNCTUATION: Mapping[str, TokenType] = MappingProxyType({
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    ".": TokenType.DOT,
    "&": TokenType.AND,
    "|": TokenType.OR,
    "~": TokenType.NOT,
    ">": TokenType.GT,
    "<": TokenType.LT,
    "=": TokenType.EQ,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
})


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token produced by the scanner.

    Two tokens are equal when their type and lexeme are equal; the
    location is carried for diagnostics only.

    Attributes:
        type: The TokenType classification
        lexeme: The matched text ("EOF" for the end-of-input token)
        location: Where the token starts in the source
    """
    type: TokenType
    lexeme: str
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.location is None:
            return f"Token({self.type.name}, {self.lexeme!r})"
        return (
            f"Token({self.type.name}, {self.lexeme!r}, "
            f"{self.location.line}:{self.location.column})"
        )


# =============================================================================
# Scanner Implementation
# =============================================================================

class Scanner:
    """
    Pull-based scanner over a byte buffer.

    Usage:
        scanner = Scanner(b"let x = 1 + 2;", "prog.let")
        token = scanner.next_token()

    Attributes:
        source: The buffer being scanned
        filename: Name of the source (for error reporting)
        string_encoding: Codec used to decode string literal bodies
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters + "_"

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    WHITESPACE = " \t\r\n"

    # Returned by _peek() at end of input
    SENTINEL = "\0"

    def __init__(
        self,
        source: Union[bytes, str],
        filename: str = "<input>",
        string_encoding: str = "utf-8",
    ):
        """
        Initialize the scanner.

        Args:
            source: Source buffer; str input is encoded as UTF-8
            filename: Name of the source (for error messages)
            string_encoding: Codec for string literal bodies
        """
        if isinstance(source, str):
            source = source.encode("utf-8")
        self.source = bytes(source)
        self.filename = filename
        self.string_encoding = string_encoding

        self._pos = 0
        self._line = 1
        self._column = 1

    @property
    def position(self) -> int:
        """Current byte offset into the buffer."""
        return self._pos

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens up to and including the first EOF token.

        Raises:
            LexicalError: If the input contains an unterminated block comment
        """
        while True:
            token = self.next_token()
            yield token
            if token.type is TokenType.EOF:
                return

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _peek(self, offset: int = 0) -> str:
        """Look at the character at current position + offset."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return self.SENTINEL
        return chr(self.source[pos])

    def _advance(self) -> str:
        """
        Consume and return the current character.

        Does nothing at the sentinel, so the position never passes it.
        """
        char = self._peek()
        if char == self.SENTINEL:
            return char

        self._pos += 1
        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return char

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self._line, self._column)

    def get_source_line(self, line: int) -> str:
        """Text of a 1-indexed source line, for error context."""
        lines = self.source.split(b"\n")
        if 1 <= line <= len(lines):
            return lines[line - 1].decode("latin-1").rstrip("\r")
        return ""

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        """Skip whitespace and comments until a token can start."""
        while True:
            char = self._peek()

            if char in self.WHITESPACE:
                self._advance()
                continue

            if char == "/" and self._peek(1) == "/":
                self._skip_line_comment()
                continue

            if char == "/" and self._peek(1) == "*":
                self._skip_block_comment()
                continue

            break

    def _skip_line_comment(self) -> None:
        """Skip '//' up to (not including) the end of line."""
        while self._peek() not in ("\n", self.SENTINEL):
            self._advance()

    def _skip_block_comment(self) -> None:
        """
        Skip a block comment (/* ... */).

        Raises:
            UnterminatedCommentError: If the input ends before '*/'
        """
        start = self._location()

        # Consume the /*
        self._advance()
        self._advance()

        while self._peek() != self.SENTINEL:
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                return
            self._advance()

        raise UnterminatedCommentError(start, self.get_source_line(start.line))

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def next_token(self) -> Token:
        """
        Scan and return the next token.

        Returns:
            The next Token; EOF forever once the input is exhausted

        Raises:
            UnterminatedCommentError: If a block comment is never closed
        """
        self._skip_whitespace_and_comments()
        token = self._scan_token()
        logger.debug(f"Scanned {token!r}")
        return token

    def _scan_token(self) -> Token:
        location = self._location()
        char = self._peek()

        if char in self.IDENT_START:
            return self._scan_identifier(location)

        # A lone '0' never starts a longer number
        if char == "0":
            self._advance()
            return Token(TokenType.NUMBER, "0", location)

        if char in string.digits:
            return self._scan_number(location)

        if char == '"':
            return self._scan_string(location)

        if char == self.SENTINEL:
            return Token(TokenType.EOF, "EOF", location)

        self._advance()
        if char in PUNCTUATION:
            return Token(PUNCTUATION[char], char, location)

        return Token(TokenType.ILLEGAL, char, location)

    def _scan_identifier(self, location: SourceLocation) -> Token:
        """
        Scan an identifier or keyword.

        Takes the maximal run of identifier characters, then checks the
        keyword table, so 'letx' is an identifier and not LET + 'x'.
        """
        start = self._pos
        while self._peek() in self.IDENT_CHARS:
            self._advance()

        name = self.source[start:self._pos].decode("ascii")
        return Token(KEYWORDS.get(name, TokenType.IDENT), name, location)

    def _scan_number(self, location: SourceLocation) -> Token:
        """Scan a run of decimal digits."""
        start = self._pos
        while self._peek() in string.digits:
            self._advance()

        return Token(
            TokenType.NUMBER,
            self.source[start:self._pos].decode("ascii"),
            location,
        )

    def _scan_string(self, location: SourceLocation) -> Token:
        """
        Scan a double-quoted string literal.

        The lexeme is the text between the quotes. Reaching the end of
        input before the closing quote simply ends the literal there.
        """
        self._advance()  # consume opening "

        start = self._pos
        while self._peek() not in ('"', self.SENTINEL):
            self._advance()

        body = self.source[start:self._pos].decode(self.string_encoding, errors="replace")
        self._advance()  # consume closing " (no-op at end of input)
        return Token(TokenType.STRING, body, location)
