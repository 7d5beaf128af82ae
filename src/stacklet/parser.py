"""
Stacklet Recursive Descent Parser
=================================

This module implements a recursive descent parser for a single let
statement. The parser pulls tokens from a Scanner one at a time and
emits stack-machine instructions as grammar rules complete; parsing and
code generation are the same traversal and no AST is built.

Grammar (EBNF)
--------------
let_statement ::= 'let' IDENT '=' expr ';'
expr          ::= term oper
term          ::= NUMBER | IDENT
oper          ::= ('+' term | '-' term) oper
                | (empty)

Emission
--------
| Rule          | Emits                                              |
|---------------|----------------------------------------------------|
| term          | push <lexeme>                                      |
| oper '+'      | add, after the right operand's term                |
| oper '-'      | sub, after the right operand's term                |
| let_statement | pop <IDENT>, after expr and before matching ';'    |

Because oper recurses after each operator, 'a + b - c' lowers to:
    push a / push b / add / push c / sub

Errors
------
Any mismatch raises UnexpectedTokenError straight away. There is no
recovery, and instructions emitted before the error stay emitted.

Example Usage
-------------
>>> from stacklet.parser import parse_source
>>> parse_source("let x = 1 + 2 - 3;")
['push 1', 'push 2', 'add', 'push 3', 'sub', 'pop x']
"""

import logging
from typing import Union

from stacklet.emitter import InstructionSink, ListSink
from stacklet.errors import UnexpectedTokenError
from stacklet.lexer import Scanner, Token, TokenType

logger = logging.getLogger(__name__)


class Parser:
    """
    Recursive descent parser with direct code emission.

    Holds exactly one token of lookahead: the current token. Each
    successful match replaces it with the scanner's next token.

    Attributes:
        scanner: Token source
        sink: Destination for emitted instructions
    """

    def __init__(self, scanner: Scanner, sink: InstructionSink):
        """
        Initialize the parser and read the first token.

        Args:
            scanner: A fresh scanner over the input
            sink: Where instructions are written

        Raises:
            LexicalError: If the first token cannot be scanned
        """
        self.scanner = scanner
        self.sink = sink
        self._current = scanner.next_token()

    @property
    def current_token(self) -> Token:
        return self._current

    def parse(self) -> None:
        """
        Parse one let statement, emitting its instructions.

        Input after the closing ';' is left unread.

        Raises:
            ParseError: If the tokens do not form a let statement
            LexicalError: If the scanner fails while reading ahead
        """
        self._let_statement()

    # =========================================================================
    # Token Handling
    # =========================================================================

    def _next_token(self) -> None:
        self._current = self.scanner.next_token()

    def _check(self, token_type: TokenType) -> bool:
        """Check if the current token has the given type."""
        return self._current.type is token_type

    def _match(self, token_type: TokenType, expected: str = None) -> Token:
        """
        Consume the current token if it has the expected type.

        Args:
            token_type: The required token type
            expected: Description for the error hint

        Returns:
            The consumed token

        Raises:
            UnexpectedTokenError: If the current token has another type
        """
        if self._check(token_type):
            token = self._current
            self._next_token()
            return token
        raise self._unexpected(expected or token_type.name)

    def _unexpected(self, expected: str) -> UnexpectedTokenError:
        token = self._current
        source_line = None
        if token.location is not None:
            source_line = self.scanner.get_source_line(token.location.line)
        return UnexpectedTokenError(
            token.lexeme,
            expected,
            token.location,
            source_line,
        )

    # =========================================================================
    # Grammar Rules
    # =========================================================================

    def _let_statement(self) -> None:
        """let_statement ::= 'let' IDENT '=' expr ';'"""
        self._match(TokenType.LET, "'let'")
        target = self._match(TokenType.IDENT, "identifier").lexeme
        self._match(TokenType.EQ, "'='")
        self._expr()
        self.sink.pop(target)
        self._match(TokenType.SEMICOLON, "';'")
        logger.debug(f"Parsed let statement for '{target}'")

    def _expr(self) -> None:
        """expr ::= term oper"""
        self._term()
        self._oper()

    def _term(self) -> None:
        """term ::= NUMBER | IDENT"""
        if self._check(TokenType.NUMBER):
            self.sink.push(self._current.lexeme)
            self._match(TokenType.NUMBER)
        elif self._check(TokenType.IDENT):
            self.sink.push(self._current.lexeme)
            self._match(TokenType.IDENT)
        else:
            raise self._unexpected("number or identifier")

    def _oper(self) -> None:
        """oper ::= ('+' term | '-' term) oper | (empty)"""
        if self._check(TokenType.PLUS):
            self._match(TokenType.PLUS)
            self._term()
            self.sink.add()
            self._oper()
        elif self._check(TokenType.MINUS):
            self._match(TokenType.MINUS)
            self._term()
            self.sink.sub()
            self._oper()


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: Union[bytes, str], filename: str = "<input>") -> list[str]:
    """
    Parse one let statement and return the emitted instruction lines.

    Args:
        source: Statement text
        filename: Source name for error messages

    Returns:
        List of instruction lines

    Raises:
        StackletError: If scanning or parsing fails
    """
    sink = ListSink()
    Parser(Scanner(source, filename), sink).parse()
    return sink.lines
