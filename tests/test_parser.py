"""
Parser Test Suite
=================

Tests for the recursive descent parser and the instruction sinks.

Test Organization
-----------------
- TestEmission: instruction order for valid statements
- TestSyntaxErrors: rejected inputs and partial emission
- TestParserState: lookahead and trailing input
- TestSinks: ListSink and StreamSink behaviour
"""

import io

import pytest
from stacklet.emitter import ListSink, StreamSink
from stacklet.errors import (
    LexicalError,
    ParseError,
    SourceLocation,
    UnexpectedTokenError,
    UnterminatedCommentError,
)
from stacklet.lexer import Scanner, TokenType
from stacklet.parser import Parser, parse_source


def run(source) -> tuple[ListSink, Parser]:
    """Parse source into a fresh ListSink, returning both."""
    sink = ListSink()
    parser = Parser(Scanner(source, "<test>"), sink)
    parser.parse()
    return sink, parser


# =============================================================================
# Emission Tests
# =============================================================================

class TestEmission:
    """Instruction order for valid let statements."""

    def test_literal(self):
        assert parse_source("let x = 5;") == ["push 5", "pop x"]

    def test_identifier_operand(self):
        assert parse_source("let y = a + 1;") == ["push a", "push 1", "add", "pop y"]

    def test_left_to_right_chain(self):
        assert parse_source("let x = 1 + 2 - 3;") == [
            "push 1",
            "push 2",
            "add",
            "push 3",
            "sub",
            "pop x",
        ]

    def test_subtraction_only(self):
        assert parse_source("let d = 10 - 0;") == ["push 10", "push 0", "sub", "pop d"]

    def test_identifier_assigned_to_itself(self):
        assert parse_source("let n = n + 1;") == ["push n", "push 1", "add", "pop n"]

    @pytest.mark.parametrize(
        "terms,ops",
        [
            (["a"], []),
            (["a", "b"], ["+"]),
            (["1", "x", "2"], ["-", "-"]),
            (["9", "8", "y", "z", "10"], ["+", "-", "+", "-"]),
        ],
    )
    def test_general_chain(self, terms, ops):
        """push t1, then push ti and add/sub for every (op, term) pair, then pop."""
        text = terms[0]
        expected = [f"push {terms[0]}"]
        for op, term in zip(ops, terms[1:]):
            text += f" {op} {term}"
            expected.append(f"push {term}")
            expected.append("add" if op == "+" else "sub")
        expected.append("pop result")

        assert parse_source(f"let result = {text};") == expected

    def test_no_whitespace(self):
        assert parse_source("let x=a+b-c;") == [
            "push a",
            "push b",
            "add",
            "push c",
            "sub",
            "pop x",
        ]

    def test_comments_and_newlines(self):
        source = "let total // target\n  = a /* first */\n  + 2;"
        assert parse_source(source) == ["push a", "push 2", "add", "pop total"]

    def test_bytes_input(self):
        assert parse_source(b"let x = 5;") == ["push 5", "pop x"]


# =============================================================================
# Syntax Error Tests
# =============================================================================

class TestSyntaxErrors:
    """Inputs that do not form a let statement."""

    @pytest.mark.parametrize(
        "source",
        [
            "x = 5;",            # missing 'let'
            "let 5 = 5;",        # number as target
            "let while = 1;",    # keyword as target
            "let x 5;",          # missing '='
            "let x == 5;",       # '=' then '=' as operand
            "let x = ;",         # missing expression
            "let x = + 1;",      # expression starts with operator
            "let x = 1 + ;",     # missing right operand
            "let x = 1 * 2;",    # '*' is not part of the grammar
            "let x = (1);",      # parentheses are not part of the grammar
            "let x = @;",        # ILLEGAL token
            "let x = \"s\";",    # strings are not terms
            "let x = 05;",       # '0' then '5'
            "",                  # empty input
        ],
    )
    def test_rejected(self, source):
        with pytest.raises(ParseError):
            parse_source(source)

    def test_missing_semicolon(self):
        """'let x = 5' fails instead of succeeding with partial output."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("let x = 5")
        assert exc_info.value.found == "EOF"
        assert exc_info.value.expected == "';'"

    def test_partial_output_stays_emitted(self):
        """Instructions emitted before the error are not rolled back."""
        sink = ListSink()
        parser = Parser(Scanner("let x = 5"), sink)
        with pytest.raises(ParseError):
            parser.parse()
        assert sink.lines == ["push 5", "pop x"]

    def test_partial_output_in_chain(self):
        sink = ListSink()
        parser = Parser(Scanner("let x = 1 + ;"), sink)
        with pytest.raises(ParseError):
            parser.parse()
        assert sink.lines == ["push 1"]

    def test_bad_term_expected_description(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("let x = *;")
        assert exc_info.value.found == "*"
        assert exc_info.value.expected == "number or identifier"

    def test_error_location(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("let x = 5\n  7;", "prog.let")
        assert exc_info.value.location == SourceLocation("prog.let", 2, 3)

    def test_error_message_format(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("let x = 5", "prog.let")
        message = str(exc_info.value)
        assert message.splitlines() == [
            "prog.let:1:10: error: unexpected token 'EOF'",
            "    let x = 5",
            "             ^",
            "hint: expected ';'",
        ]

    def test_syntax_error_is_not_lexical(self):
        with pytest.raises(ParseError) as exc_info:
            parse_source("let = 1;")
        assert not isinstance(exc_info.value, LexicalError)


# =============================================================================
# Parser State Tests
# =============================================================================

class TestParserState:
    """Single-token lookahead and what happens around the statement."""

    def test_first_token_read_on_construction(self):
        parser = Parser(Scanner("let x = 1;"), ListSink())
        assert parser.current_token.type == TokenType.LET

    def test_lexical_error_on_construction(self):
        with pytest.raises(UnterminatedCommentError):
            Parser(Scanner("/* no end"), ListSink())

    def test_trailing_input_not_examined(self):
        sink, parser = run("let x = 1; let y = @ garbage")
        assert sink.lines == ["push 1", "pop x"]
        assert parser.current_token.type == TokenType.LET

    def test_lookahead_after_semicolon(self):
        """Matching ';' reads one more token, which may fail to scan."""
        with pytest.raises(LexicalError):
            parse_source("let x = 1; /* open")

    def test_fresh_parsers_agree(self):
        source = "let v = a - 1 + b;"
        assert parse_source(source) == parse_source(source)


# =============================================================================
# Sink Tests
# =============================================================================

class TestSinks:
    """Instruction sinks."""

    def test_list_sink_helpers(self):
        sink = ListSink()
        sink.push("3")
        sink.push("k")
        sink.add()
        sink.push("1")
        sink.sub()
        sink.pop("k")
        assert list(sink) == ["push 3", "push k", "add", "push 1", "sub", "pop k"]
        assert len(sink) == 6

    def test_list_sink_text(self):
        sink, _ = run("let x = 5;")
        assert sink.text() == "push 5\npop x\n"

    def test_empty_list_sink_text(self):
        assert ListSink().text() == ""

    def test_stream_sink(self):
        stream = io.StringIO()
        Parser(Scanner("let y = a + 1;"), StreamSink(stream)).parse()
        assert stream.getvalue() == "push a\npush 1\nadd\npop y\n"

    def test_stream_sink_partial_output(self):
        stream = io.StringIO()
        with pytest.raises(ParseError):
            Parser(Scanner("let z = 4 - q"), StreamSink(stream)).parse()
        assert stream.getvalue() == "push 4\npush q\nsub\npop z\n"
