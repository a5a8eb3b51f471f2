"""Comprehensive tests for the character scanner."""

import io
from typing import List, Optional, Tuple
from unittest.mock import patch

import pytest

from strict_markup_parser.scanning import Scanner, Token, TokenType
from strict_markup_parser.scanning.scanner import _Action
from strict_markup_parser.shared import ScannerConfig, UnflushedBufferError

BL = TokenType.BRACKET_LEFT
BR = TokenType.BRACKET_RIGHT
EQ = TokenType.EQUALS
SLASH = TokenType.END_SLASH
ID = TokenType.IDENTIFIER
LIT = TokenType.LITERAL


def scan(source) -> List[Tuple[TokenType, Optional[str]]]:
    """Scan ``source`` and return (type, value) pairs."""
    return [(token.type, token.value) for token in Scanner(source)]


def scan_lines(source) -> List[Tuple[TokenType, int]]:
    """Scan ``source`` and return (type, line) pairs."""
    return [(token.type, token.line) for token in Scanner(source)]


class TestTagMode:
    """Tests for scanning inside tags."""

    def test_attributes_with_and_without_values(self):
        """Test identifiers, equals and literals of an opening tag."""
        assert scan('<a href="x" disabled>') == [
            (BL, None),
            (ID, "a"),
            (ID, "href"),
            (EQ, None),
            (LIT, "x"),
            (ID, "disabled"),
            (BR, None),
        ]

    def test_closing_tag(self):
        """Test that '/' directly after '<' is an EndSlash token."""
        assert scan("</div>") == [(BL, None), (SLASH, None), (ID, "div"), (BR, None)]

    def test_self_closing_tag(self):
        """Test that a trailing slash terminates the preceding literal run."""
        assert scan('<img src="a.png"/>') == [
            (BL, None),
            (ID, "img"),
            (ID, "src"),
            (EQ, None),
            (LIT, "a.png"),
            (SLASH, None),
            (BR, None),
        ]

    def test_slash_ends_identifier_run(self):
        """Test that '/' after a name stops the run without being swallowed."""
        assert scan("<br/>") == [(BL, None), (ID, "br"), (SLASH, None), (BR, None)]

    def test_whitespace_is_skipped_between_tokens(self):
        """Test that runs of whitespace only separate identifiers."""
        assert scan("<  a \t  b\n>") == [(BL, None), (ID, "a"), (ID, "b"), (BR, None)]

    def test_literal_keeps_special_characters(self):
        """Test that quoted values collect markup characters verbatim."""
        assert scan('<a t="<b>=/ c">') == [
            (BL, None),
            (ID, "a"),
            (ID, "t"),
            (EQ, None),
            (LIT, "<b>=/ c"),
            (BR, None),
        ]

    def test_empty_literal(self):
        """Test that an empty quoted value is an empty Literal token."""
        assert (LIT, "") in scan('<a b="">')

    def test_quote_directly_after_identifier(self):
        """Test that a quote ends the pending run and then opens a literal."""
        assert scan('<a b"c">') == [
            (BL, None),
            (ID, "a"),
            (ID, "b"),
            (LIT, "c"),
            (BR, None),
        ]

    def test_unterminated_literal_flushes_at_end_of_input(self):
        """Test that input ending inside quotes flushes the collected literal."""
        scanner = Scanner('<a b="xyz')
        tokens = [(token.type, token.value) for token in scanner]

        assert tokens[-1] == (LIT, "xyz")
        assert scanner.in_literal is True


class TestContentMode:
    """Tests for scanning text between tags."""

    def test_text_between_tags(self):
        """Test that text between '>' and '<' is a single identifier."""
        assert scan("<p>hello world</p>") == [
            (BL, None),
            (ID, "p"),
            (BR, None),
            (ID, "hello world"),
            (BL, None),
            (SLASH, None),
            (ID, "p"),
            (BR, None),
        ]

    def test_whitespace_only_content_is_kept(self):
        """Test that the scanner does not drop whitespace-only text."""
        assert (ID, "   ") in scan("<div>   </div>")

    def test_punctuation_is_ordinary_in_content(self):
        """Test that '=', '/', '>' and quotes are plain text in content mode."""
        assert (ID, 'a/b=c > "d"') in scan('<p>a/b=c > "d"</p>')

    def test_content_at_end_of_input(self):
        """Test that trailing text is flushed when input ends."""
        assert scan("<a>tail")[-1] == (ID, "tail")

    def test_mode_flags(self):
        """Test content mode is entered on '>' and left on '<'."""
        scanner = Scanner("<a>text<b>")

        assert scanner.in_content is False
        for _ in range(3):  # '<', 'a', '>'
            scanner.next_token()
        assert scanner.in_content is True

        assert scanner.next_token().value == "text"
        assert scanner.next_token().type is BL
        assert scanner.in_content is False

    def test_end_of_input_returns_none(self):
        """Test next_token returns None once input is exhausted."""
        scanner = Scanner("<a>")
        list(scanner)

        assert scanner.next_token() is None
        assert scanner.at_end is True


class TestLineNumbers:
    """Tests for line tracking."""

    def test_lines_across_modes(self):
        """Test that each newline increments the line once in every mode."""
        assert scan_lines("<a>\n<b>\n</b>\n</a>") == [
            (BL, 1), (ID, 1), (BR, 1), (ID, 1),
            (BL, 2), (ID, 2), (BR, 2), (ID, 2),
            (BL, 3), (SLASH, 3), (ID, 3), (BR, 3), (ID, 3),
            (BL, 4), (SLASH, 4), (ID, 4), (BR, 4),
        ]

    def test_newline_inside_literal(self):
        """Test a literal keeps its start line and later tokens move on."""
        tokens = list(Scanner('<a t="x\ny" u="z">'))

        literal = tokens[4]
        assert (literal.type, literal.value, literal.line) == (LIT, "x\ny", 1)
        assert (tokens[5].value, tokens[5].line) == ("u", 2)

    def test_newline_ending_identifier(self):
        """Test that a newline separating identifiers is counted."""
        tokens = list(Scanner("<a\nb>"))

        assert [(t.value, t.line) for t in tokens if t.type is ID] == [
            ("a", 1),
            ("b", 2),
        ]

    def test_text_run_starts_on_its_first_line(self):
        """Test that multi-line text carries the line of its first character."""
        tokens = list(Scanner("<p>\n\nfoo\n</p>"))

        assert (tokens[3].value, tokens[3].line) == ("\n\nfoo\n", 1)
        assert tokens[4].line == 4


class TestCharacterSources:
    """Tests for the accepted character sources."""

    def test_chunked_iterable_matches_string(self):
        """Test that chunk boundaries do not affect tokens."""
        text = '<a b="c d">x</a>'
        chunks = ["<a", ' b="c', ' d">x</', "a>"]

        assert scan(chunks) == scan(text)

    def test_file_like_object(self):
        """Test reading from a text stream in small chunks."""
        stream = io.StringIO("<p>hi</p>")
        scanner = Scanner(stream, ScannerConfig(read_chunk_size=2))

        assert [t.value for t in scanner if t.type is ID] == ["p", "hi", "p"]

    def test_bytes_rejected(self):
        """Test bytes input raises TypeError immediately."""
        with pytest.raises(TypeError, match="decoded text"):
            Scanner(b"<a>")

    def test_binary_stream_rejected(self):
        """Test a binary stream fails when read."""
        with pytest.raises(TypeError, match="decoded text"):
            list(Scanner(io.BytesIO(b"<a>")))

    def test_non_iterable_rejected(self):
        """Test unsupported sources raise TypeError."""
        with pytest.raises(TypeError, match="Unsupported character source"):
            Scanner(42)

    def test_non_string_chunk_rejected(self):
        """Test chunk iterables must yield str."""
        with pytest.raises(TypeError, match="chunks must be str"):
            list(Scanner(["<a>", 5]))


class TestCountersAndInvariants:
    """Tests for scanner bookkeeping and the unflushed buffer guard."""

    def test_counters(self):
        """Test token and character counters."""
        text = "<a>x</a>"
        scanner = Scanner(text)
        tokens = list(scanner)

        assert scanner.tokens_emitted == len(tokens) == 8
        assert scanner.characters_consumed == len(text)

    def test_lazy_consumption(self):
        """Test that the scanner reads only as far as requested."""
        scanner = Scanner("<a>rest of the document")
        scanner.next_token()

        assert scanner.characters_consumed == 1

    def test_structural_token_with_pending_run_fails(self):
        """Test emitting punctuation over a pending run raises UnflushedBufferError."""
        scanner = Scanner("x=")
        scanner._collect("a", TokenType.IDENTIFIER)

        with patch.object(
            Scanner, "_classify", return_value=(_Action.EMIT, TokenType.EQUALS)
        ):
            with pytest.raises(UnflushedBufferError) as exc_info:
                scanner.next_token()

        assert exc_info.value.pending == "a"
        assert exc_info.value.line == 1


class TestToken:
    """Tests for the Token value object."""

    def test_text_token_requires_value(self):
        """Test identifiers and literals must carry text."""
        with pytest.raises(ValueError, match="require a value"):
            Token(TokenType.IDENTIFIER, 1)

    def test_structural_token_rejects_value(self):
        """Test punctuation tokens carry no text."""
        with pytest.raises(ValueError, match="carry no value"):
            Token(TokenType.BRACKET_LEFT, 1, "<")

    def test_line_must_be_positive(self):
        """Test that line numbers start at 1."""
        with pytest.raises(ValueError, match="Line number must be >= 1"):
            Token(TokenType.EQUALS, 0)

    def test_describe(self):
        """Test readable token descriptions."""
        assert Token(TokenType.BRACKET_RIGHT, 1).describe() == "BracketRight '>'"
        assert Token(TokenType.IDENTIFIER, 1, "b").describe() == "Identifier('b')"
        assert Token(TokenType.END_SLASH, 3).symbol == "/"
        assert TokenType.END_SLASH.label == "EndSlash"
