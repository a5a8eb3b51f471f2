"""Tests for the public parsing API."""

import io
import logging

import pytest

from strict_markup_parser import (
    MarkupParseError,
    MarkupParser,
    MismatchedEndTagError,
    ParseResult,
    ParserConfig,
    UnexpectedTokenError,
    iter_leaves,
    iter_tokens,
    parse,
    parse_string,
)
from strict_markup_parser.leaves import Body, Content, End
from strict_markup_parser.scanning import TokenType
from strict_markup_parser.tree import Element, Text


class TestParseFunctions:
    """Tests for the level 1 functions."""

    def test_parse_string(self):
        """Test the simplest entry point."""
        root = parse_string('<a href="x" disabled>link</a>')

        assert root == Element(
            "a",
            root.attributes,
            (Text("link"),),
        )
        assert root.get_attribute("href") == "x"
        assert root.has_attribute("disabled")

    def test_parse_string_rejects_bytes(self):
        """Test non-str input is refused."""
        with pytest.raises(TypeError, match="markup must be str, got bytes"):
            parse_string(b"<a></a>")

    def test_parse_text_stream(self):
        """Test parsing from a file-like object."""
        root = parse(io.StringIO("<p>from a stream</p>"))

        assert root.text == "from a stream"

    def test_parse_chunk_iterable(self):
        """Test parsing from a generator of chunks."""
        def chunks():
            yield "<ul><l"
            yield "i>one</li"
            yield "></ul>"

        assert parse(chunks()).find("li").text == "one"

    def test_input_after_root_is_not_read(self):
        """Test the parse stops as soon as the root closes."""
        assert parse_string("<a></a><<<garbage") == Element("a")

    def test_errors_propagate(self):
        """Test grammar and structure errors reach the caller."""
        with pytest.raises(UnexpectedTokenError):
            parse_string("<a b=c></a>")
        with pytest.raises(MismatchedEndTagError):
            parse_string("<div><span></div>")

    def test_strict_preset(self):
        """Test trailing elements fail under the strict preset."""
        with pytest.raises(MarkupParseError):
            parse_string("<a></a><b></b>", ParserConfig.strict())


class TestMarkupParser:
    """Tests for the configured parser."""

    def test_invalid_config_type(self):
        """Test config must be a ParserConfig."""
        with pytest.raises(TypeError, match="ParserConfig"):
            MarkupParser({"tree": {}})

    def test_parse_result(self):
        """Test the result wraps root and metrics."""
        result = MarkupParser().parse("<a>x</a>")

        assert isinstance(result, ParseResult)
        assert result.tree is result.root
        assert result.element_count == 1

    def test_performance_metrics(self):
        """Test counters gathered from every stage."""
        performance = MarkupParser().parse("<a>x</a>").performance

        assert performance.characters_processed == 8
        assert performance.tokens_generated == 8
        assert performance.leaves_generated == 3
        assert performance.elements_created == 1
        assert performance.text_nodes_created == 1
        assert performance.max_depth == 0
        assert performance.processing_time_ms >= 0

    def test_synthetic_end_tags_counted(self):
        """Test self-closing tags are reported."""
        performance = MarkupParser().parse("<p><br/><hr/></p>").performance

        assert performance.synthetic_end_tags == 2
        assert performance.max_depth == 1

    def test_metrics_disabled(self):
        """Test metrics stay empty when disabled."""
        config = ParserConfig().override(global___enable_metrics=False)
        result = MarkupParser(config).parse("<a>x</a>")

        assert result.performance.tokens_generated == 0
        assert result.processing_time_ms == 0.0

    def test_correlation_ids(self):
        """Test explicit, generated and disabled correlation IDs."""
        assert MarkupParser(correlation_id="req-1").parse("<a></a>").correlation_id == "req-1"

        first = MarkupParser().parse("<a></a>").correlation_id
        second = MarkupParser().parse("<a></a>").correlation_id
        assert first and second and first != second

        config = ParserConfig().override(global___enable_correlation_tracking=False)
        assert MarkupParser(config).parse("<a></a>").correlation_id is None

    def test_summary(self):
        """Test summary statistics."""
        summary = MarkupParser(correlation_id="abc").parse("<a><b/></a>").summary()

        assert summary["root"] == "a"
        assert summary["element_count"] == 2
        assert summary["correlation_id"] == "abc"
        assert summary["performance"]["elements_created"] == 2

    def test_failure_is_logged(self, caplog):
        """Test a failed parse logs a warning before re-raising."""
        parser = MarkupParser(correlation_id="failing")

        with caplog.at_level(logging.WARNING, logger="strict_markup_parser"):
            with pytest.raises(MismatchedEndTagError):
                parser.parse("<div><span></div>")

        (record,) = [r for r in caplog.records if r.message == "Parse failed"]
        assert record.component == "parser"
        assert record.correlation_id == "failing"
        assert record.error["kind"] == "MismatchedEndTagError"

    def test_void_preset(self):
        """Test the minimal void preset only treats img as void."""
        parser = MarkupParser(ParserConfig.minimal_void())

        assert parser.parse("<p><img>x</p>").root.children == (Element("img"), Text("x"))
        with pytest.raises(MismatchedEndTagError):
            parser.parse("<p><br></p>")


class TestStageAccess:
    """Tests for iter_tokens and iter_leaves."""

    def test_iter_tokens(self):
        """Test lazy token access."""
        types = [token.type for token in iter_tokens("<a/>")]

        assert types == [
            TokenType.BRACKET_LEFT,
            TokenType.IDENTIFIER,
            TokenType.END_SLASH,
            TokenType.BRACKET_RIGHT,
        ]

    def test_iter_leaves(self):
        """Test lazy leaf access."""
        assert list(iter_leaves("<p>hi</p><br/>")) == [
            Body("p", 1),
            Content("hi", 1),
            End("p", 1),
            Body("br", 1),
            End("br", 1),
        ]

    def test_stage_iterators_share_one_correlation_id(self, caplog):
        """Test stage iterators log under a generated correlation ID."""
        with caplog.at_level(logging.DEBUG, logger="strict_markup_parser"):
            list(MarkupParser().leaves("<br/>"))

        records = [r for r in caplog.records if r.name.startswith("strict_markup_parser")]
        ids = {record.correlation_id for record in records}
        components = {record.component for record in records}
        assert {"scanner", "leaf_builder"} <= components
        assert len(ids) == 1 and None not in ids

    def test_stage_iterator_correlation_id_settings(self):
        """Test explicit and disabled correlation IDs reach the stages."""
        assert MarkupParser(correlation_id="req-2").tokens("<a>").correlation_id == "req-2"
        assert MarkupParser(correlation_id="req-3").leaves("<a>").correlation_id == "req-3"

        config = ParserConfig().override(global___enable_correlation_tracking=False)
        assert MarkupParser(config).tokens("<a>").correlation_id is None

    def test_stage_iterators_are_lazy(self):
        """Test stage iterators only read what is consumed."""
        tokens = iter_tokens("<a>" + "<" * 10)

        assert next(tokens).type is TokenType.BRACKET_LEFT
