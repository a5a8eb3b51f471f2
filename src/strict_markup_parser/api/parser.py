"""Core parser API with progressive disclosure for strict markup parsing.

Level 1: ``parse`` / ``parse_string`` return the root element.
Level 2: ``MarkupParser`` adds configuration, metrics and stage access.

Both levels stream the input once through Scanner -> LeafBuilder ->
TreeBuilder and raise the first MarkupParseError they meet.
"""

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

from strict_markup_parser.leaves import Leaf, LeafBuilder
from strict_markup_parser.scanning import CharacterSource, Scanner, Token
from strict_markup_parser.shared import (
    MarkupParseError,
    ParserConfig,
    PerformanceMetrics,
    get_logger,
)
from strict_markup_parser.tree import Element, LeafCursor, TreeBuilder

MS_PER_SECOND = 1000


@dataclass
class ParseResult:
    """Root element of a successful parse plus the metrics collected on the way."""

    root: Element
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None

    @property
    def tree(self) -> Element:
        """Alias of ``root`` for intuitive navigation.

        Examples:
            >>> result = MarkupParser().parse('<ul><li>one</li></ul>')
            >>> result.tree.find('li').text
            'one'
        """
        return self.root

    @property
    def element_count(self) -> int:
        """Get total number of elements in the tree."""
        return sum(1 for _ in self.root.iter())

    @property
    def processing_time_ms(self) -> float:
        """Get processing time in milliseconds."""
        return self.performance.processing_time_ms

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse."""
        return {
            "root": self.root.name,
            "element_count": self.element_count,
            "correlation_id": self.correlation_id,
            "performance": self.performance.to_dict(),
        }


class MarkupParser:
    """Configured parser; one instance can parse any number of sources.

    Examples:
        >>> parser = MarkupParser(ParserConfig.strict())
        >>> result = parser.parse('<p class="note">hi</p>')
        >>> result.root.get_attribute('class')
        'note'
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize parser.

        Args:
            config: Parser configuration; defaults to ``ParserConfig()``
            correlation_id: Optional correlation ID; generated per parse when
                omitted and correlation tracking is enabled
        """
        if config is not None and not isinstance(config, ParserConfig):
            raise TypeError("config must be a ParserConfig instance")
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id

    def _correlation_id(self) -> Optional[str]:
        if self.correlation_id is not None:
            return self.correlation_id
        if self.config.global_.enable_correlation_tracking:
            return uuid.uuid4().hex
        return None

    def tokens(self, source: CharacterSource) -> Scanner:
        """Lazily scan ``source`` into tokens."""
        return Scanner(source, self.config.scanner, self._correlation_id())

    def leaves(self, source: CharacterSource) -> LeafBuilder:
        """Lazily group the tokens of ``source`` into leaves."""
        correlation_id = self._correlation_id()
        scanner = Scanner(source, self.config.scanner, correlation_id)
        return LeafBuilder(scanner, correlation_id)

    def parse(self, source: CharacterSource) -> ParseResult:
        """Parse ``source`` into a tree.

        Args:
            source: String, text file-like object, or iterable of text chunks

        Returns:
            ParseResult with the root element and performance metrics

        Raises:
            MarkupParseError: If the input is not valid markup
            TypeError: If ``source`` does not yield text
        """
        correlation_id = self._correlation_id()
        logger = get_logger(__name__, correlation_id, "parser")
        start_time = time.perf_counter()

        scanner = Scanner(source, self.config.scanner, correlation_id)
        leaf_builder = LeafBuilder(scanner, correlation_id)
        tree_builder = TreeBuilder(self.config.tree, correlation_id)

        logger.info(
            "Starting parse",
            extra={"source_type": type(source).__name__}
        )

        try:
            root = tree_builder.build(LeafCursor(leaf_builder))
        except MarkupParseError as e:
            logger.warning(
                "Parse failed",
                extra={
                    "error": e.to_dict(),
                    "characters_processed": scanner.characters_consumed,
                }
            )
            raise

        performance = PerformanceMetrics()
        if self.config.global_.enable_metrics:
            performance = PerformanceMetrics(
                processing_time_ms=(time.perf_counter() - start_time) * MS_PER_SECOND,
                characters_processed=scanner.characters_consumed,
                tokens_generated=scanner.tokens_emitted,
                leaves_generated=leaf_builder.leaves_emitted,
                synthetic_end_tags=leaf_builder.synthetic_end_tags,
                elements_created=tree_builder.elements_created,
                text_nodes_created=tree_builder.text_nodes_created,
                max_depth=tree_builder.max_depth_reached,
            )

        logger.info(
            "Parse completed",
            extra={
                "root": root.name,
                "elements_created": tree_builder.elements_created,
                "processing_time_ms": performance.processing_time_ms,
            }
        )
        return ParseResult(root, performance, correlation_id)


def parse(
    source: CharacterSource,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Element:
    """Parse markup from any character source and return the root element.

    Examples:
        >>> root = parse('<a href="x" disabled>link</a>')
        >>> root.get_attribute('href')
        'x'
        >>> root.has_attribute('disabled')
        True
    """
    return MarkupParser(config, correlation_id).parse(source).root


def parse_string(
    markup: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Element:
    """Parse markup held in a string and return the root element."""
    if not isinstance(markup, str):
        raise TypeError(f"markup must be str, got {type(markup).__name__}")
    return parse(markup, config, correlation_id)


def iter_tokens(
    source: CharacterSource,
    config: Optional[ParserConfig] = None
) -> Iterator[Token]:
    """Lazily scan ``source`` into tokens."""
    return MarkupParser(config).tokens(source)


def iter_leaves(
    source: CharacterSource,
    config: Optional[ParserConfig] = None
) -> Iterator[Leaf]:
    """Lazily group the tokens of ``source`` into leaves."""
    return MarkupParser(config).leaves(source)
