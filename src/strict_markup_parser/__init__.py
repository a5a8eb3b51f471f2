"""Strict Markup Parser.

A fail-fast parser for a simplified HTML-like markup dialect. Characters are
streamed once through a scanner, a leaf builder and a recursive-descent tree
builder; the first malformed construct raises a typed error carrying its
source line.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string()
- Level 2: Configured parser - MarkupParser class
- Level 3: Stage access - iter_tokens(), iter_leaves(), Scanner, LeafBuilder
"""

__version__ = "0.1.0"

# Level 1 and 2 entry points
from .api import MarkupParser, ParseResult, iter_leaves, iter_tokens, parse, parse_string

# Configuration classes for advanced usage
from .shared.config import ParserConfig, TrailingContentPolicy, TreeConfig

# Error taxonomy
from .shared.errors import (
    MarkupError,
    MarkupParseError,
    MismatchedEndTagError,
    NestingTooDeepError,
    UnexpectedLeafError,
    UnexpectedTokenError,
    UnflushedBufferError,
    UnterminatedElementError,
)

# Tree objects
from .leaves import Attribute
from .tree import Element, Text, serialize

__all__ = [
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",

    # Level 2: Configured parser
    "MarkupParser",
    "ParseResult",

    # Level 3: Stage access
    "iter_tokens",
    "iter_leaves",

    # Tree objects
    "Attribute",
    "Element",
    "Text",
    "serialize",

    # Configuration
    "ParserConfig",
    "TrailingContentPolicy",
    "TreeConfig",

    # Errors
    "MarkupError",
    "MarkupParseError",
    "MismatchedEndTagError",
    "NestingTooDeepError",
    "UnexpectedLeafError",
    "UnexpectedTokenError",
    "UnflushedBufferError",
    "UnterminatedElementError",
]
