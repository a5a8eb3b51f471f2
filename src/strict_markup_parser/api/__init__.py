"""Public API for strict markup parsing.

Progressive disclosure:
- Level 1: ``parse`` and ``parse_string`` return the root element
- Level 2: ``MarkupParser`` with configuration, metrics and stage access
"""

from .adapters import to_dataframe, to_dict, to_json, to_rows
from .parser import (
    MarkupParser,
    ParseResult,
    iter_leaves,
    iter_tokens,
    parse,
    parse_string,
)

__all__ = [
    "MarkupParser",
    "ParseResult",
    "iter_leaves",
    "iter_tokens",
    "parse",
    "parse_string",
    "to_dataframe",
    "to_dict",
    "to_json",
    "to_rows",
]
