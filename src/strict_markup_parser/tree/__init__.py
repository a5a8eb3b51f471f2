"""Tree building engine for strict markup parsing.

Key Components:
    TreeBuilder: Recursive-descent construction of the element tree from leaves
    Element: Immutable element with attributes and ordered children
    Text: Text child exactly as scanned
    serialize: Write a tree back as markup
"""

from .builder import Child, Element, LeafCursor, Text, TreeBuilder
from .serializer import serialize, serialize_attribute

__all__ = [
    "Child",
    "Element",
    "LeafCursor",
    "Text",
    "TreeBuilder",
    "serialize",
    "serialize_attribute",
]
