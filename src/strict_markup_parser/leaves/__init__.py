"""Structural leaf recognition for strict markup parsing.

Key Components:
    LeafBuilder: Groups tokens into element-open, element-close and text leaves
    Body: Element opening leaf with name, line and attributes
    End: Element closing leaf
    Content: Raw text run
    Attribute: Name with an optional literal value
"""

from .builder import LeafBuilder
from .leaf import Attribute, Body, Content, End, Leaf

__all__ = [
    "Attribute",
    "Body",
    "Content",
    "End",
    "Leaf",
    "LeafBuilder",
]
