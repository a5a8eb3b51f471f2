"""Serialize element trees back into markup.

The output uses only constructs the parser reads back unchanged: attributes
are written bare or as ``name="value"``, void elements as ``<name/>`` and
every other element with an explicit closing tag. Text is written verbatim.
"""

from typing import FrozenSet, List, Optional, Union

from strict_markup_parser.leaves import Attribute
from strict_markup_parser.shared.config import DEFAULT_VOID_ELEMENTS

from .builder import Element, Text


def serialize_attribute(attribute: Attribute) -> str:
    """Render a single attribute."""
    if attribute.value is None:
        return attribute.name
    if '"' in attribute.value:
        raise ValueError(
            f"Attribute {attribute.name!r} value cannot contain a double quote"
        )
    return f'{attribute.name}="{attribute.value}"'


def serialize(
    element: Element,
    void_elements: Optional[FrozenSet[str]] = None
) -> str:
    """Serialize ``element`` and its descendants to a markup string.

    Args:
        element: Root of the subtree to write
        void_elements: Names written as ``<name/>``; defaults to the HTML set

    Raises:
        ValueError: If text or attribute values cannot be represented
    """
    void = DEFAULT_VOID_ELEMENTS if void_elements is None else void_elements
    parts: List[str] = []
    _write_element(element, void, parts)
    return "".join(parts)


def _write_element(element: Element, void: FrozenSet[str], parts: List[str]) -> None:
    # Closing tags are pushed as plain strings below their element's children
    stack: List[Union[Element, Text, str]] = [element]
    while stack:
        node = stack.pop()
        if isinstance(node, str):
            parts.append(node)
            continue
        if isinstance(node, Text):
            if "<" in node.value:
                raise ValueError("Text content cannot contain '<'")
            parts.append(node.value)
            continue

        parts.append("<" + node.name)
        for attribute in node.attributes:
            parts.append(" " + serialize_attribute(attribute))

        if node.name in void and not node.children:
            parts.append("/>")
            continue

        parts.append(">")
        stack.append(f"</{node.name}>")
        stack.extend(reversed(node.children))
