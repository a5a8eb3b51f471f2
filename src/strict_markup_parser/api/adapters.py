"""Output adapters converting element trees into other representations.

``to_dataframe`` needs pandas, installed with the ``pandas`` extra; it is
imported on first use so the core parser has no pandas dependency.
"""

import json
from typing import Any, Dict, Iterator, List, Tuple

from strict_markup_parser.tree import Element


def to_dict(element: Element) -> Dict[str, Any]:
    """Convert a tree into nested dictionaries."""
    return element.to_dict()


def to_json(element: Element, indent: int = 2) -> str:
    """Convert a tree into a JSON document."""
    return json.dumps(to_dict(element), indent=indent, ensure_ascii=False)


def _walk(
    element: Element, path: str, depth: int
) -> Iterator[Tuple[Element, str, int]]:
    stack = [(element, path, depth)]
    while stack:
        node, node_path, node_depth = stack.pop()
        yield node, node_path, node_depth

        positions: Dict[str, int] = {}
        children = []
        for child in node.child_elements:
            positions[child.name] = positions.get(child.name, 0) + 1
            child_path = f"{node_path}/{child.name}[{positions[child.name]}]"
            children.append((child, child_path, node_depth + 1))
        stack.extend(reversed(children))


def to_rows(element: Element) -> List[Dict[str, Any]]:
    """Flatten a tree into one record per element, in document order.

    Each record holds the element's path (``/html[1]/body[1]/p[2]``), depth,
    name, source line, attribute dict, direct text and child count.
    """
    return [
        {
            "path": path,
            "depth": depth,
            "name": node.name,
            "line": node.line,
            "attributes": node.attribute_map,
            "text": node.text,
            "child_count": node.child_count,
        }
        for node, path, depth in _walk(element, f"/{element.name}[1]", 0)
    ]


def to_dataframe(element: Element) -> Any:
    """Convert a tree into a pandas DataFrame with one row per element.

    Raises:
        ImportError: If pandas is not installed
    """
    import pandas as pd

    columns = ["path", "depth", "name", "line", "attributes", "text", "child_count"]
    return pd.DataFrame(to_rows(element), columns=columns)
