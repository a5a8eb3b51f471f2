"""Tree building for strict markup parsing.

This module turns a leaf stream into an immutable element tree by recursive
descent: one call of ``TreeBuilder.parse_element`` per element, consuming
its opening leaf, its children and its matching closing leaf.
"""

from dataclasses import dataclass, field
from itertools import zip_longest
from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    Union,
)

from strict_markup_parser.leaves import Attribute, Body, Content, End, Leaf
from strict_markup_parser.shared import (
    MismatchedEndTagError,
    NestingTooDeepError,
    TrailingContentPolicy,
    TreeConfig,
    UnexpectedLeafError,
    UnterminatedElementError,
    get_logger,
)

_EXPECT_BODY = ("Body",)
_EXPECT_CHILD_OR_END = ("Body", "Content", "End")
_EXPECT_END_OF_INPUT = ("end of input",)

# Stack markers for the iterative tree walks
_CLOSE = object()
_MISSING = object()


@dataclass(frozen=True)
class Text:
    """Text child, exactly as scanned."""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, eq=False)
class Element:
    """A single element of the document tree.

    Elements are immutable once built. Equality compares name, attributes
    and children; the source ``line`` is informational only.

    Whole-tree operations (equality, hashing, ``to_dict``, ``full_text``)
    walk the tree with an explicit stack, so they work at any depth the
    builder accepts.
    """

    name: str
    attributes: Tuple[Attribute, ...] = ()
    children: Tuple["Child", ...] = ()
    line: Optional[int] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Validate element values."""
        if not self.name:
            raise ValueError("Element name cannot be empty")
        # Accept lists from hand-built trees but store tuples
        object.__setattr__(self, "attributes", tuple(self.attributes))
        object.__setattr__(self, "children", tuple(self.children))
        for child in self.children:
            if not isinstance(child, (Element, Text)):
                raise TypeError("Children must be Element or Text instances")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        if self is other:
            return True
        return all(
            mine == theirs
            for mine, theirs in zip_longest(
                self._structure(), other._structure(), fillvalue=_MISSING
            )
        )

    def __hash__(self) -> int:
        return hash(tuple(self._structure()))

    def _structure(self) -> Iterator[Tuple[Any, ...]]:
        """Flatten the subtree into open, text and close markers, in order."""
        stack: List[Any] = [self]
        while stack:
            node = stack.pop()
            if node is _CLOSE:
                yield ("close",)
            elif isinstance(node, Text):
                yield ("text", node.value)
            else:
                yield ("open", node.name, node.attributes)
                stack.append(_CLOSE)
                stack.extend(reversed(node.children))

    def __getitem__(self, index: int) -> "Child":
        return self.children[index]

    @property
    def child_count(self) -> int:
        """Number of direct children."""
        return len(self.children)

    @property
    def child_elements(self) -> List["Element"]:
        """Direct children that are elements, in order."""
        return [child for child in self.children if isinstance(child, Element)]

    @property
    def texts(self) -> List[str]:
        """Direct text children, in order."""
        return [child.value for child in self.children if isinstance(child, Text)]

    @property
    def text(self) -> str:
        """Direct text children joined together."""
        return "".join(self.texts)

    @property
    def full_text(self) -> str:
        """All text content including from descendant elements."""
        text_parts = []
        stack: List["Child"] = list(reversed(self.children))
        while stack:
            node = stack.pop()
            if isinstance(node, Text):
                part = node.value.strip()
                if part:
                    text_parts.append(part)
            else:
                stack.extend(reversed(node.children))
        return " ".join(text_parts)

    @property
    def attribute_map(self) -> Dict[str, Optional[str]]:
        """Attributes as a dict; the first occurrence of a name wins."""
        result: Dict[str, Optional[str]] = {}
        for attribute in self.attributes:
            result.setdefault(attribute.name, attribute.value)
        return result

    def get_attribute(
        self, name: str, default: Optional[str] = None
    ) -> Optional[str]:
        """Get attribute value; ``default`` only when the name is absent.

        A bare attribute such as ``disabled`` is present with value None.
        """
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return default

    def has_attribute(self, name: str) -> bool:
        """Check if element has specific attribute."""
        return any(attribute.name == name for attribute in self.attributes)

    def find_child(self, name: str) -> Optional["Element"]:
        """Find first direct child element with matching name."""
        for child in self.child_elements:
            if child.name == name:
                return child
        return None

    def find_children(self, name: str) -> List["Element"]:
        """Find all direct child elements with matching name."""
        return [child for child in self.child_elements if child.name == name]

    def iter(self) -> Iterator["Element"]:
        """Iterate over this element and its descendants in document order."""
        stack = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.child_elements))

    def find(self, name: str) -> Optional["Element"]:
        """Find first descendant element with matching name."""
        return next(
            (element for element in self.iter() if element is not self
             and element.name == name),
            None
        )

    def find_all(self, name: str) -> List["Element"]:
        """Find all descendant elements with matching name."""
        return [
            element for element in self.iter()
            if element is not self and element.name == name
        ]

    def select(self, *indices: int) -> "Element":
        """Walk down by child index, e.g. ``select(0, 2)`` is ``self[0][2]``.

        Raises:
            IndexError: If an index is out of range
            TypeError: If a step lands on a text child
        """
        element = self
        for index in indices:
            child = element.children[index]
            if not isinstance(child, Element):
                raise TypeError(
                    f"Child {index} of <{element.name}> is text, not an element"
                )
            element = child
        return element

    def to_markup(self) -> str:
        """Serialize the element back into markup."""
        from .serializer import serialize

        return serialize(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation.

        Text children become plain strings; element children nest.
        """
        result = self._shallow_dict()
        stack = [(self, result)]
        while stack:
            element, target = stack.pop()
            for child in element.children:
                if isinstance(child, Text):
                    target["children"].append(child.value)
                else:
                    child_dict = child._shallow_dict()
                    target["children"].append(child_dict)
                    stack.append((child, child_dict))
        return result

    def _shallow_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "name": self.name,
            "attributes": [
                {"name": attribute.name, "value": attribute.value}
                for attribute in self.attributes
            ],
            "children": [],
        }
        if self.line is not None:
            result["line"] = self.line
        return result


Child = Union[Element, Text]


class LeafCursor:
    """One-leaf lookahead over a leaf stream."""

    def __init__(self, leaves: Iterable[Leaf]) -> None:
        self._leaves = iter(leaves)
        self._peeked: Optional[Leaf] = None
        self.line: Optional[int] = None

    def peek(self) -> Optional[Leaf]:
        """Return the next leaf without consuming it."""
        if self._peeked is None:
            self._peeked = next(self._leaves, None)
            if self._peeked is not None:
                self.line = self._peeked.line
        return self._peeked

    def next(self) -> Optional[Leaf]:
        """Consume and return the next leaf."""
        leaf = self.peek()
        self._peeked = None
        return leaf


class TreeBuilder:
    """Recursive-descent builder producing one root element from leaves."""

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Tree building configuration (void set, trailing policy)
            correlation_id: Optional correlation ID for parse tracking
        """
        self.config = config or TreeConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")

        self.elements_created = 0
        self.text_nodes_created = 0
        self.max_depth_reached = 0

    def build(self, leaves: Iterable[Leaf]) -> Element:
        """Build the root element from a leaf stream.

        Raises:
            MarkupParseError: On the first structural violation
        """
        cursor = leaves if isinstance(leaves, LeafCursor) else LeafCursor(leaves)

        first = cursor.peek()
        if not isinstance(first, Body):
            raise UnexpectedLeafError(first, _EXPECT_BODY)

        root = self.parse_element(cursor)

        if self.config.trailing_content is TrailingContentPolicy.STRICT:
            self._reject_trailing_leaves(cursor)
        return root

    def parse_element(self, cursor: LeafCursor, depth: int = 0) -> Element:
        """Consume one element: its Body leaf, children and End leaf."""
        body = cursor.next()
        if not isinstance(body, Body):
            raise UnexpectedLeafError(body, _EXPECT_BODY)
        if depth >= self.config.max_depth:
            raise NestingTooDeepError(body.name, body.line, self.config.max_depth)
        self.max_depth_reached = max(self.max_depth_reached, depth)

        if self.config.is_void(body.name):
            self._consume_void_end(cursor, body)
            return self._create_element(body, ())

        children: List[Child] = []
        while True:
            leaf = cursor.peek()
            if leaf is None:
                raise UnterminatedElementError(body.name, body.line, cursor.line)

            if isinstance(leaf, Body):
                children.append(self.parse_element(cursor, depth + 1))
            elif isinstance(leaf, Content):
                cursor.next()
                if not leaf.is_whitespace:
                    children.append(Text(leaf.text))
                    self.text_nodes_created += 1
            elif isinstance(leaf, End):
                if leaf.name != body.name:
                    raise MismatchedEndTagError(
                        body.name, body.line, leaf.name, leaf.line
                    )
                cursor.next()
                return self._create_element(body, children)
            else:
                raise UnexpectedLeafError(leaf, _EXPECT_CHILD_OR_END)

    def _consume_void_end(self, cursor: LeafCursor, body: Body) -> None:
        """Swallow an End leaf that directly closes a void element.

        ``<img/>`` yields a synthetic End and ``<img></img>`` an explicit
        one; both close the void element itself rather than its parent.
        Whitespace-only text in between is dropped as it would be anywhere.
        """
        leaf = cursor.peek()
        while isinstance(leaf, Content) and leaf.is_whitespace:
            cursor.next()
            leaf = cursor.peek()
        if isinstance(leaf, End) and leaf.name == body.name:
            cursor.next()

    def _create_element(self, body: Body, children: Iterable[Child]) -> Element:
        self.elements_created += 1
        return Element(body.name, body.attributes, tuple(children), body.line)

    def _reject_trailing_leaves(self, cursor: LeafCursor) -> None:
        while True:
            leaf = cursor.next()
            if leaf is None:
                return
            if isinstance(leaf, Content) and leaf.is_whitespace:
                continue
            self.logger.debug(
                "Rejecting content after root element",
                extra={"leaf": leaf.describe(), "line": leaf.line}
            )
            raise UnexpectedLeafError(leaf, _EXPECT_END_OF_INPUT)
