"""Leaf builder: groups scanner tokens into structural leaves.

Grammar, one leaf per call::

    leaf       := text | open | close
    text       := Identifier                    (scanned in content mode)
    open       := '<' Identifier attribute* '/'? '>'
    attribute  := Identifier ('=' Literal)?
    close      := '<' '/' Identifier token* '>'

A trailing ``/`` before ``>`` marks a self-closing tag. The builder returns
the ``Body`` leaf and caches a synthetic ``End`` leaf with the same name and
line, handed out on the following call, so later stages see an ordinary
open/close pair.
"""

from typing import Iterable, Iterator, List, Optional, Tuple

from strict_markup_parser.scanning import Token, TokenType
from strict_markup_parser.shared import UnexpectedTokenError, get_logger

from .leaf import Attribute, Body, Content, End, Leaf

_LEAF_START = (TokenType.BRACKET_LEFT.label, TokenType.IDENTIFIER.label)
_TAG_START = (TokenType.IDENTIFIER.label, TokenType.END_SLASH.label)
_TAG_BODY = (
    TokenType.IDENTIFIER.label,
    TokenType.END_SLASH.label,
    TokenType.BRACKET_RIGHT.label,
)
_NAME = (TokenType.IDENTIFIER.label,)
_LITERAL = (TokenType.LITERAL.label,)
_TAG_END = (TokenType.BRACKET_RIGHT.label,)


class LeafBuilder:
    """Pull-based leaf producer over a token stream.

    Holds at most one cached leaf, the synthetic end of a self-closing tag.
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize leaf builder.

        Args:
            tokens: Token stream, typically a Scanner
            correlation_id: Optional correlation ID for parse tracking
        """
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "leaf_builder")

        self._tokens: Iterator[Token] = iter(tokens)
        self._cached: Optional[Leaf] = None
        self._last_line = 1

        self.leaves_emitted = 0
        self.synthetic_end_tags = 0

    def __iter__(self) -> "LeafBuilder":
        return self

    def __next__(self) -> Leaf:
        leaf = self.next_leaf()
        if leaf is None:
            raise StopIteration
        return leaf

    @property
    def line(self) -> int:
        """Line of the most recently read token."""
        return self._last_line

    def next_leaf(self) -> Optional[Leaf]:
        """Build and return the next leaf, or None when tokens run out."""
        if self._cached is not None:
            leaf, self._cached = self._cached, None
            return self._count(leaf)

        token = self._next_token()
        if token is None:
            return None

        if token.type is TokenType.IDENTIFIER:
            return self._count(Content(token.value, token.line))
        if token.type is not TokenType.BRACKET_LEFT:
            raise UnexpectedTokenError(token, _LEAF_START)

        return self._count(self._read_tag())

    def _read_tag(self) -> Leaf:
        """Read everything after ``<`` up to and including ``>``."""
        first = self._require(_TAG_START)
        if first.type is TokenType.END_SLASH:
            return self._read_end_tag()
        if first.type is not TokenType.IDENTIFIER:
            raise UnexpectedTokenError(first, _TAG_START)

        body_tokens, self_closing = self._collect_body_tokens()
        body = Body(first.value, first.line, self._parse_attributes(body_tokens))

        if self_closing:
            self._cached = End(body.name, body.line)
            self.synthetic_end_tags += 1
            self.logger.debug(
                "Synthesized end tag for self-closing element",
                extra={"element": body.name, "line": body.line}
            )
        return body

    def _read_end_tag(self) -> End:
        name = self._require(_NAME)
        if name.type is not TokenType.IDENTIFIER:
            raise UnexpectedTokenError(name, _NAME)

        # Anything between the name and '>' is discarded
        while self._require(_TAG_END).type is not TokenType.BRACKET_RIGHT:
            pass
        return End(name.value, name.line)

    def _collect_body_tokens(self) -> Tuple[List[Token], bool]:
        """Collect tokens through the one that ends the tag body.

        The last collected token is the ``>``, or the ``/`` of a
        self-closing tag whose ``>`` has already been checked.
        """
        collected: List[Token] = []
        while True:
            token = self._require(_TAG_BODY)
            collected.append(token)
            if token.type is TokenType.BRACKET_RIGHT:
                return collected, False
            if token.type is TokenType.END_SLASH:
                closing = self._require(_TAG_END)
                if closing.type is not TokenType.BRACKET_RIGHT:
                    raise UnexpectedTokenError(closing, _TAG_END)
                return collected, True

    def _parse_attributes(self, tokens: List[Token]) -> Tuple[Attribute, ...]:
        attributes: List[Attribute] = []
        last = len(tokens) - 1
        index = 0
        while index < last:
            name = tokens[index]
            if name.type is not TokenType.IDENTIFIER:
                raise UnexpectedTokenError(name, _TAG_BODY)
            index += 1

            value: Optional[str] = None
            if tokens[index].type is TokenType.EQUALS:
                literal = tokens[index + 1]
                if literal.type is not TokenType.LITERAL:
                    raise UnexpectedTokenError(literal, _LITERAL)
                value = literal.value
                index += 2

            attributes.append(Attribute(name.value, value))
        return tuple(attributes)

    def _next_token(self) -> Optional[Token]:
        token = next(self._tokens, None)
        if token is not None:
            self._last_line = token.line
        return token

    def _require(self, expected: Tuple[str, ...]) -> Token:
        """Read a token inside a tag; running out of input is an error."""
        token = self._next_token()
        if token is None:
            raise UnexpectedTokenError(None, expected, self._last_line)
        return token

    def _count(self, leaf: Leaf) -> Leaf:
        self.leaves_emitted += 1
        return leaf
