"""Character scanner for strict markup parsing.

The scanner turns a forward-only character source into a lazy sequence of
tokens. It reads each character exactly once and keeps only two mode flags,
the current line and the run of characters collected for the next token.

Modes:
    tag mode      Between ``<`` and ``>``. Punctuation becomes structural
                  tokens, whitespace separates identifiers, ``"`` opens a
                  literal.
    content mode  Between ``>`` and the next ``<``. Everything accumulates
                  into one text run, emitted as an ``IDENTIFIER``.
    literal       Inside a quoted value. Everything up to the closing quote
                  is collected verbatim.
"""

from enum import Enum, auto
from typing import Iterable, Iterator, List, Optional, TextIO, Tuple, Union

from strict_markup_parser.shared import (
    ScannerConfig,
    UnflushedBufferError,
    get_logger,
)

from .tokens import Token, TokenType

CharacterSource = Union[str, TextIO, Iterable[str]]

_QUOTE = '"'
_NEWLINE = "\n"

_TAG_PUNCTUATION = {
    "<": TokenType.BRACKET_LEFT,
    ">": TokenType.BRACKET_RIGHT,
    "=": TokenType.EQUALS,
    "/": TokenType.END_SLASH,
}


class _Action(Enum):
    """What the scanner does with the character under the cursor."""

    EMIT = auto()          # Consume it and return a structural token
    STOP = auto()          # Leave it unread and flush the pending run
    STOP_CONSUME = auto()  # Consume it and flush the pending run
    SKIP = auto()          # Consume it and keep scanning
    COLLECT = auto()       # Append it to the pending run


def _character_stream(source: CharacterSource, chunk_size: int) -> Iterator[str]:
    """Validate ``source`` and return an iterator over its characters."""
    if isinstance(source, str):
        return iter(source)
    if isinstance(source, (bytes, bytearray)):
        raise TypeError("Scanner expects decoded text, not bytes")

    read = getattr(source, "read", None)
    if callable(read):
        return _read_chunks(read, chunk_size)

    try:
        chunks = iter(source)
    except TypeError:
        raise TypeError(
            f"Unsupported character source: {type(source).__name__}"
        ) from None
    return _iter_chunks(chunks)


def _read_chunks(read, chunk_size: int) -> Iterator[str]:
    while True:
        chunk = read(chunk_size)
        if not chunk:
            return
        if not isinstance(chunk, str):
            raise TypeError("Scanner expects decoded text, not bytes")
        yield from chunk


def _iter_chunks(chunks: Iterator[str]) -> Iterator[str]:
    for chunk in chunks:
        if not isinstance(chunk, str):
            raise TypeError(
                f"Character chunks must be str, got {type(chunk).__name__}"
            )
        yield from chunk


class Scanner:
    """Pull-based scanner producing tokens from characters on demand.

    Iterate over the scanner, or call ``next_token`` until it returns None.
    The sequence is single-pass: once a token has been produced the
    characters behind it are gone.
    """

    def __init__(
        self,
        source: CharacterSource,
        config: Optional[ScannerConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize scanner.

        Args:
            source: String, text file-like object, or iterable of text chunks
            config: Scanner configuration
            correlation_id: Optional correlation ID for parse tracking
        """
        self.config = config or ScannerConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "scanner")

        self._chars = _character_stream(source, self.config.read_chunk_size)
        self._lookahead: Optional[str] = None
        self._exhausted = False

        self.line = 1
        self.in_literal = False
        self.in_content = False

        self._pending: List[str] = []
        self._pending_type: Optional[TokenType] = None
        self._pending_line = 1

        self.tokens_emitted = 0
        self.characters_consumed = 0

    def __iter__(self) -> "Scanner":
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    @property
    def at_end(self) -> bool:
        """Check whether the character source is exhausted."""
        return self._peek() is None

    def next_token(self) -> Optional[Token]:
        """Scan and return the next token, or None at end of input."""
        while True:
            char = self._peek()
            if char is None:
                return self._flush()

            action, token_type = self._classify(char)

            if action is _Action.EMIT:
                if self._pending_type is not None:
                    raise UnflushedBufferError("".join(self._pending), self.line)
                token = Token(token_type, self.line)
                self._advance()
                return self._count(token)
            if action is _Action.STOP:
                return self._flush()
            if action is _Action.STOP_CONSUME:
                self._advance()
                return self._flush()
            if action is _Action.SKIP:
                self._advance()
                continue

            self._collect(char, TokenType.IDENTIFIER)
            self._advance()

    def _classify(self, char: str) -> Tuple[_Action, Optional[TokenType]]:
        """Decide what to do with ``char``, updating the mode flags."""
        pending = self._pending_type is not None

        if self.in_literal:
            if char == _QUOTE:
                self.in_literal = False
                return _Action.STOP_CONSUME, None
            return _Action.COLLECT, None

        if self.in_content and char != "<":
            return _Action.COLLECT, None

        token_type = _TAG_PUNCTUATION.get(char)
        if token_type is not None:
            if pending:
                return _Action.STOP, None
            if token_type is TokenType.BRACKET_LEFT:
                self.in_content = False
            elif token_type is TokenType.BRACKET_RIGHT:
                self.in_content = True
            return _Action.EMIT, token_type

        if char == _QUOTE:
            if pending:
                return _Action.STOP, None
            self.in_literal = True
            self._start_run(TokenType.LITERAL)
            return _Action.SKIP, None

        if char.isspace():
            return (_Action.STOP_CONSUME if pending else _Action.SKIP), None

        return _Action.COLLECT, None

    def _peek(self) -> Optional[str]:
        if self._lookahead is None and not self._exhausted:
            self._lookahead = next(self._chars, None)
            if self._lookahead is None:
                self._exhausted = True
                self.logger.debug(
                    "Reached end of input",
                    extra={
                        "line": self.line,
                        "characters_consumed": self.characters_consumed,
                    }
                )
        return self._lookahead

    def _advance(self) -> None:
        if self._lookahead == _NEWLINE:
            self.line += 1
        self._lookahead = None
        self.characters_consumed += 1

    def _start_run(self, token_type: TokenType) -> None:
        self._pending_type = token_type
        self._pending_line = self.line

    def _collect(self, char: str, token_type: TokenType) -> None:
        if self._pending_type is None:
            self._start_run(token_type)
        self._pending.append(char)

    def _flush(self) -> Optional[Token]:
        """Turn the pending run into a token; None if nothing is pending."""
        if self._pending_type is None:
            return None
        token = Token(self._pending_type, self._pending_line, "".join(self._pending))
        self._pending.clear()
        self._pending_type = None
        return self._count(token)

    def _count(self, token: Token) -> Token:
        self.tokens_emitted += 1
        return token
