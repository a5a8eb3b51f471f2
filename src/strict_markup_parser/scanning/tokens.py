"""Token types produced by the character scanner."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import FrozenSet, Optional


class TokenType(Enum):
    """Markup token types supported by the scanner."""

    BRACKET_LEFT = auto()   # <
    BRACKET_RIGHT = auto()  # >
    EQUALS = auto()         # =
    END_SLASH = auto()      # /
    IDENTIFIER = auto()     # Bare name inside a tag, or a text run outside one
    LITERAL = auto()        # Quoted attribute value, quotes removed

    @property
    def label(self) -> str:
        """Readable name used in diagnostics, e.g. ``BracketLeft``."""
        return "".join(part.capitalize() for part in self.name.split("_"))


STRUCTURAL_TOKEN_TYPES: FrozenSet[TokenType] = frozenset({
    TokenType.BRACKET_LEFT,
    TokenType.BRACKET_RIGHT,
    TokenType.EQUALS,
    TokenType.END_SLASH,
})

_SYMBOLS = {
    TokenType.BRACKET_LEFT: "<",
    TokenType.BRACKET_RIGHT: ">",
    TokenType.EQUALS: "=",
    TokenType.END_SLASH: "/",
}


@dataclass(frozen=True)
class Token:
    """A single token with the 1-based line of the character that produced it."""

    type: TokenType
    line: int
    value: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate token values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.is_structural and self.value is not None:
            raise ValueError(f"{self.type.label} tokens carry no value")
        if not self.is_structural and self.value is None:
            raise ValueError(f"{self.type.label} tokens require a value")

    @property
    def is_structural(self) -> bool:
        """Check if this token is punctuation rather than text."""
        return self.type in STRUCTURAL_TOKEN_TYPES

    @property
    def symbol(self) -> Optional[str]:
        """Source character of a structural token."""
        return _SYMBOLS.get(self.type)

    def describe(self) -> str:
        """Short readable form used in error messages."""
        if self.is_structural:
            return f"{self.type.label} '{self.symbol}'"
        return f"{self.type.label}({self.value!r})"
