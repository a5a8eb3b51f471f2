"""Leaf types: the structural units between tokens and elements."""

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Attribute:
    """Attribute of an element opening; ``value`` is None for bare names."""

    name: str
    value: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate attribute values."""
        if not self.name:
            raise ValueError("Attribute name cannot be empty")

    @property
    def has_value(self) -> bool:
        """Check if the attribute was given ``="..."``."""
        return self.value is not None


@dataclass(frozen=True)
class Body:
    """Element opening: ``<name attr="value" ...>``."""

    name: str
    line: int
    attributes: Tuple[Attribute, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Element name cannot be empty")

    def describe(self) -> str:
        return f"Body <{self.name}>"


@dataclass(frozen=True)
class End:
    """Element closing: ``</name>``, or synthesized from ``<name/>``."""

    name: str
    line: int

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Element name cannot be empty")

    def describe(self) -> str:
        return f"End </{self.name}>"


@dataclass(frozen=True)
class Content:
    """Run of text between tags, exactly as scanned."""

    text: str
    line: int

    @property
    def is_whitespace(self) -> bool:
        """Check if the run holds nothing but whitespace."""
        return not self.text.strip()

    def describe(self) -> str:
        preview = self.text if len(self.text) <= 20 else self.text[:17] + "..."
        return f"Content({preview!r})"


Leaf = Union[Body, End, Content]
