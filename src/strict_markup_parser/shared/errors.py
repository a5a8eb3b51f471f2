"""Error taxonomy for strict markup parsing.

Parsing never recovers: the first violation raises one of the exceptions
below and the caller must treat the input as invalid markup. Every exception
keeps its diagnostic fields as attributes so callers can report them without
parsing the message.
"""

from typing import Any, Dict, Iterable, Optional, Tuple


def _describe(found: Any) -> str:
    """Render a token or leaf for diagnostics; ``None`` means end of input."""
    if found is None:
        return "end of input"
    describe = getattr(found, "describe", None)
    if callable(describe):
        return str(describe())
    return repr(found)


class MarkupError(Exception):
    """Base exception for all errors raised by this package."""


class MarkupParseError(MarkupError):
    """Base exception for input that is not valid markup.

    Attributes:
        line: 1-based line of the token or leaf that triggered the error,
            or None when no line is available.
    """

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        self.message = message
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)

    @property
    def kind(self) -> str:
        """Short error kind used in structured output."""
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary of its diagnostic fields."""
        return {
            "kind": self.kind,
            "message": self.message,
            "line": self.line,
        }


class UnflushedBufferError(MarkupParseError):
    """Scanner tried to emit a structural token while characters were pending."""

    def __init__(self, pending: str, line: int) -> None:
        self.pending = pending
        super().__init__(f"unflushed scanner buffer {pending!r}", line)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["pending"] = self.pending
        return result


class UnexpectedTokenError(MarkupParseError):
    """Token sequence outside the tag grammar."""

    def __init__(
        self,
        found: Any,
        expected: Iterable[str],
        line: Optional[int] = None
    ) -> None:
        self.found = found
        self.expected: Tuple[str, ...] = tuple(expected)
        if line is None and found is not None:
            line = getattr(found, "line", None)
        super().__init__(
            f"unexpected {_describe(found)}, expected {' or '.join(self.expected)}",
            line,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["found"] = _describe(self.found)
        result["expected"] = list(self.expected)
        return result


class UnexpectedLeafError(MarkupParseError):
    """Leaf out of place for the tree being built."""

    def __init__(
        self,
        found: Any,
        expected: Iterable[str],
        line: Optional[int] = None
    ) -> None:
        self.found = found
        self.expected: Tuple[str, ...] = tuple(expected)
        if line is None and found is not None:
            line = getattr(found, "line", None)
        super().__init__(
            f"unexpected {_describe(found)}, expected {' or '.join(self.expected)}",
            line,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["found"] = _describe(self.found)
        result["expected"] = list(self.expected)
        return result


class MismatchedEndTagError(MarkupParseError):
    """Closing tag name differs from the currently open element."""

    def __init__(
        self,
        expected_name: str,
        expected_line: int,
        found_name: str,
        found_line: int
    ) -> None:
        self.expected_name = expected_name
        self.expected_line = expected_line
        self.found_name = found_name
        self.found_line = found_line
        super().__init__(
            f"expected </{expected_name}> closing the element opened on line "
            f"{expected_line}, got </{found_name}>",
            found_line,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update({
            "expected_name": self.expected_name,
            "expected_line": self.expected_line,
            "found_name": self.found_name,
            "found_line": self.found_line,
        })
        return result


class UnterminatedElementError(MarkupParseError):
    """Input ended while an element still awaited its closing tag.

    ``line`` is the line of the last leaf read before the input ran out;
    ``open_line`` is where the unclosed element started.
    """

    def __init__(self, name: str, open_line: int, line: Optional[int] = None) -> None:
        self.name = name
        self.open_line = open_line
        super().__init__(
            f"input ended before </{name}> closing the element opened on line "
            f"{open_line}",
            line if line is not None else open_line,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["name"] = self.name
        result["open_line"] = self.open_line
        return result


class NestingTooDeepError(MarkupParseError):
    """Element nesting exceeded the configured maximum depth."""

    def __init__(self, name: str, line: int, max_depth: int) -> None:
        self.name = name
        self.max_depth = max_depth
        super().__init__(
            f"<{name}> exceeds the maximum nesting depth of {max_depth}", line
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["name"] = self.name
        result["max_depth"] = self.max_depth
        return result
