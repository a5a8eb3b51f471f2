"""Configuration classes for strict markup parsing.

This module provides configuration objects for every pipeline stage. Component
configurations validate themselves in ``__post_init__``; ``ParserConfig``
aggregates them into one immutable object.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Dict, FrozenSet, List, Optional

# Elements that never own children, checked by name membership
DEFAULT_VOID_ELEMENTS: FrozenSet[str] = frozenset({
    "area",
    "base",
    "br",
    "col",
    "embed",
    "hr",
    "img",
    "input",
    "link",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
})

# Smallest useful void set: images only
MINIMAL_VOID_ELEMENTS: FrozenSet[str] = frozenset({"img"})

DEFAULT_READ_CHUNK_SIZE = 8192
DEFAULT_MAX_DEPTH = 256
# Parsing recurses once per level and JSON output nests two containers per
# level; both must stay under Python's default recursion limit of 1000
MAX_SUPPORTED_DEPTH = 300


class TrailingContentPolicy(Enum):
    """What to do with leaves that follow the root element's closing tag."""

    IGNORE = auto()     # Never read past the root element
    STRICT = auto()     # Only whitespace-only text may follow the root


@dataclass
class ScannerConfig:
    """Configuration for the character scanner."""

    read_chunk_size: int = DEFAULT_READ_CHUNK_SIZE

    def __post_init__(self) -> None:
        """Validate scanner configuration."""
        if self.read_chunk_size <= 0:
            raise ValueError("read_chunk_size must be > 0")


@dataclass
class TreeConfig:
    """Configuration for tree building."""

    void_elements: FrozenSet[str] = DEFAULT_VOID_ELEMENTS
    trailing_content: TrailingContentPolicy = TrailingContentPolicy.IGNORE
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if isinstance(self.void_elements, str):
            raise ValueError("void_elements must be a collection of names")
        self.void_elements = frozenset(self.void_elements)
        if any(not name for name in self.void_elements):
            raise ValueError("void_elements cannot contain empty names")
        if isinstance(self.trailing_content, str):
            self.trailing_content = TrailingContentPolicy[self.trailing_content]
        if not (0 < self.max_depth <= MAX_SUPPORTED_DEPTH):
            raise ValueError(
                f"max_depth must be between 1 and {MAX_SUPPORTED_DEPTH}"
            )

    def is_void(self, name: str) -> bool:
        """Check whether ``name`` is a void element."""
        return name in self.void_elements


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all stages."""

    enable_metrics: bool = True
    enable_correlation_tracking: bool = True


_COMPONENT_TYPES = {
    "scanner": ScannerConfig,
    "tree": TreeConfig,
    "global_": GlobalConfig,
}
_COMPONENTS = tuple(_COMPONENT_TYPES)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Complete configuration for all parser stages.

    Immutable so one instance can be shared between parsers. Use
    ``override`` to derive a modified copy.
    """

    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    # Metadata
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete parser configuration."""
        for component in _COMPONENTS:
            value = getattr(self, component)
            expected = _COMPONENT_TYPES[component]
            if not isinstance(value, expected):
                raise ConfigValidationError(
                    f"{component} must be a {expected.__name__}",
                    field_name=component,
                )
        try:
            self.scanner.__post_init__()
            self.tree.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Configuration fields to override; nested fields use
                ``component__field`` notation

        Returns:
            New ParserConfig instance with overrides applied

        Example:
            >>> config = ParserConfig()
            >>> new_config = config.override(
            ...     tree__max_depth=64,
            ...     scanner__read_chunk_size=1024,
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if key.startswith("global___"):
                component, field_name = "global_", key[len("global___"):]
                nested_overrides.setdefault(component, {})[field_name] = value
            elif "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for component in _COMPONENTS:
            current = getattr(self, component)
            if isinstance(nested_overrides.get(component), dict):
                try:
                    new_fields[component] = replace(
                        current, **nested_overrides.pop(component)
                    )
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=component) from e

        new_fields.update(nested_overrides)
        try:
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            if isinstance(obj, (set, frozenset)):
                return sorted(_dataclass_to_dict(item) for item in obj)
            if isinstance(obj, (list, tuple)):
                return [_dataclass_to_dict(item) for item in obj]
            if isinstance(obj, dict):
                return {key: _dataclass_to_dict(value) for key, value in obj.items()}
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Component dictionaries are rebuilt into their dataclasses; the
        component ``__post_init__`` hooks convert enum names and void
        element lists back to their runtime types.
        """
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in _COMPONENT_TYPES and isinstance(value, dict):
                component_class = _COMPONENT_TYPES[key]
                try:
                    values[key] = component_class(**value)
                except (TypeError, KeyError, ValueError) as e:
                    raise ConfigValidationError(
                        f"Invalid {key} configuration: {e}", field_name=key
                    ) from e
            elif key in ("name", "description"):
                values[key] = value
            else:
                raise ConfigValidationError(
                    f"Unknown configuration field: {key}", field_name=key
                )
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def html(cls) -> "ParserConfig":
        """Default preset: HTML void elements, trailing content ignored."""
        return cls(
            name="html",
            description="HTML void elements; leaves after the root are not read",
        )

    @classmethod
    def strict(cls) -> "ParserConfig":
        """Preset that rejects anything but whitespace after the root element."""
        return cls(
            tree=TreeConfig(trailing_content=TrailingContentPolicy.STRICT),
            name="strict",
            description="Only whitespace may follow the root element",
        )

    @classmethod
    def minimal_void(cls) -> "ParserConfig":
        """Preset where only ``img`` is childless."""
        return cls(
            tree=TreeConfig(void_elements=MINIMAL_VOID_ELEMENTS),
            name="minimal_void",
            description="Only img is treated as a void element",
        )
