"""Configuration classes for parsenip.

This module provides configuration objects for the tokenizer and tree builder,
plus the aggregate ``ParserConfig`` used by the API and CLI layers.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

_VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
_COMPONENTS = ["tokenization", "tree"]


@dataclass
class TokenizationConfig:
    """Configuration for the markup tokenizer."""

    trim_input: bool = True
    drop_whitespace_text: bool = False

    def __post_init__(self) -> None:
        """Validate tokenization configuration."""
        if not isinstance(self.trim_input, bool):
            raise ValueError("trim_input must be a boolean")
        if not isinstance(self.drop_whitespace_text, bool):
            raise ValueError("drop_whitespace_text must be a boolean")


@dataclass
class TreeConfig:
    """Configuration for tree building."""

    max_depth: Optional[int] = None
    strict_trailing_content: bool = False

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if self.max_depth is not None and self.max_depth <= 0:
            raise ValueError("max_depth must be > 0 or None")
        if not isinstance(self.strict_trailing_content, bool):
            raise ValueError("strict_trailing_content must be a boolean")


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
    """Complete configuration for all parser components.

    Immutable once created; use ``override`` to derive a modified copy.
    """

    tokenization: TokenizationConfig = field(default_factory=TokenizationConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    logging_level: str = "WARNING"

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete parser configuration."""
        try:
            self.tokenization.__post_init__()
            self.tree.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if self.logging_level not in _VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {_VALID_LOGGING_LEVELS}",
                field_name="logging_level",
                suggestions=_VALID_LOGGING_LEVELS,
            )

    @property
    def log_level(self) -> int:
        """Numeric ``logging`` level for ``logging_level``."""
        return getattr(logging, self.logging_level)

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override; nested fields use ``component__field``

        Returns:
            New ParserConfig instance with overrides applied

        Example:
            >>> config = ParserConfig()
            >>> strict = config.override(tree__strict_trailing_content=True)
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=_COMPONENTS,
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in _COMPONENTS:
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        try:
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            "tokenization": {
                "trim_input": self.tokenization.trim_input,
                "drop_whitespace_text": self.tokenization.drop_whitespace_text,
            },
            "tree": {
                "max_depth": self.tree.max_depth,
                "strict_trailing_content": self.tree.strict_trailing_content,
            },
            "logging_level": self.logging_level,
            "name": self.name,
            "description": self.description,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files do not
        pass silently.
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration must be a JSON object")

        known = set(_COMPONENTS) | {"logging_level", "name", "description"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )

        try:
            tokenization = TokenizationConfig(**data.get("tokenization", {}))
            tree = TreeConfig(**data.get("tree", {}))
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

        return cls(
            tokenization=tokenization,
            tree=tree,
            logging_level=data.get("logging_level", "WARNING"),
            name=data.get("name"),
            description=data.get("description"),
        )

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ParserConfig":
        """Load configuration from a JSON file."""
        config_path = Path(path)
        try:
            text = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {config_path}: {e}") from e
        return cls.from_json(text)

    # Preset factory methods
    @classmethod
    def default(cls) -> "ParserConfig":
        """Create the default configuration."""
        return cls(name="default")

    @classmethod
    def strict(cls) -> "ParserConfig":
        """Create configuration that rejects content after the root element."""
        return cls(
            tree=TreeConfig(strict_trailing_content=True),
            name="strict",
            description="Reject any markup that is not part of the root element",
        )

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Create configuration suited to indented, hand-written documents."""
        return cls(
            tokenization=TokenizationConfig(drop_whitespace_text=True),
            name="lenient",
            description="Ignore whitespace-only text between tags",
        )
