"""Configuration classes for lenient HTML parsing.

This module provides configuration objects for every pipeline stage, plus
the immutable :class:`ParserConfig` that bundles them.
"""

import json
from dataclasses import dataclass, field, fields, is_dataclass, replace
from typing import Any, Dict, List, Optional

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_UNCLOSED_POLICIES = ["flush", "nest"]
DEFAULT_USER_AGENT = "lenient-html-parser/0.1"

_COMPONENTS = ["scan", "repair", "tree", "fetch", "global_"]


@dataclass
class ScanConfig:
    """Configuration for the tokenizer and its cursor."""

    # Abort with MalformedMarkup on unterminated tags, comments and quoted
    # values; otherwise drop the unterminated remainder of the input.
    strict_termination: bool = True
    suppress_whitespace_text: bool = True

    def __post_init__(self) -> None:
        """Validate scan configuration."""
        if not isinstance(self.strict_termination, bool):
            raise ValueError("strict_termination must be a bool")
        if not isinstance(self.suppress_whitespace_text, bool):
            raise ValueError("suppress_whitespace_text must be a bool")


@dataclass
class RepairConfig:
    """Configuration for the tag balance repair pass."""

    enable_balance_repair: bool = True

    def __post_init__(self) -> None:
        """Validate repair configuration."""
        if not isinstance(self.enable_balance_repair, bool):
            raise ValueError("enable_balance_repair must be a bool")


@dataclass
class TreeConfig:
    """Configuration for tree construction."""

    # What to do with elements still open when the tokens run out.
    unclosed_policy: str = "flush"

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if self.unclosed_policy not in VALID_UNCLOSED_POLICIES:
            raise ValueError(
                f"unclosed_policy must be one of {VALID_UNCLOSED_POLICIES}"
            )


@dataclass
class FetchConfig:
    """Configuration for the network fetch collaborator."""

    timeout_seconds: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    max_body_bytes: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate fetch configuration."""
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        if not self.user_agent:
            raise ValueError("user_agent cannot be empty")
        if self.max_body_bytes is not None and self.max_body_bytes <= 0:
            raise ValueError("max_body_bytes must be > 0 or None")


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all components."""

    logging_level: str = "WARNING"
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {VALID_LOGGING_LEVELS}")


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
    """Immutable configuration for every parser stage.

    Component configurations are validated on construction; any
    ``ValueError`` they raise is re-raised as :class:`ConfigValidationError`.
    """

    scan: ScanConfig = field(default_factory=ScanConfig)
    repair: RepairConfig = field(default_factory=RepairConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete parser configuration."""
        for component in _COMPONENTS:
            value = getattr(self, component)
            try:
                value.__post_init__()
            except ValueError as e:
                raise ConfigValidationError(str(e), field_name=component) from e

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig()
            >>> lenient = config.override(scan__strict_termination=False)
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = {}
        for component, overrides in nested_overrides.items():
            try:
                new_fields[component] = replace(getattr(self, component), **overrides)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=component) from e
        new_fields.update(top_level)
        try:
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(
                str(e),
                suggestions=list(_COMPONENTS) + ["name", "description"],
            ) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if is_dataclass(obj):
                return {f.name: _dataclass_to_dict(getattr(obj, f.name)) for f in fields(obj)}
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

        Raises:
            ConfigValidationError: A key or section value is unknown or invalid.
        """
        component_types = {
            "scan": ScanConfig,
            "repair": RepairConfig,
            "tree": TreeConfig,
            "fetch": FetchConfig,
            "global_": GlobalConfig,
        }
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in component_types:
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"Configuration section '{key}' must be an object",
                        field_name=key,
                    )
                try:
                    values[key] = component_types[key](**value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            elif key in ("name", "description"):
                values[key] = value
            else:
                raise ConfigValidationError(
                    f"Unknown configuration key: {key}",
                    field_name=key,
                    suggestions=list(component_types),
                )
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def strict(cls) -> "ParserConfig":
        """Abort on unterminated markup; this is also the default."""
        return cls(name="strict", description="Fail the parse on truncated markup")

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Drop unterminated trailing markup and nest unclosed elements."""
        return cls(
            scan=ScanConfig(strict_termination=False),
            tree=TreeConfig(unclosed_policy="nest"),
            name="lenient",
            description="Best-effort parse of truncated or sloppy markup",
        )

    @classmethod
    def raw(cls) -> "ParserConfig":
        """Skip balance repair and build the tree from the raw token stream."""
        return cls(
            repair=RepairConfig(enable_balance_repair=False),
            name="raw",
            description="Tree construction without tag balance repair",
        )
