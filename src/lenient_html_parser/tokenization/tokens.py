"""Token types produced by the HTML tokenizer."""

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Dict, Optional

from lenient_html_parser.character import TextPosition

TokenPosition = TextPosition

_ORIGIN = TextPosition(1, 1, 0)


class TokenType(Enum):
    """The closed set of token kinds the tokenizer emits."""

    TEXT = auto()           # Character content between tags
    OPEN_TAG = auto()       # <name attr=value>
    SELF_CLOSE = auto()     # Directives and open tags reclassified by repair
    CLOSE_TAG = auto()      # </name>


@dataclass(frozen=True)
class Token:
    """A single token with its source position.

    ``value`` holds the text for ``TEXT`` tokens and the tag name for the
    three tag kinds. Only ``OPEN_TAG`` and ``SELF_CLOSE`` carry attributes.
    """

    type: TokenType
    value: str
    attributes: Dict[str, str] = field(default_factory=dict)
    position: TokenPosition = _ORIGIN

    def __post_init__(self) -> None:
        """Validate token values."""
        if not isinstance(self.type, TokenType):
            raise TypeError(f"Unknown token type: {self.type!r}")
        if self.attributes and self.type not in (TokenType.OPEN_TAG, TokenType.SELF_CLOSE):
            raise ValueError(f"{self.type.name} tokens cannot carry attributes")

    @classmethod
    def text(cls, content: str, position: Optional[TokenPosition] = None) -> "Token":
        return cls(TokenType.TEXT, content, position=position or _ORIGIN)

    @classmethod
    def open_tag(
        cls,
        name: str,
        attributes: Optional[Dict[str, str]] = None,
        position: Optional[TokenPosition] = None,
    ) -> "Token":
        return cls(TokenType.OPEN_TAG, name, dict(attributes or {}), position or _ORIGIN)

    @classmethod
    def self_close(
        cls,
        name: str,
        attributes: Optional[Dict[str, str]] = None,
        position: Optional[TokenPosition] = None,
    ) -> "Token":
        return cls(TokenType.SELF_CLOSE, name, dict(attributes or {}), position or _ORIGIN)

    @classmethod
    def close_tag(cls, name: str, position: Optional[TokenPosition] = None) -> "Token":
        return cls(TokenType.CLOSE_TAG, name, position=position or _ORIGIN)

    @property
    def name(self) -> str:
        """Tag name; empty for text tokens."""
        return "" if self.type is TokenType.TEXT else self.value

    def reclassified(self) -> "Token":
        """Return this open tag as a childless self-closing tag."""
        if self.type is not TokenType.OPEN_TAG:
            raise ValueError(f"Only OPEN_TAG tokens can be reclassified, not {self.type.name}")
        return replace(self, type=TokenType.SELF_CLOSE, attributes=dict(self.attributes))

    def same_shape(self, other: "Token") -> bool:
        """Compare kind, value and attributes, ignoring source position."""
        return (
            self.type is other.type
            and self.value == other.value
            and self.attributes == other.attributes
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.name, "value": self.value}
        if self.type in (TokenType.OPEN_TAG, TokenType.SELF_CLOSE):
            data["attributes"] = dict(self.attributes)
        data["position"] = self.position.to_dict()
        return data

    def __str__(self) -> str:
        if self.type is TokenType.TEXT:
            return f"TEXT {self.value!r}"
        if self.type is TokenType.CLOSE_TAG:
            return f"CLOSE_TAG </{self.value}>"
        attrs = "".join(f" {k}={v!r}" for k, v in self.attributes.items())
        return f"{self.type.name} <{self.value}{attrs}>"
