"""Public parsing API."""

from .parser import (
    InputType,
    LenientHTMLParser,
    parse,
    parse_file,
    parse_string,
    parse_url,
)

__all__ = [
    "InputType",
    "LenientHTMLParser",
    "parse",
    "parse_file",
    "parse_string",
    "parse_url",
]
