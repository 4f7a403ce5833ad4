"""Character layer for the lenient HTML parser.

Provides the position-tracking :class:`Cursor` the tokenizer scans with.
"""

from .cursor import CharPredicate, Cursor, TextPosition

__all__ = [
    "CharPredicate",
    "Cursor",
    "TextPosition",
]
