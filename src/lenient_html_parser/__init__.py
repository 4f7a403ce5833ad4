"""Lenient HTML Parser.

Turns raw, possibly malformed HTML text into a forest of text and element
nodes: a character-level tokenizer, a stack-based tag balance repair pass and
an explicit-stack tree builder.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file(), parse_url()
- Level 2: Configured parser - LenientHTMLParser class with ParserConfig
- Level 3: Individual stages - HTMLTokenizer, BalanceRepairEngine, HTMLTreeBuilder
"""

__version__ = "0.1.0"
__author__ = "Lenient HTML Parser Team"

from .api import LenientHTMLParser, parse, parse_file, parse_string, parse_url
from .shared.config import ParserConfig
from .shared.errors import FetchError, HTMLParserError, MalformedMarkup, UnterminatedScan
from .tree import ElementNode, Node, ParseResult, TextNode, to_html

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_file",
    "parse_url",

    # Level 2: Configured parser
    "LenientHTMLParser",
    "ParserConfig",

    # Result objects and data structures
    "ParseResult",
    "Node",
    "ElementNode",
    "TextNode",
    "to_html",

    # Errors
    "HTMLParserError",
    "MalformedMarkup",
    "UnterminatedScan",
    "FetchError",
]
