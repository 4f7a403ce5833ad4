"""Tree layer for the lenient HTML parser.

Node types, the stack-based tree builder and forest serialization.
"""

from .builder import HTMLTreeBuilder, ParseResult, build_tree
from .nodes import (
    ElementData,
    ElementNode,
    Forest,
    Node,
    TextNode,
    find_all,
    iter_nodes,
)
from .serialize import to_html, to_json, to_text_tree

__all__ = [
    "HTMLTreeBuilder",
    "ParseResult",
    "build_tree",
    "ElementData",
    "ElementNode",
    "Forest",
    "Node",
    "TextNode",
    "find_all",
    "iter_nodes",
    "to_html",
    "to_json",
    "to_text_tree",
]
