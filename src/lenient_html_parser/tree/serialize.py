"""Rendering of parsed forests back to markup, an indented outline, or JSON."""

import json
from typing import List, Optional, Sequence, Tuple, Union

from .nodes import ElementNode, Node, TextNode

DIRECTIVE_TAG_NAME = "directive"
DIRECTIVE_TEXT_ATTRIBUTE = "text"
# Empty comment written between adjacent text nodes; the tokenizer drops it,
# so the two runs stay separate when re-parsed.
TEXT_BREAK = "<!---->"


def _quote_attribute(value: str) -> str:
    if '"' in value and "'" not in value:
        return f"'{value}'"
    return '"' + value.replace('"', "&quot;") + '"'


def _start_tag(element: ElementNode) -> str:
    if _is_directive(element):
        return f"<!{element.attributes[DIRECTIVE_TEXT_ATTRIBUTE]}>"
    parts = [element.tag_name]
    for name, value in element.attributes.items():
        parts.append(f"{name}={_quote_attribute(value)}")
    return "<" + " ".join(parts) + ">"


def _is_directive(element: ElementNode) -> bool:
    return (
        element.tag_name == DIRECTIVE_TAG_NAME
        and set(element.attributes) == {DIRECTIVE_TEXT_ATTRIBUTE}
        and not element.children
    )


def _sibling_items(nodes: Sequence[Node]) -> List[Tuple[Optional[Node], bool]]:
    items: List[Tuple[Optional[Node], bool]] = []
    previous: Optional[Node] = None
    for node in nodes:
        if isinstance(node, TextNode) and isinstance(previous, TextNode):
            items.append((None, True))
        items.append((node, True))
        previous = node
    return items


def to_html(forest: Sequence[Node]) -> str:
    """Render a forest as markup that parses back to the same forest.

    Text is written verbatim, since entity references are never decoded.
    Every attribute is written with a quoted value, empty ones included.
    """
    out: List[str] = []
    # (node, True) renders the node; (element, False) emits its end tag;
    # (None, True) separates two adjacent text nodes.
    stack: List[Tuple[Optional[Node], bool]] = list(reversed(_sibling_items(forest)))
    while stack:
        node, opening = stack.pop()
        if node is None:
            out.append(TEXT_BREAK)
        elif isinstance(node, TextNode):
            out.append(node.content)
        elif not opening:
            out.append(f"</{node.tag_name}>")
        else:
            out.append(_start_tag(node))
            if _is_directive(node):
                continue
            stack.append((node, False))
            stack.extend(reversed(_sibling_items(node.children)))
    return "".join(out)


def to_text_tree(forest: Sequence[Node], indent: str = "  ") -> str:
    """Render a forest as an indented outline, one node per line."""
    lines: List[str] = []
    stack: List[Tuple[Node, int]] = [(node, 0) for node in reversed(forest)]
    while stack:
        node, depth = stack.pop()
        prefix = indent * depth
        if isinstance(node, TextNode):
            lines.append(f"{prefix}{json.dumps(node.content)}")
        else:
            lines.append(f"{prefix}{_start_tag(node)}")
            stack.extend((child, depth + 1) for child in reversed(node.children))
    return "\n".join(lines)


def to_json(forest: Sequence[Node], indent: Union[int, None] = 2) -> str:
    """Render a forest as a JSON array of node dictionaries."""
    return json.dumps([node.to_dict() for node in forest], indent=indent)
