"""Node types making up a parsed HTML forest.

A node is either a :class:`TextNode` or an :class:`ElementNode`. Both are
frozen; an element's children are a tuple fixed when the tree builder closes
the element.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class TextNode:
    """Character content."""

    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "text", "content": self.content}


@dataclass(frozen=True)
class ElementNode:
    """An element with its attributes and children, in document order.

    Elements compare by value but are not hashable: ``attributes`` is a dict,
    so ``hash(element)`` raises :class:`TypeError`.
    """

    tag_name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: Tuple["Node", ...] = ()

    def __post_init__(self) -> None:
        """Validate element values."""
        if not self.tag_name:
            raise ValueError("Element tag name cannot be empty")
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(name, default)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    @property
    def element_children(self) -> List["ElementNode"]:
        return [child for child in self.children if isinstance(child, ElementNode)]

    def iter(self) -> Iterator["Node"]:
        """Yield this element and every descendant in document order."""
        return iter_nodes([self])

    def find(self, tag_name: str) -> Optional["ElementNode"]:
        """First descendant element (excluding self) named ``tag_name``."""
        for node in iter_nodes(self.children):
            if isinstance(node, ElementNode) and node.tag_name == tag_name:
                return node
        return None

    def find_all(self, tag_name: str) -> List["ElementNode"]:
        """Every descendant element (excluding self) named ``tag_name``."""
        return find_all(self.children, tag_name)

    @property
    def text_content(self) -> str:
        """Concatenated text of every descendant text node."""
        return "".join(
            node.content for node in iter_nodes(self.children) if isinstance(node, TextNode)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "element",
            "tag_name": self.tag_name,
            "attributes": dict(self.attributes),
            "children": [child.to_dict() for child in self.children],
        }


Node = Union[TextNode, ElementNode]
ElementData = ElementNode
Forest = Tuple[Node, ...]


def iter_nodes(nodes: Sequence[Node]) -> Iterator[Node]:
    """Pre-order traversal over a forest, using an explicit stack."""
    stack: List[Node] = list(reversed(nodes))
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, ElementNode):
            stack.extend(reversed(node.children))


def find_all(nodes: Sequence[Node], tag_name: str) -> List[ElementNode]:
    return [
        node for node in iter_nodes(nodes)
        if isinstance(node, ElementNode) and node.tag_name == tag_name
    ]
