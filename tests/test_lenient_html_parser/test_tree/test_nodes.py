"""Tests for node types and forest traversal helpers."""

import pytest

from lenient_html_parser.tree import (
    ElementData,
    ElementNode,
    TextNode,
    find_all,
    iter_nodes,
)


@pytest.fixture
def sample_tree():
    """<div id=main><p>one<b>two</b></p><p>three</p></div>"""
    return ElementNode("div", {"id": "main"}, (
        ElementNode("p", {}, (TextNode("one"), ElementNode("b", {}, (TextNode("two"),)))),
        ElementNode("p", {}, (TextNode("three"),)),
    ))


class TestElementNode:
    """Test ElementNode construction and accessors."""

    def test_empty_tag_name_raises_error(self):
        with pytest.raises(ValueError, match="Element tag name cannot be empty"):
            ElementNode("")

    def test_children_are_coerced_to_tuple(self):
        element = ElementNode("ul", {}, [ElementNode("li")])

        assert isinstance(element.children, tuple)

    def test_element_data_alias(self):
        assert ElementData is ElementNode

    def test_attributes(self):
        element = ElementNode("a", {"href": "x", "download": ""})

        assert element.get_attribute("href") == "x"
        assert element.get_attribute("title") is None
        assert element.get_attribute("title", "none") == "none"
        assert element.has_attribute("download")
        assert not element.has_attribute("title")

    def test_element_children(self, sample_tree):
        assert [c.tag_name for c in sample_tree.element_children] == ["p", "p"]

    def test_find(self, sample_tree):
        assert sample_tree.find("b").text_content == "two"
        assert sample_tree.find("div") is None

    def test_find_all(self, sample_tree):
        assert [p.text_content for p in sample_tree.find_all("p")] == ["onetwo", "three"]

    def test_text_content(self, sample_tree):
        assert sample_tree.text_content == "onetwothree"

    def test_iter_includes_self(self, sample_tree):
        nodes = list(sample_tree.iter())

        assert nodes[0] is sample_tree
        assert len(nodes) == 7

    def test_to_dict(self):
        element = ElementNode("a", {"href": "x"}, (TextNode("link"),))

        assert element.to_dict() == {
            "type": "element",
            "tag_name": "a",
            "attributes": {"href": "x"},
            "children": [{"type": "text", "content": "link"}],
        }

    def test_equality_is_structural(self):
        assert ElementNode("p", {}, (TextNode("x"),)) == ElementNode("p", {}, (TextNode("x"),))

    def test_elements_are_not_hashable(self):
        with pytest.raises(TypeError):
            hash(ElementNode("p"))


class TestForestHelpers:
    """Test forest-level traversal."""

    def test_iter_nodes_preorder(self, sample_tree):
        forest = (TextNode("before"), sample_tree)

        order = [
            node.tag_name if isinstance(node, ElementNode) else node.content
            for node in iter_nodes(forest)
        ]

        assert order == ["before", "div", "p", "one", "b", "two", "p", "three"]

    def test_iter_nodes_handles_deep_nesting(self):
        """Test that traversal depth is not bounded by the recursion limit."""
        node = TextNode("leaf")
        for _ in range(5000):
            node = ElementNode("div", {}, (node,))

        assert sum(1 for _ in iter_nodes([node])) == 5001

    def test_find_all_over_forest(self, sample_tree):
        forest = (sample_tree, ElementNode("p"))

        assert len(find_all(forest, "p")) == 3
        assert find_all(forest, "table") == []
