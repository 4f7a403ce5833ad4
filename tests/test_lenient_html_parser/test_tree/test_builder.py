"""Comprehensive tests for tree building.

Tests forest construction from balanced tokens, the leftover-stack policies
and the ParseResult container.
"""

import pytest

from lenient_html_parser.shared import DiagnosticSeverity, TreeConfig
from lenient_html_parser.tokenization import BalanceRepairEngine, Token, tokenize
from lenient_html_parser.tree import (
    ElementNode,
    HTMLTreeBuilder,
    ParseResult,
    TextNode,
    build_tree,
)


def repaired(html):
    return BalanceRepairEngine().repair(tokenize(html).tokens).tokens


class TestHTMLTreeBuilder:
    """Test forest construction."""

    def test_nested_elements(self):
        forest = build_tree(repaired('<a href="x"><b>bold</b> tail</a>'))

        assert forest == (
            ElementNode("a", {"href": "x"}, (
                ElementNode("b", {}, (TextNode("bold"),)),
                TextNode(" tail"),
            )),
        )

    def test_multiple_roots(self):
        forest = build_tree(repaired("<p>a</p>text<p>b</p>"))

        assert len(forest) == 3
        assert forest[1] == TextNode("text")

    def test_reclassified_open_tag_becomes_sibling_of_text(self):
        """Test that a never-closed tag does not swallow the following text."""
        forest = build_tree(repaired("<a><b>text</a>"))

        assert forest == (
            ElementNode("a", {}, (ElementNode("b"), TextNode("text"))),
        )

    def test_invalid_close_is_dropped(self):
        assert build_tree(repaired("</z>hello")) == (TextNode("hello"),)

    def test_directive_is_a_childless_element(self):
        forest = build_tree(repaired("<!DOCTYPE html><html></html>"))

        assert forest[0] == ElementNode("directive", {"text": "DOCTYPE html"})
        assert forest[1] == ElementNode("html")

    def test_whitespace_only_element_has_no_children(self):
        assert build_tree(repaired("<a>   </a>")) == (ElementNode("a"),)

    def test_empty_name_self_close_is_dropped(self):
        tokens = [Token.self_close(""), Token.text("x")]

        assert build_tree(tokens) == (TextNode("x"),)

    def test_close_with_empty_stack_is_ignored(self):
        """Test that unrepaired input with a stray close still builds."""
        result = HTMLTreeBuilder().build([Token.close_tag("p"), Token.text("x")])

        assert result.forest == (TextNode("x"),)
        warnings = result.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)
        assert len(warnings) == 1
        assert "</p>" in warnings[0].message

    def test_deep_nesting(self):
        """Test that nesting depth is not bounded by the recursion limit."""
        depth = 5000
        html = "<div>" * depth + "x" + "</div>" * depth

        forest = build_tree(repaired(html))

        node = forest[0]
        for _ in range(depth - 1):
            node = node.children[0]
        assert node.children == (TextNode("x"),)

    def test_element_count_metric(self):
        result = HTMLTreeBuilder().build(repaired("<a><b>t</a><br>"))

        assert result.performance.elements_created == 3


class TestUnclosedElements:
    """Test the leftover-stack policies."""

    def test_flush_policy_moves_each_element_to_root(self):
        result = HTMLTreeBuilder(TreeConfig(unclosed_policy="flush")).build(
            repaired("<div><p>text")
        )

        assert result.forest == (ElementNode("div"), ElementNode("p", {}, (TextNode("text"),)))
        info = result.get_diagnostics_by_severity(DiagnosticSeverity.INFO)
        assert info[0].message == "Closed 2 element(s) left open at end of input"
        assert info[0].details == {"tags": ["div", "p"], "policy": "flush"}

    def test_flush_is_default(self):
        assert build_tree(repaired("<div><p>text")) == (
            ElementNode("div"),
            ElementNode("p", {}, (TextNode("text"),)),
        )

    def test_nest_policy_closes_into_parent(self):
        forest = build_tree(repaired("x<div><p>text"), TreeConfig(unclosed_policy="nest"))

        assert forest == (
            TextNode("x"),
            ElementNode("div", {}, (ElementNode("p", {}, (TextNode("text"),)),)),
        )

    def test_invalid_policy_rejected(self):
        with pytest.raises(ValueError, match="unclosed_policy must be one of"):
            TreeConfig(unclosed_policy="discard")


class TestParseResult:
    """Test the ParseResult container."""

    def test_defaults(self):
        result = ParseResult()

        assert result.is_empty
        assert result.element_count == 0
        assert result.repair_count == 0
        assert not result.has_errors

    def test_find_helpers(self):
        result = HTMLTreeBuilder().build(repaired("<p><b>1</b></p><b>2</b>"))

        assert result.roots is result.forest
        assert result.element_count == 3
        assert result.find("b").text_content == "1"
        assert len(result.find_all("b")) == 2
        assert result.find("table") is None

    def test_has_errors(self):
        result = ParseResult()
        result.add_diagnostic(DiagnosticSeverity.WARNING, "recovered", "test")
        assert not result.has_errors

        result.add_diagnostic(DiagnosticSeverity.ERROR, "lost content", "test")
        assert result.has_errors

    def test_summary_and_to_dict(self):
        result = HTMLTreeBuilder(correlation_id="cid").build(repaired("<div><p>x"))

        summary = result.summary()
        assert summary["root_count"] == 2
        assert summary["element_count"] == 2
        assert summary["diagnostics"] == {"INFO": 1}
        assert summary["correlation_id"] == "cid"

        data = result.to_dict()
        assert data["forest"][0] == {
            "type": "element",
            "tag_name": "div",
            "attributes": {},
            "children": [],
        }
        assert data["diagnostics"][0]["severity"] == "INFO"
        assert "elements_created" in data["performance"]
