"""Tests for the package-level exports."""

import lenient_html_parser
from lenient_html_parser import (
    ElementNode,
    LenientHTMLParser,
    ParserConfig,
    TextNode,
    parse,
    to_html,
)


def test_version():
    assert lenient_html_parser.__version__ == "0.1.0"


def test_all_exports_exist():
    for name in lenient_html_parser.__all__:
        assert hasattr(lenient_html_parser, name), name


def test_top_level_round_trip():
    result = parse('<div class="c"><b>bold</b> text</div>')

    assert result.forest == (
        ElementNode("div", {"class": "c"}, (ElementNode("b", {}, (TextNode("bold"),)), TextNode(" text"))),
    )
    assert to_html(result.forest) == '<div class="c"><b>bold</b> text</div>'


def test_parser_class_export():
    parser = LenientHTMLParser(ParserConfig.lenient())

    assert parser.parse("<p>unterminated <b").forest[0].tag_name == "p"
