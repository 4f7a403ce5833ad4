"""Tests for the token value types."""

import pytest

from lenient_html_parser.tokenization import Token, TokenPosition, TokenType


class TestToken:
    """Test Token construction and validation."""

    def test_text_token(self):
        token = Token.text("hello")

        assert token.type is TokenType.TEXT
        assert token.value == "hello"
        assert token.attributes == {}
        assert token.name == ""

    def test_open_tag_copies_attributes(self):
        """Test that the caller's attribute dict is not shared."""
        attributes = {"href": "x"}
        token = Token.open_tag("a", attributes)
        attributes["href"] = "changed"

        assert token.attributes == {"href": "x"}
        assert token.name == "a"

    def test_close_tag_cannot_carry_attributes(self):
        with pytest.raises(ValueError, match="CLOSE_TAG tokens cannot carry attributes"):
            Token(TokenType.CLOSE_TAG, "a", {"id": "1"})

    def test_unknown_type_raises_error(self):
        with pytest.raises(TypeError, match="Unknown token type"):
            Token("OPEN_TAG", "a")

    def test_position_defaults_to_origin(self):
        assert Token.close_tag("p").position == TokenPosition(1, 1, 0)


class TestTokenReclassification:
    """Test converting open tags into self-closing tags."""

    def test_reclassified_keeps_name_and_attributes(self):
        position = TokenPosition(1, 4, 3)
        token = Token.open_tag("img", {"src": "a.png"}, position)

        reclassified = token.reclassified()

        assert reclassified.type is TokenType.SELF_CLOSE
        assert reclassified.value == "img"
        assert reclassified.attributes == {"src": "a.png"}
        assert reclassified.position == position
        assert token.type is TokenType.OPEN_TAG

    @pytest.mark.parametrize("token", [
        Token.text("x"),
        Token.close_tag("a"),
        Token.self_close("br"),
    ])
    def test_only_open_tags_can_be_reclassified(self, token):
        with pytest.raises(ValueError, match="Only OPEN_TAG tokens can be reclassified"):
            token.reclassified()


class TestTokenRendering:
    """Test token comparison and rendering helpers."""

    def test_same_shape_ignores_position(self):
        first = Token.open_tag("a", {"id": "1"}, TokenPosition(1, 1, 0))
        second = Token.open_tag("a", {"id": "1"}, TokenPosition(3, 7, 40))

        assert first.same_shape(second)
        assert first != second

    def test_same_shape_compares_attributes(self):
        assert not Token.open_tag("a", {"id": "1"}).same_shape(Token.open_tag("a"))

    def test_to_dict(self):
        token = Token.open_tag("a", {"href": "x"}, TokenPosition(2, 3, 9))

        assert token.to_dict() == {
            "type": "OPEN_TAG",
            "value": "a",
            "attributes": {"href": "x"},
            "position": {"line": 2, "column": 3, "offset": 9},
        }

    def test_text_to_dict_has_no_attributes(self):
        assert "attributes" not in Token.text("x").to_dict()

    def test_str(self):
        assert str(Token.text("hi")) == "TEXT 'hi'"
        assert str(Token.close_tag("p")) == "CLOSE_TAG </p>"
        assert str(Token.open_tag("a", {"href": "x"})) == "OPEN_TAG <a href='x'>"
