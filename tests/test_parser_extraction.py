"""
Marker extraction tests

Tests rule order, placeholders, rule rounds and malformed spans.
"""

import pytest

from micron.lib.parser import Parser
from micron.models import (
    Bold,
    Checkbox,
    ForegroundColor,
    Italic,
    Link,
    MarkerToken,
    Radio,
    TextField,
    TextToken,
)


class TestPlainText:
    """Source without directives"""

    def test_empty_source(self):
        """Empty string yields no directives and no tokens"""
        result = Parser("").parse()
        assert result.working_text == ""
        assert result.directives == []
        assert result.tokens == []

    def test_plain_text_unchanged(self):
        """Text without codes passes through as a single text token"""
        result = Parser("plain text").parse()
        assert result.working_text == "plain text"
        assert result.directives == []
        assert result.tokens == [TextToken("plain text")]
        assert result.rounds == 1

    def test_line_endings_normalized(self):
        """CRLF and CR become LF"""
        result = Parser("a\r\nb\rc").parse()
        assert result.working_text == "a\nb\nc"

    def test_comment_lines_removed(self):
        """Comment lines go before extraction, along with their break"""
        result = Parser("a\n# note `!x`!\nb\n#last").parse()
        assert result.working_text == "a\nb"
        assert result.directives == []

    def test_nul_removed(self):
        """NUL delimits placeholders and never survives normalisation"""
        result = Parser("a\x00b").parse()
        assert result.working_text == "ab"


class TestSingleDirectives:
    """One directive per source"""

    def test_bold_placeholder(self):
        """A bold span becomes placeholder M0"""
        result = Parser("`!Hello`! world").parse()
        assert result.working_text == "\x00###M0###\x00 world"
        assert result.directives == [Bold(content="Hello", source="`!Hello`!")]
        assert result.tokens[0] == MarkerToken(index=0, placeholder="\x00###M0###\x00")
        assert result.tokens[1] == TextToken(" world")

    def test_link(self):
        """Link text and URL are captured"""
        result = Parser("`[Home`:/page/index.mu]").parse()
        link = result.directives[0]
        assert isinstance(link, Link)
        assert link.text == "Home"
        assert link.url == ":/page/index.mu"

    def test_link_absorbs_trailing_backtick(self):
        """The toolbar form closes a link with an extra backtick"""
        result = Parser("`[a`b]` tail").parse()
        assert result.directives[0].source == "`[a`b]`"
        assert result.working_text == "\x00###M0###\x00 tail"

    def test_link_keeps_backtick_opening_a_code(self):
        """A backtick opening another code is not absorbed by the link"""
        result = Parser("`[a`b]`Ff00red`f").parse()
        assert len(result.directives) == 2
        assert isinstance(result.directives[0], Link)
        assert isinstance(result.directives[1], ForegroundColor)
        assert result.directives[1].content == "red"

    def test_link_url_stops_at_newline(self):
        """A URL cannot span lines"""
        result = Parser("`[a`b\nc]").parse()
        assert result.directives == []

    def test_checkbox_checked(self):
        """|* marks a checkbox pre-checked"""
        checkbox = Parser("`<?field|val|*>Label").parse().directives[0]
        assert isinstance(checkbox, Checkbox)
        assert checkbox.field == "field"
        assert checkbox.value == "val"
        assert checkbox.checked is True
        assert checkbox.label == "Label"

    def test_checkbox_unchecked(self):
        """Without |* the checkbox is unchecked"""
        checkbox = Parser("`<?field|val>Label").parse().directives[0]
        assert checkbox.checked is False

    def test_checkbox_toolbar_form(self):
        """Leading pipe and backtick before > are accepted"""
        checkbox = Parser("`<?|sub|yes`>Subscribe").parse().directives[0]
        assert isinstance(checkbox, Checkbox)
        assert (checkbox.field, checkbox.value, checkbox.checked, checkbox.label) == (
            "sub", "yes", False, "Subscribe"
        )

    def test_checkbox_label_stops_at_newline(self):
        """The label runs to the end of the line"""
        result = Parser("`<?f|v>Label\nnext line").parse()
        assert result.directives[0].label == "Label"
        assert result.working_text == "\x00###M0###\x00\nnext line"

    def test_radio(self):
        """Radio buttons carry their group"""
        radio = Parser("`<^size|large|*>Large").parse().directives[0]
        assert isinstance(radio, Radio)
        assert radio.group == "size"
        assert radio.value == "large"
        assert radio.checked is True
        assert radio.label == "Large"

    def test_text_field_defaults(self):
        """Field width defaults to 24"""
        text_field = Parser("`<|name`Bob>").parse().directives[0]
        assert isinstance(text_field, TextField)
        assert text_field.name == "name"
        assert text_field.default == "Bob"
        assert text_field.width == 24
        assert text_field.masked is False

    def test_masked_text_field(self):
        """A leading ! masks the field"""
        text_field = Parser("`<!16|password`>").parse().directives[0]
        assert text_field.masked is True
        assert text_field.width == 16
        assert text_field.default == ""


class TestRuleOrder:
    """Rule priority and rule rounds"""

    def test_directives_indexed_in_rule_order(self):
        """Earlier rules record their matches first"""
        result = Parser("`*b`* `!a`!").parse()
        assert isinstance(result.directives[0], Bold)
        assert isinstance(result.directives[1], Italic)
        assert result.working_text == "\x00###M1###\x00 \x00###M0###\x00"

    def test_nested_span_needs_second_round(self):
        """Bold around italic closes once italic became a placeholder"""
        result = Parser("`!`*x`*`!").parse()
        assert result.directives[0] == Italic(content="x", source="`*x`*")
        assert result.directives[1].content == "\x00###M0###\x00"
        assert result.working_text == "\x00###M1###\x00"
        assert result.rounds == 3

    def test_combined_colours(self):
        """The toolbar's foreground+background output yields two directives"""
        result = Parser("`Ff00`Bff0text`b`f").parse()
        assert [d.kind.value for d in result.directives] == ["bg", "fg"]
        assert result.directives[1].color == "f00"

    def test_source_restore(self):
        """Restoring placeholders gives back the author's text"""
        source = "say `!`*x`*`! and `Ff00`Bff0y`b`f"
        parser = Parser(source)
        result = parser.parse()
        assert parser.source_restore(result.working_text) == source


class TestMalformed:
    """Malformed spans stay literal"""

    @pytest.mark.parametrize("source", [
        "`!never closed",
        "`*half",
        "`Fzzz text`f",
        "`[no url",
        "`<?nolabel",
        "`cunclosed alignment",
    ])
    def test_unterminated_left_literal(self, source):
        """No directive, no error"""
        result = Parser(source).parse()
        assert result.directives == []
        assert result.working_text == source
