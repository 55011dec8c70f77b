"""
Escaping tests

Literal text and captured content are escaped exactly once; no user
content reaches the output unescaped.
"""

import pytest

from micron.lib.compiler import render
from micron.lib.parser import escape


class TestEscape:
    """The escaper itself"""

    def test_special_characters(self):
        assert escape("<a href=\"x\">'&'</a>") == (
            "&lt;a href=&quot;x&quot;&gt;&#x27;&amp;&#x27;&lt;/a&gt;"
        )

    def test_single_application(self):
        """Escaping is applied once; a second pass escapes the ampersands again"""
        once = escape("a & b")
        assert once == "a &amp; b"
        assert escape(once) == "a &amp;amp; b"


class TestLiteralText:
    """Markup in literal text"""

    def test_script_tag(self):
        html = render("<script>alert(1)</script>").html
        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html

    def test_ampersand_escaped_once(self):
        html = render("Tom & Jerry").html
        assert "Tom &amp; Jerry" in html
        assert "&amp;amp;" not in html

    def test_placeholder_lookalike_is_literal(self):
        """Text that looks like a placeholder is just text"""
        document = render("###M0### and \x00###M0###\x00")
        assert document.directives == []
        assert "###M0### and ###M0###" in document.html


class TestDirectiveContent:
    """Markup captured inside directives"""

    @pytest.mark.parametrize("source", [
        "`!<b>x</b>`!",
        "`*<img src=x onerror=alert(1)>`*",
        "`Ff00<i>`f",
        "`c<iframe>`a",
        "`<?f|v><script>",
    ])
    def test_content_escaped(self, source):
        html = render(source).html
        assert "<b>" not in html
        assert "<img" not in html
        assert "<i>" not in html
        assert "<iframe" not in html
        assert "<script" not in html

    def test_link_text_escaped(self):
        html = render("`[<b>bold</b>`http://x]").html
        assert ">&lt;b&gt;bold&lt;/b&gt;</a>" in html

    def test_attribute_injection(self):
        """Quotes in attribute values cannot break out of the attribute"""
        html = render('`[x`http://a/" onmouseover="alert(1)]').html
        assert 'href="http://a/&quot; onmouseover=&quot;alert(1)"' in html

    def test_field_value_injection(self):
        html = render('`<|name`"><script>>').html
        assert "<script>" not in html

    def test_header_marker_escaped_in_text(self):
        """Only a leading > makes a header; others are escaped text"""
        html = render("a > b").html
        assert "a &gt; b" in html
