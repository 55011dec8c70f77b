"""
Directive rendering tests

Tests the HTML fragment of every directive kind with the default theme.
"""

import dataclasses

import pytest

from micron.lib.compiler import Compiler, render
from micron.lib.directives import DirectiveRegistry
from micron.lib.errors import RenderError
from micron.lib.theme import Theme
from micron.models import DirectiveCategory


BOLD = '<strong style="color: #58a6ff; font-weight: bold;">'
ITALIC = '<em style="color: #ffa657; font-style: italic;">'
UNDERLINE = '<span style="text-decoration: underline; color: #79c0ff;">'
LINK_STYLE = ' style="color: #58a6ff; text-decoration: underline;"'
LABEL = '<span style="color: #e6edf3;">'


@pytest.fixture
def container():
    return Theme().styleAttr_get('container')


class TestDocument:
    """Container and plain text"""

    def test_empty_source(self, container):
        """Empty input renders an empty container"""
        document = render("")
        assert document.html == f'<div{container}></div>'
        assert document.directives == []
        assert document.substitutions == 0

    def test_plain_text(self, container):
        """Plain text is escaped and wrapped"""
        assert render("just text").html == f'<div{container}>just text</div>'

    def test_str_and_html_protocol(self):
        """SafeDocument renders as its html"""
        document = render("`!x`!")
        assert str(document) == document.html
        assert document.__html__() == document.html


class TestFormatting:
    """Bold, italic and underline"""

    def test_bold(self):
        assert f'{BOLD}Hello</strong>' in render("`!Hello`!").html

    def test_italic(self):
        assert f'{ITALIC}x</em>' in render("`*x`*").html

    def test_underline(self):
        assert f'{UNDERLINE}u</span>' in render("`_u`_").html

    def test_nested_bold_italic(self):
        """Nested spans render inside each other"""
        html = render("`!`*bold italic`*`!").html
        assert f'{BOLD}{ITALIC}bold italic</em></strong>' in html

    def test_empty_content(self):
        """Delimiters with nothing between them still form a directive"""
        assert f'{BOLD}</strong>' in render("`!`!").html


class TestLinks:
    """Links and their hrefs"""

    def test_link(self):
        html = render("`[Home`:/page/index.mu]").html
        assert f'<a href=":/page/index.mu"{LINK_STYLE}>Home</a>' in html

    def test_toolbar_link_leaves_no_backtick(self):
        """The trailing backtick of the toolbar form is consumed"""
        html = render("`[Home`:/index.mu]` next").html
        assert "`" not in html
        assert "</a> next" in html

    @pytest.mark.parametrize("url", [
        "javascript:alert(1)",
        "JavaScript:alert(1)",
        " javascript:alert(1)",
        "java\tscript:alert(1)",
        "data:text/html,hi",
        "vbscript:msgbox",
    ])
    def test_blocked_schemes_render_inert(self, url):
        """Blocked URL schemes get an inert href"""
        html = render(f"`[click`{url}]").html
        assert 'href="#"' in html
        assert "script:" not in html.split("href=")[1].split(">")[0]

    def test_bold_link(self):
        """The toolbar's bold link renders a link inside bold"""
        html = render("`!`[X`http://x]`!").html
        assert f'{BOLD}<a href="http://x"{LINK_STYLE}>X</a></strong>' in html


class TestForms:
    """Checkboxes, radio buttons and text fields"""

    def test_checked_checkbox(self):
        html = render("`<?field|val|*>Label").html
        assert (
            f'<input type="checkbox" name="field" value="val" checked> {LABEL}Label</span>'
            in html
        )

    def test_unchecked_checkbox(self):
        html = render("`<?field|val>Label").html
        assert '<input type="checkbox" name="field" value="val">' in html
        assert "checked" not in html

    def test_radio(self):
        html = render("`<^size|small>Small").html
        assert '<input type="radio" name="size" value="small">' in html
        assert f'{LABEL}Small</span>' in html

    def test_text_field(self):
        html = render("`<24|username`Enter text>").html
        assert (
            '<input type="text" name="username" value="Enter text" size="24"'
            ' style="background: #161b22; color: #e6edf3; border: 1px solid #30363d;">'
            in html
        )

    def test_masked_field(self):
        assert 'type="password"' in render("`<!8|pin`>").html

    def test_label_with_bold(self):
        """Labels render nested directives"""
        html = render("`<?f|v>Say `!hi`!").html
        assert f'{LABEL}Say {BOLD}hi</strong></span>' in html


class TestColors:
    """Foreground and background colours"""

    def test_foreground(self):
        assert '<span style="color: #f00;">red</span>' in render("`Ff00red`f").html

    def test_background(self):
        html = render("`B0f0green`b").html
        assert '<span style="background-color: #0f0; padding: 2px 4px;">green</span>' in html

    def test_combined_colours(self):
        """Foreground wraps the background span"""
        html = render("`Ff00`Bff0text`b`f").html
        assert (
            '<span style="color: #f00;">'
            '<span style="background-color: #ff0; padding: 2px 4px;">text</span></span>'
        ) in html

    def test_invalid_hex_left_literal(self):
        """An invalid triplet never becomes a colour span"""
        html = render("`Fzzz text`f").html
        assert "`Fzzz text`f" in html
        assert "color:" not in html.split(">", 1)[1]


class TestAlignment:
    """Alignment blocks"""

    @pytest.mark.parametrize("code,alignment", [("c", "center"), ("l", "left"), ("r", "right")])
    def test_alignment(self, code, alignment):
        html = render(f"`{code}text`a").html
        assert f'<div style="text-align: {alignment}; margin: 2px 0;">text</div>' in html

    def test_alignment_wraps_colour(self):
        """Alignment closes around an already extracted colour span"""
        html = render("`c`Ff00x`f`a").html
        assert '<div style="text-align: center; margin: 2px 0;"><span style="color: #f00;">x</span></div>' in html


class TestSubstitution:
    """Every directive is substituted exactly once"""

    @pytest.mark.parametrize("source", [
        "`!a`! `*b`* `_c`_",
        "`!`*x`*`!",
        "`[t`http://a/`!b`!]",
        "`<?`!f`!|v>l",
        "`Ff00`Bff0text`b`f",
        "`c\n> `Ff00`Bff0Welcome`b`f\n----------\n`a",
    ])
    def test_substitutions_match_directives(self, source):
        document = render(source)
        assert document.substitutions == len(document.directives)
        assert "\x00" not in document.html
        assert "###M" not in document.html

    def test_directive_inside_url_folded_back(self):
        """Markup inside an attribute value stays literal source"""
        html = render("`[t`http://a/`!b`!]").html
        assert 'href="http://a/`!b`!"' in html
        assert "<strong" not in html

    def test_handler_failure_raises_render_error(self):
        """Unexpected handler errors surface as RenderError"""
        def boom(directive, compiler):
            raise ValueError("broken handler")

        registry = DirectiveRegistry()
        registry.specs['bold'] = dataclasses.replace(registry.specs['bold'], handler=boom)

        with pytest.raises(RenderError) as excinfo:
            Compiler(registry=registry).render("`!x`!")
        assert isinstance(excinfo.value.__cause__, ValueError)


class TestRegistry:
    """Directive registry"""

    def test_rule_order(self):
        """Specs are kept in extraction priority order"""
        names = [spec.name for spec in DirectiveRegistry().rules()]
        assert names == [
            "bold", "italic", "underline", "link", "checkbox", "radio", "field",
            "fg", "bg", "center", "left", "right",
        ]

    def test_list_by_category(self):
        registry = DirectiveRegistry()
        colors = registry.directives_listByCategory(DirectiveCategory.COLOR)
        assert [spec.name for spec in colors] == ["fg", "bg"]

    def test_unknown_handler(self):
        assert DirectiveRegistry().get("nope") is None

    def test_light_theme(self):
        """Fragments take their styles from the selected theme"""
        html = Compiler(theme_name="light").render("`!x`!").html
        assert "#0550ae" in html
