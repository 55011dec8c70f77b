"""
Custom Pygments lexer for micron syntax highlighting

Provides syntax highlighting for the raw-code view of micron pages.

Token types:
- Comment: Lines starting with #
- Generic.Heading / Generic.Subheading: > header lines
- Operator: Divider lines (two or more dashes)
- Keyword: Paired formatting codes (`!, `*, `_)
- Name.Attribute: Colour openers with their hex triplet (`Ff00, `B0f0)
- Name.Builtin: Colour closers and alignment codes (`f, `b, `c, `l, `r, `a)
- Name.Tag / String: Links and their URLs
- Name.Function: Form widgets (`<...>)
"""

from typing import Optional

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Comment,
    Generic,
    Keyword,
    Name,
    Operator,
    Punctuation,
    String,
    Text,
)

from ..config import appsettings
from .theme import Theme


class MicronLexer(RegexLexer):
    """
    Lexer for micron markup

    Line markers are matched only at the start of a line; inline codes
    anywhere.

    Example:
        >Header with `!bold`! and `Ff00red`f

    Tokens:
        >Header with → Generic.Heading
        `! → Keyword
        `Ff00 → Name.Attribute
        `f → Name.Builtin
    """

    name = 'Micron'
    aliases = ['micron', 'mu']
    filenames = ['*.mu']

    tokens = {
        'root': [
            # Line-level markers
            (r'^#.*$', Comment.Single),
            (r'^>>>.*$', Generic.Subheading),
            (r'^>>.*$', Generic.Subheading),
            (r'^>.*$', Generic.Heading),
            (r'^-{2,}$', Operator),

            # Links: `[text`url]
            (r'(`\[)([^`\n]*)(`)([^\]\n]*)(\])',
             bygroups(Name.Tag, Text, Punctuation, String, Name.Tag)),

            # Form widgets: `<...>
            (r'`<[^>\n]*>', Name.Function),

            # Colours with their hex triplet
            (r'`[FB][0-9a-fA-F]{3}', Name.Attribute),

            # Paired formatting
            (r'`[!*_]', Keyword),

            # Closers and alignment
            (r'`[fbclra]', Name.Builtin),

            # Reset and stray backticks
            (r'``?', Punctuation),

            # Everything else is text
            (r'[^`\n]+', Text),
            (r'\n', Text),
        ],
    }


def get_lexer() -> MicronLexer:
    """
    Get the MicronLexer instance

    Returns:
        MicronLexer instance ready for use with Pygments
    """
    return MicronLexer()


def source_highlight(text: str, style: Optional[str] = None) -> str:
    """
    Highlight micron source as HTML with inline styles.

    Args:
        text: Micron source
        style: Pygments style name (default: the configured theme's)

    Returns:
        HTML fragment; no external CSS needed
    """
    if style is None:
        style = Theme(appsettings.theme_name).pygmentsStyle_get()
    # noclasses=True means styles are inline
    formatter = HtmlFormatter(style=style, noclasses=True)
    return highlight(text, get_lexer(), formatter)
