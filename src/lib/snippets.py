"""
Snippet builders for the editor toolbar

Pure functions returning well-formed micron escape sequences, plus cursor
helpers that splice a snippet into editor text. Snippets are not validated
against the parser grammar at insertion time; they are built so that
rendering them yields the directive they describe.

Example:
    >>> wrap("hi", "bold")
    '`!hi`!'
    >>> color("hi", fg="f00")
    '`Ff00hi`f'
"""

from typing import Dict, List, Optional, Tuple

from pyfiglet import Figlet, FontNotFound

from ..models.directives import color_isValid
from ..models.editor import Insertion
from .errors import SnippetError
from .log import LOG


STYLE_CODES: Dict[str, Tuple[str, str]] = {
    'bold': ('`!', '`!'),
    'italic': ('`*', '`*'),
    'underline': ('`_', '`_'),
}

STYLE_TEMPLATES: Dict[str, str] = {
    'bold': '\n`! Insert your bold text here! `!\n',
    'italic': '\n`* Insert your italic text here! `*\n',
    'underline': '\n`_ Insert your underlined text here! `_\n',
}

ALIGN_CODES: Dict[str, str] = {
    'center': '`c',
    'left': '`l',
    'right': '`r',
}

ALIGN_CLOSE = '`a'

DIVIDER = '----------'

DIVIDERS: List[str] = [
    DIVIDER,
    '-━',
    '-═',
    '-★',
    '-▬',
    '-●',
    '-◆',
    '-▲',
    '-•',
    '-─',
]

COLOR_PLACEHOLDER = 'text'


def _style_get(style: str) -> Tuple[str, str]:
    try:
        return STYLE_CODES[style]
    except KeyError:
        raise SnippetError(
            f"Unknown text style '{style}'. Expected one of: {', '.join(STYLE_CODES)}"
        ) from None


def wrap(text: str, style: str) -> str:
    """Wrap text in a paired formatting code (bold, italic or underline)"""
    prefix, suffix = _style_get(style)
    return f'{prefix}{text}{suffix}'


def template(style: str) -> str:
    """Insert text for a formatting button pressed without a selection"""
    _style_get(style)
    return STYLE_TEMPLATES[style]


def align_open(alignment: str) -> str:
    """Opening alignment code; the block stays open until `a"""
    try:
        return ALIGN_CODES[alignment]
    except KeyError:
        raise SnippetError(
            f"Unknown alignment '{alignment}'. Expected one of: {', '.join(ALIGN_CODES)}"
        ) from None


def align_close() -> str:
    return ALIGN_CLOSE


def align_wrap(text: str, alignment: str = 'center') -> str:
    """Align a selection, closing the block on its own line"""
    return f'{align_open(alignment)}{text}\n{ALIGN_CLOSE}'


def _color_check(value: Optional[str], which: str) -> Optional[str]:
    if not value:
        return None
    if not color_isValid(value):
        raise SnippetError(f"Invalid {which} colour '{value}': expected 3 hex digits")
    return value


def color(text: str = '', fg: Optional[str] = None, bg: Optional[str] = None) -> str:
    """
    Colour text with a foreground and/or background triplet.

    Args:
        text: Text to colour; empty inserts a 'text' placeholder
        fg: Foreground hex triplet (e.g. "f00")
        bg: Background hex triplet

    Raises:
        SnippetError: Neither colour given, or a colour is not 3 hex digits
    """
    fg = _color_check(fg, 'foreground')
    bg = _color_check(bg, 'background')
    if fg is None and bg is None:
        raise SnippetError("Select at least one colour")

    text = text or COLOR_PLACEHOLDER
    if fg and bg:
        return f'`F{fg}`B{bg}{text}`b`f'
    if fg:
        return f'`F{fg}{text}`f'
    return f'`B{bg}{text}`b'


def link(url: str, text: Optional[str] = None, bold: bool = False, underline: bool = False) -> str:
    """
    Build a link, optionally bold and/or underlined.

    Without bold, the link gets a trailing backtick. The link text defaults
    to the URL.

    Raises:
        SnippetError: URL missing
    """
    if not url:
        raise SnippetError("Link URL is required")

    code = f'`[{text or url}`{url}]'
    code = f'`!{code}`!' if bold else f'{code}`'
    if underline:
        code = f'`_{code}`_'
    return code


def _required_check(**parts: str) -> None:
    missing = [name for name, value in parts.items() if not value]
    if missing:
        raise SnippetError(f"Missing required value(s): {', '.join(missing)}")


def checkbox(field: str, value: str, label: str, checked: bool = False) -> str:
    """Checkbox bound to a form field"""
    _required_check(field=field, value=value, label=label)
    flag = '|*' if checked else ''
    return f'`<?{field}|{value}{flag}>{label}'


def radio(group: str, value: str, label: str, checked: bool = False) -> str:
    """Radio button in a group"""
    _required_check(group=group, value=value, label=label)
    flag = '|*' if checked else ''
    return f'`<^{group}|{value}{flag}>{label}'


def field(name: str, width: int = 24, default: str = 'Enter text', masked: bool = False) -> str:
    """Text input field; masked fields render as password inputs"""
    _required_check(name=name)
    if int(width) < 1:
        raise SnippetError(f"Field width must be positive, got {width}")
    flags = f"{'!' if masked else ''}{int(width)}"
    return f'`<{flags}|{name}`{default}>'


def header(level: int) -> str:
    """Header marker for levels 1 to 3, followed by a space"""
    if level not in (1, 2, 3):
        raise SnippetError(f"Header level must be 1, 2 or 3, got {level}")
    return '>' * level + ' '


def banner(text: str, font: str = 'standard') -> str:
    """
    Render text as figlet ASCII art.

    Raises:
        SnippetError: Font not found
    """
    try:
        figlet = Figlet(font=font)
    except FontNotFound as e:
        raise SnippetError(f"Figlet font '{font}' not found") from e
    art = figlet.renderText(text)
    LOG(f"Rendered banner in font '{font}'", level=3)
    return art.rstrip('\n')


def at_cursor_insert(text: str, cursor: int, snippet: str) -> Insertion:
    """Insert a snippet at the cursor; the cursor moves past it"""
    cursor = max(0, min(cursor, len(text)))
    return Insertion(
        text=text[:cursor] + snippet + text[cursor:],
        cursor=cursor + len(snippet),
    )


def selection_wrap(text: str, start: int, end: int, prefix: str, suffix: str) -> Insertion:
    """
    Wrap the selection [start, end) in a prefix and suffix.

    The wrapped text stays selected.

    Raises:
        SnippetError: Empty selection
    """
    start, end = sorted((max(0, start), min(end, len(text))))
    if start == end:
        raise SnippetError("Select some text first")
    return Insertion(
        text=text[:start] + prefix + text[start:end] + suffix + text[end:],
        cursor=start + len(prefix),
        selection_end=end + len(prefix),
    )


def selection_replace(text: str, start: int, end: int, snippet: str) -> Insertion:
    """Replace the selection [start, end) by a snippet; the cursor moves past it"""
    start, end = sorted((max(0, start), min(end, len(text))))
    return Insertion(
        text=text[:start] + snippet + text[end:],
        cursor=start + len(snippet),
    )


def block_insert(text: str, cursor: int, snippet: str) -> Insertion:
    """
    Insert a line-level snippet (header marker, divider) at the cursor.

    A newline is prepended when the cursor is not at a line start. A newline
    is appended when text follows the cursor on the same line, except for
    header markers, which take the rest of the line as their text.
    """
    cursor = max(0, min(cursor, len(text)))
    before, after = text[:cursor], text[cursor:]

    insert = snippet
    if cursor > 0 and not before.endswith('\n'):
        insert = '\n' + insert
    if after and not after.startswith('\n') and not snippet.startswith('>'):
        insert += '\n'

    return Insertion(text=before + insert + after, cursor=cursor + len(insert))
