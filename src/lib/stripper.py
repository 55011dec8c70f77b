"""
Plain-text stripper: best-effort inverse of rendering

Removes micron formatting codes and line markers, leaving plain text. The
removal rules are lossy and not a strict inverse of the parser grammar:
besides the paired forms they clean up orphaned openers and closers.

Some removals expose new matches for earlier rules (stripping a colour
wrapper can reveal a bold pair), so the rules iterate to a fixed point,
bounded by the configured iteration cap.
"""

import re
from typing import List, Optional, Tuple

from ..config import appsettings
from .log import LOG


Rule = Tuple["re.Pattern[str]", str]

# Order matters: links and form tags go before the orphan alignment and
# colour codes, whose letters could otherwise eat the start of a URL.
INLINE_RULES: List[Rule] = [
    # Paired text formatting
    (re.compile(r'`!([^`]*)`!'), r'\1'),
    (re.compile(r'`\*([^`]*)`\*'), r'\1'),
    (re.compile(r'`_([^`]*)`_'), r'\1'),

    # Links keep their text; the toolbar form closes with an extra backtick
    (re.compile(r'`\[([^`]*)`([^\]]+)\]`'), r'\1'),
    (re.compile(r'`\[([^`]*)`([^\]]+)\]'), r'\1'),

    # Form widgets (checkbox, radio, text field) keep only trailing labels
    (re.compile(r'`<[^>]+>'), ''),

    # Colours, with and without content
    (re.compile(r'`F[0-9a-fA-F]{3}([^`]*)`f'), r'\1'),
    (re.compile(r'`F[0-9a-fA-F]{3}'), ''),
    (re.compile(r'`f'), ''),
    (re.compile(r'`B[0-9a-fA-F]{3}([^`]*)`b'), r'\1'),
    (re.compile(r'`B[0-9a-fA-F]{3}'), ''),
    (re.compile(r'`b'), ''),

    # Alignment, paired then orphaned
    (re.compile(r'`c([^`]*)`a'), r'\1'),
    (re.compile(r'`l([^`]*)`a'), r'\1'),
    (re.compile(r'`r([^`]*)`a'), r'\1'),
    (re.compile(r'`[clra]'), ''),

    # Reset codes and stray backticks
    (re.compile(r'``'), ''),
    (re.compile(r'`'), ''),
]

LINE_RULES: List[Rule] = [
    (re.compile(r'^>+', re.MULTILINE), ''),
    (re.compile(r'^-{2,}$', re.MULTILINE), ''),
    (re.compile(r'^#.*$', re.MULTILINE), ''),
]

BLANK_RUN = re.compile(r'\n{3,}')


def rules_apply(text: str, rules: List[Rule]) -> str:
    """Apply every rule once, in order"""
    for pattern, replacement in rules:
        text = pattern.sub(replacement, text)
    return text


def inline_strip(text: str, cap: Optional[int] = None) -> Tuple[str, bool]:
    """
    Remove inline codes until no rule changes the text.

    Args:
        text: Micron source
        cap: Iteration cap (default from settings)

    Returns:
        Tuple of (stripped text, converged)
    """
    cap = appsettings.strip_iteration_cap if cap is None else cap
    for _ in range(cap):
        stripped = rules_apply(text, INLINE_RULES)
        if stripped == text:
            return text, True
        text = stripped
    return text, False


def lines_strip(text: str) -> str:
    """Remove header markers, divider and comment lines, collapse blank runs"""
    text = rules_apply(text, LINE_RULES)
    text = BLANK_RUN.sub('\n\n', text)
    return text.strip()


def strip(text: str, cap: Optional[int] = None) -> str:
    """
    Strip all micron formatting, leaving best-effort plain text.

    Inline codes are removed to a fixed point, then line markers. The whole
    pass repeats until stable, so stripping a stripped text changes nothing.
    When the cap is reached the partially stripped text is returned.

    Args:
        text: Micron source
        cap: Iteration cap (default from settings)

    Returns:
        Plain text

    Example:
        >>> strip("`!Hello`!")
        'Hello'
    """
    cap = appsettings.strip_iteration_cap if cap is None else cap
    text = text.replace('\r\n', '\n').replace('\r', '\n')

    for _ in range(cap):
        inline, converged = inline_strip(text, cap)
        if not converged:
            LOG(f"Inline stripping hit the iteration cap ({cap})", level=2)
        stripped = lines_strip(inline)
        if stripped == text:
            return stripped
        text = stripped

    LOG(f"Stripping hit the iteration cap ({cap}); returning best effort", level=2)
    return text
