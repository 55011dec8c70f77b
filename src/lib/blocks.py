"""
Line-level block rules

Applied after directive substitution, to escaped text. Each line is
classified on its own: headers, dividers and comments differ from inline
directives in that they scope a whole line, not a span.
"""

import re
from typing import List, Optional

from ..models.blocks import BlockLine, LineKind
from .log import LOG
from .theme import Theme


# Checked in this order: longest header prefix first. Text is already
# escaped, so '>' arrives as '&gt;'.
HEADER_PREFIXES = [
    ('&gt;&gt;&gt;', LineKind.HEADER_TERTIARY),
    ('&gt;&gt;', LineKind.HEADER_SECONDARY),
    ('&gt;', LineKind.HEADER_PRIMARY),
]

DIVIDER_LINE = re.compile(r'-{2,}')

LINE_BREAK = '<br>'


class BlockRules:
    """
    Line classifier and renderer

    Stateless across lines: output lines keep input order, comment lines
    are dropped together with their line break.
    """

    def __init__(self, theme: Optional[Theme] = None) -> None:
        self.theme = theme or Theme()

    def line_classify(self, line: str, number: int = 1) -> BlockLine:
        """
        Classify one escaped line.

        Args:
            line: Escaped line text without its newline
            number: One-based line number

        Returns:
            BlockLine with the marker removed from ``content``
        """
        for prefix, kind in HEADER_PREFIXES:
            if line.startswith(prefix):
                return BlockLine(kind=kind, content=line[len(prefix):], number=number)

        if DIVIDER_LINE.fullmatch(line):
            return BlockLine(kind=LineKind.DIVIDER, content='', number=number)

        if line.startswith('#'):
            return BlockLine(kind=LineKind.COMMENT, content=line[1:], number=number)

        return BlockLine(kind=LineKind.TEXT, content=line, number=number)

    def line_render(self, block: BlockLine) -> Optional[str]:
        """Render a classified line; None for lines producing no output"""
        if block.kind == LineKind.COMMENT:
            return None
        if block.kind == LineKind.DIVIDER:
            return f'<hr{self.theme.styleAttr_get("divider")}>'
        if block.kind == LineKind.TEXT:
            return block.content
        # Headers: LineKind values name their theme fragment
        return f'<div{self.theme.styleAttr_get(block.kind.value)}>{block.content}</div>'

    def lines_classify(self, text: str) -> List[BlockLine]:
        """Classify every line of a text"""
        return [
            self.line_classify(line, number)
            for number, line in enumerate(text.split('\n'), start=1)
        ]

    def rules_apply(self, text: str) -> str:
        """
        Apply block rules to escaped, placeholder-free text.

        Returns:
            Rendered lines joined with line breaks
        """
        rendered: List[str] = []
        dropped = 0
        for block in self.lines_classify(text):
            output = self.line_render(block)
            if output is None:
                dropped += 1
                continue
            rendered.append(output)

        if dropped:
            LOG(f"Dropped {dropped} comment line(s)", level=3)
        return LINE_BREAK.join(rendered)
