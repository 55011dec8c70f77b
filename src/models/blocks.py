"""
Line-level block models

Classification of a single output line by the block rules.
"""

from enum import Enum
from dataclasses import dataclass


class LineKind(Enum):
    """Kinds of lines recognized by the block rules"""
    HEADER_PRIMARY = "header1"      # >
    HEADER_SECONDARY = "header2"    # >>
    HEADER_TERTIARY = "header3"     # >>>
    DIVIDER = "divider"             # ----
    COMMENT = "comment"             # # ...
    TEXT = "text"


@dataclass(frozen=True)
class BlockLine:
    """
    One classified line

    Attributes:
        kind: Line classification
        content: Line text with the block marker removed
        number: One-based line number in the rendered text
    """
    kind: LineKind
    content: str
    number: int
