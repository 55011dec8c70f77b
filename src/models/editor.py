"""
Editor models: text insertions and status-bar information
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Insertion:
    """
    Result of inserting a snippet into editor text

    Attributes:
        text: Complete editor text after the insertion
        cursor: Cursor offset after the insertion
        selection_end: End of the selection left behind; equals ``cursor``
                       when nothing is selected
    """
    text: str
    cursor: int
    selection_end: int = -1

    def __post_init__(self) -> None:
        if self.selection_end < 0:
            object.__setattr__(self, 'selection_end', self.cursor)


@dataclass(frozen=True)
class CursorInfo:
    """Cursor position (one-based line and column) and character count"""
    line: int
    column: int
    chars: int

    def __str__(self) -> str:
        return f"Line {self.line}, Col {self.column} | {self.chars} chars"


@dataclass(frozen=True)
class MicronInfo:
    """Line and character count of micron source"""
    lines: int
    chars: int

    def __str__(self) -> str:
        return f"{self.lines} lines | {self.chars} chars"
