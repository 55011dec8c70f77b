"""
Parser-specific data models

Type-safe structures for extraction results and the token stream.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .directives import Directive


@dataclass(frozen=True)
class TextToken:
    """
    Literal text between placeholders in the working text

    Attributes:
        value: Raw (unescaped) text
    """
    value: str


@dataclass(frozen=True)
class MarkerToken:
    """
    A placeholder occurrence in the working text

    Attributes:
        index: Directive index the placeholder stands for
        placeholder: The placeholder string itself
    """
    index: int
    placeholder: str


Token = Union[TextToken, MarkerToken]


@dataclass
class ExtractionResult:
    """
    Result of marker extraction over one source text

    Returned by Parser.parse() after every inline rule has been applied.

    Attributes:
        working_text: Source with every recognized directive replaced by a
                      placeholder (e.g., "Hello \x00###M0###\x00!")
        directives: Directive records, indexed to match placeholders
                    (###M0### -> directives[0])
        tokens: Working text split into text and marker tokens
        rounds: Number of ordered rule rounds that ran

    Example:
        Input: "Hello `!world`!"
        Result: ExtractionResult(
            working_text="Hello \x00###M0###\x00",
            directives=[Bold(content="world", source="`!world`!")],
            ...
        )
    """
    working_text: str
    directives: List[Directive]
    tokens: List[Token] = field(default_factory=list)
    rounds: int = 0

    def directive_get(self, index: int) -> Optional[Directive]:
        """Directive for a placeholder index, None when out of range"""
        if 0 <= index < len(self.directives):
            return self.directives[index]
        return None
