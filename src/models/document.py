"""
Rendered document model
"""

from dataclasses import dataclass, field
from typing import List

from .directives import Directive


@dataclass(frozen=True)
class SafeDocument:
    """
    Output of one render call

    Attributes:
        html: Sanitized HTML; all user content is escaped
        directives: Directives recorded during extraction
        substitutions: Number of placeholders substituted back

    The ``__html__`` method lets template engines embed the document
    without escaping it a second time.
    """
    html: str
    directives: List[Directive] = field(default_factory=list)
    substitutions: int = 0

    def __str__(self) -> str:
        return self.html

    def __html__(self) -> str:
        return self.html
