"""
Directive records and rule specifications

Defines the typed directive records produced by marker extraction and the
DirectiveSpec metadata that ties each directive kind to its extraction
pattern and its rendering handler.
"""

import re
from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, ClassVar, List, Optional


class DirectiveKind(Enum):
    """
    Kinds of inline micron directives

    Values double as registry names (e.g., registry.spec_get("bold")).
    """
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    LINK = "link"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    TEXT_FIELD = "field"
    FOREGROUND = "fg"
    BACKGROUND = "bg"
    ALIGN_CENTER = "center"
    ALIGN_LEFT = "left"
    ALIGN_RIGHT = "right"


class DirectiveCategory(Enum):
    """
    Categories of micron directives

    Used for organization and documentation generation.
    """
    FORMATTING = "formatting"    # `!  `*  `_
    LINK = "link"                # `[text`url]
    FORM = "form"                # `<?  `<^  `<|
    COLOR = "color"              # `F  `B
    LAYOUT = "layout"            # `c  `l  `r ... `a


@dataclass(frozen=True)
class Directive:
    """
    Base class for extracted directives

    Every variant keeps ``source``: the raw text its rule matched. The source
    may contain placeholders of directives matched before it, which is how
    nesting is represented without recursion during extraction.
    """
    kind: ClassVar[DirectiveKind]


@dataclass(frozen=True)
class Bold(Directive):
    kind: ClassVar[DirectiveKind] = DirectiveKind.BOLD
    content: str
    source: str = ""


@dataclass(frozen=True)
class Italic(Directive):
    kind: ClassVar[DirectiveKind] = DirectiveKind.ITALIC
    content: str
    source: str = ""


@dataclass(frozen=True)
class Underline(Directive):
    kind: ClassVar[DirectiveKind] = DirectiveKind.UNDERLINE
    content: str
    source: str = ""


@dataclass(frozen=True)
class Link(Directive):
    kind: ClassVar[DirectiveKind] = DirectiveKind.LINK
    text: str
    url: str
    source: str = ""


@dataclass(frozen=True)
class Checkbox(Directive):
    kind: ClassVar[DirectiveKind] = DirectiveKind.CHECKBOX
    field: str
    value: str
    checked: bool
    label: str
    source: str = ""


@dataclass(frozen=True)
class Radio(Directive):
    kind: ClassVar[DirectiveKind] = DirectiveKind.RADIO
    group: str
    value: str
    checked: bool
    label: str
    source: str = ""


@dataclass(frozen=True)
class TextField(Directive):
    """Text input field: `<[!][width]|name`default>  (! masks the input)"""
    kind: ClassVar[DirectiveKind] = DirectiveKind.TEXT_FIELD
    name: str
    default: str
    width: int
    masked: bool
    source: str = ""


@dataclass(frozen=True)
class ForegroundColor(Directive):
    kind: ClassVar[DirectiveKind] = DirectiveKind.FOREGROUND
    color: str
    content: str
    source: str = ""


@dataclass(frozen=True)
class BackgroundColor(Directive):
    kind: ClassVar[DirectiveKind] = DirectiveKind.BACKGROUND
    color: str
    content: str
    source: str = ""


@dataclass(frozen=True)
class AlignCenter(Directive):
    kind: ClassVar[DirectiveKind] = DirectiveKind.ALIGN_CENTER
    content: str
    source: str = ""


@dataclass(frozen=True)
class AlignLeft(Directive):
    kind: ClassVar[DirectiveKind] = DirectiveKind.ALIGN_LEFT
    content: str
    source: str = ""


@dataclass(frozen=True)
class AlignRight(Directive):
    kind: ClassVar[DirectiveKind] = DirectiveKind.ALIGN_RIGHT
    content: str
    source: str = ""


@dataclass
class DirectiveSpec:
    """
    Specification for a micron directive rule

    Defines the extraction pattern, record factory and rendering handler of
    one directive kind. Used by DirectiveRegistry, which keeps specs in rule
    priority order.

    Attributes:
        kind: Directive kind handled by this spec
        category: Category for organization
        description: Human-readable description
        pattern: Compiled extraction pattern, applied to the working text
        build: Factory turning a match into a Directive, or None to leave
               the match as literal text
        handler: Rendering function (directive, compiler) -> str
        examples: Example usage strings
    """
    kind: DirectiveKind
    category: DirectiveCategory
    description: str
    pattern: "re.Pattern[str]"
    build: Callable[["re.Match[str]"], Optional[Directive]]
    handler: Callable
    examples: List[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.kind.value


HEX_COLOR = re.compile(r"[0-9a-fA-F]{3}")


def color_isValid(color: str) -> bool:
    """Check that a colour is exactly three hexadecimal digits"""
    return HEX_COLOR.fullmatch(color) is not None
