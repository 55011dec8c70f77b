"""
Models package for micron

Contains data structures and type definitions for the render pipeline.
"""

from .state import ProgramState, pipeline
from .directives import (
    Directive,
    DirectiveKind,
    DirectiveCategory,
    DirectiveSpec,
    Bold,
    Italic,
    Underline,
    Link,
    Checkbox,
    Radio,
    TextField,
    ForegroundColor,
    BackgroundColor,
    AlignCenter,
    AlignLeft,
    AlignRight,
)
from .parser import ExtractionResult, TextToken, MarkerToken, Token
from .blocks import LineKind, BlockLine
from .document import SafeDocument
from .editor import Insertion, CursorInfo, MicronInfo

__all__ = [
    "ProgramState",
    "pipeline",
    "Directive",
    "DirectiveKind",
    "DirectiveCategory",
    "DirectiveSpec",
    "Bold",
    "Italic",
    "Underline",
    "Link",
    "Checkbox",
    "Radio",
    "TextField",
    "ForegroundColor",
    "BackgroundColor",
    "AlignCenter",
    "AlignLeft",
    "AlignRight",
    "ExtractionResult",
    "TextToken",
    "MarkerToken",
    "Token",
    "LineKind",
    "BlockLine",
    "SafeDocument",
    "Insertion",
    "CursorInfo",
    "MicronInfo",
]
