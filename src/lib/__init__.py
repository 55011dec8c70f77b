"""
micron - Micron markup transducer

Renders NomadNet-style micron pages to sanitized HTML and strips them back
to plain text.
"""

__version__ = "1.0.0"

from .parser import Parser
from .compiler import Compiler, render
from .stripper import strip
from .directives import DirectiveRegistry
from .session import EditorSession, MemoryStore, YamlFileStore
from .log import LOG, state_connectToLogger

__all__ = [
    "Parser",
    "Compiler",
    "DirectiveRegistry",
    "EditorSession",
    "MemoryStore",
    "YamlFileStore",
    "render",
    "strip",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
