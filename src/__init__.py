"""
micron - Micron markup transducer

Renders NomadNet-style micron pages to sanitized HTML and strips them back
to plain text.
"""

__version__ = "1.0.0"

from .lib import (
    Parser,
    Compiler,
    DirectiveRegistry,
    EditorSession,
    MemoryStore,
    YamlFileStore,
    render,
    strip,
    LOG,
    state_connectToLogger,
)

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
