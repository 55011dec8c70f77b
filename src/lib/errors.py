"""
Exception types raised by micron
"""


class MicronError(Exception):
    """Base class for micron errors"""
    pass


class RenderError(MicronError):
    """Raised when a directive cannot be rendered or substitution breaks"""
    pass


class SnippetError(MicronError, ValueError):
    """Raised when toolbar input cannot form a valid snippet"""
    pass


class ThemeError(MicronError):
    """Raised when theme loading or validation fails"""
    pass
