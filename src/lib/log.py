"""
Context-aware logging for micron, built on Loguru.

LOG() checks the verbosity of the ProgramState connected to the current
context, so library code (parser, compiler, stripper) can log without
having the state passed in.

With no state connected, as when render() or strip() are called as a
library, LOG is silent unless MICRON_DEBUG_MODE is set, which shows every
level.

Verbosity levels and the Loguru level each one logs at:
    1  INFO   progress of a CLI run
    2  DEBUG  rule and substitution counts, cap hits
    3  TRACE  one line per extracted directive

Usage:
    from .log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG("Reading source...", level=1)
    LOG(f"Extracted {n} directive(s)", level=2)
"""

from loguru import logger
from typing import Any, Iterator, Optional
from contextlib import contextmanager
from contextvars import ContextVar
import sys

from ..config import appsettings

# Connected ProgramState (or any object with a ``verbosity``)
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

LEVEL_NAMES = {1: "INFO", 2: "DEBUG", 3: "TRACE"}

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{module: <10}</cyan>:<cyan>{function: <18}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="TRACE")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Pass None to disconnect.

    Args:
        state: Object with a ``verbosity`` attribute, or None
    """
    _program_state.set(state)


@contextmanager
def state_connected(state: Any) -> Iterator[Any]:
    """
    Connect a state for the duration of a with-block.

    Example:
        with state_connected(ProgramState(verbosity=3)):
            render(text)
    """
    token = _program_state.set(state)
    try:
        yield state
    finally:
        _program_state.reset(token)


def verbosity_get() -> int:
    """Verbosity in effect for the current context (0 when silent)"""
    state = _program_state.get()
    if state is not None and hasattr(state, 'verbosity'):
        return int(state.verbosity)
    return max(LEVEL_NAMES) if appsettings.debug_mode else 0


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log a message if the current verbosity allows.

    Args:
        message: Log message
        level: Minimum verbosity required (1=normal, 2=verbose, 3=trace)
        **kwargs: Additional loguru metadata
    """
    if verbosity_get() < level:
        return
    level_name = LEVEL_NAMES.get(level, "TRACE")
    # depth=1 reports the caller's function and line, not LOG itself
    logger.opt(depth=1).log(level_name, message, **kwargs)
