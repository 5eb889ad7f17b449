"""
Centralized logging using Loguru with context-aware verbosity.

The LOG() helper checks the verbosity of whatever state object has been
connected to the current context, so library code (elements, the parser
facade, the compiler) can log without being handed a state explicitly.
When nothing is connected, LOG() is silent unless MARKSTYLE_DEBUG_MODE is
set, so embedding markstyle as a library produces no output by default.

Usage:
    from markstyle.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)        # once, at the top of the CLI pipeline
    LOG("Parsing document...", level=1)
    LOG("bold: 3 matches", level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

from ..config import appsettings

# State object (anything with a ``verbosity`` attribute) for the current context
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Make ``state.verbosity`` govern LOG() calls in this context.

    Args:
        state: Object with an integer ``verbosity`` attribute (ProgramState)
    """
    _program_state.set(state)


def verbosity_get() -> int:
    """Verbosity of the connected state; without one, 3 in debug mode and 0 otherwise"""
    state = _program_state.get()
    if state is None:
        return 3 if appsettings.debug_mode else 0
    return getattr(state, 'verbosity', 0)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if the connected state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required
        **kwargs: Additional loguru metadata

    Verbosity levels:
        1 = Normal output (default)
        2 = Verbose (-v): pipeline stages, element list
        3 = Debug (-vv): per-element match counts
    """
    if verbosity_get() >= level:
        logger.opt(depth=1).debug(message, **kwargs)
