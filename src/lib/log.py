"""
Logging for the codec, on Loguru

LOG() looks up the CodecState connected to the current context and emits
only when that state's verbosity reaches the message level. Codec functions
called outside a pipeline have no connected state and stay silent, unless
debug mode (LESSONMARK_DEBUG_MODE=true) is on, in which case everything is
logged with the emitting module's name.

Usage:
    from lessonmark.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)          # once per pipeline stage
    LOG("Shown at verbosity >= 2", level=2)
    LOG("Unknown tag <aside>", level=1, warning=True)
"""

import sys
from contextvars import ContextVar
from typing import Any, Optional

from loguru import logger

from ..config import appsettings

# CodecState connected in the current context
_codec_state: ContextVar[Optional[Any]] = ContextVar('codec_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger_debugFormat = (
    "<green>{time:HH:mm:ss.SSS}</green> │ "
    "<level>{level: <7}</level> │ "
    "<magenta>{name}</magenta>:<cyan>{function}</cyan>:<cyan>{line}</cyan> ║ "
    "<level>{message}</level>"
)


def logger_configure(debug: bool = False) -> int:
    """
    Replace Loguru's default handler with the codec's stderr sink

    Args:
        debug: Use the detailed format with module names

    Returns:
        Loguru handler id of the new sink
    """
    logger.remove()
    return logger.add(
        sys.stderr,
        format=logger_debugFormat if debug else logger_format,
        level="DEBUG",
    )


logger_configure(appsettings.debug_mode)


def state_connectToLogger(state: Any) -> None:
    """
    Connect a CodecState to the logging context

    Args:
        state: Object with a `verbosity` attribute (a CodecState)
    """
    _codec_state.set(state)


def state_disconnectFromLogger() -> None:
    """Detach any connected state; LOG() is silent afterwards"""
    _codec_state.set(None)


def LOG_enabled(level: int) -> bool:
    if appsettings.debug_mode:
        return True
    state = _codec_state.get()
    return state is not None and getattr(state, 'verbosity', 0) >= level


def LOG(message: str, level: int = 1, warning: bool = False, **kwargs: Any) -> None:
    """
    Log message if the connected state's verbosity allows

    Args:
        message: Log message
        level: Minimum verbosity (1=normal, 2=verbose, 3=trace)
        warning: Emit at WARNING instead of DEBUG
        **kwargs: Additional loguru metadata

    Verbosity 0 silences everything, including warnings.
    """
    if not LOG_enabled(level):
        return

    emitter = logger.opt(depth=1)
    if warning:
        emitter.warning(message, **kwargs)
    else:
        emitter.debug(message, **kwargs)
