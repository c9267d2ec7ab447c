"""errors.py - Exceptions raised by ctxlog and the default error formatter.

``format_error`` turns a caught exception into plain data so it can travel
inside a log record's ``error`` field. It is the default formatter used by
``Logger.dispatch`` and friends; applications may supply their own through
``LoggerOptions.format_error``.
"""

import traceback
from types import TracebackType
from typing import Any, Dict, List, Optional


class CtxlogError(Exception):
    """Base class for errors raised by ctxlog itself."""


class LoggerNotInitializedError(CtxlogError, RuntimeError):
    """Raised when a logger is requested before ``init_logger`` was called.

    Only raised when no scope is active either; code running inside a
    ``cast_logger`` scope always resolves the scoped logger.
    """

    def __init__(self) -> None:
        super().__init__(
            "ctxlog global logger is not initialized; call init_logger() "
            "at startup or run inside a cast_logger() scope"
        )


def format_error_stack(tb: Optional[TracebackType]) -> Optional[List[str]]:
    """Render a traceback as a list of frame descriptions.

    Returns:
        One stripped string per frame, innermost last, or ``None`` when the
        exception carries no traceback (it was never raised).
    """
    if tb is None:
        return None
    return [frame.strip() for frame in traceback.format_tb(tb)]


def format_error(error: Any) -> Any:
    """Convert an exception into a plain, loggable dict.

    The result holds the exception's own instance attributes plus:

        ``_class``   the exception class name
        ``_message`` ``str(error)``
        ``_stack``   see ``format_error_stack``
        ``_cause``   the formatted ``__cause__``, only when one is set

    Values that are not exceptions are returned unchanged.

    Example:
        >>> format_error(ValueError("bad"))["_class"]
        'ValueError'
        >>> format_error("plain")
        'plain'
    """
    if not isinstance(error, BaseException):
        return error

    output: Dict[str, Any] = dict(getattr(error, "__dict__", {}))
    output["_class"] = type(error).__name__
    output["_message"] = str(error)
    output["_stack"] = format_error_stack(error.__traceback__)
    if error.__cause__ is not None:
        output["_cause"] = format_error(error.__cause__)
    return output
