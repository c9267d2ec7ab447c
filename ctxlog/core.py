"""core.py - Global logger lifecycle and module-level helpers.

``init_logger`` is called once at startup. After that any code, however deep
in the call graph, gets the active logger with ``use_logger()``: the one bound
by the innermost enclosing ``cast_logger``/``logger_scope``, or the global
logger when no scope is active.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar

from .config import LoggerOptions
from .context import LoggerContext
from .logger import Logger

T = TypeVar("T")

_log = logging.getLogger(__name__)
_ctx = LoggerContext()


def _resolve_options(options: Optional[LoggerOptions], kwargs: dict) -> LoggerOptions:
    if options is not None and kwargs:
        raise TypeError("pass either a LoggerOptions instance or keyword options, not both")
    return options if options is not None else LoggerOptions(**kwargs)


def create_logger(options: Optional[LoggerOptions] = None, **kwargs: Any) -> Logger:
    """Build a standalone Logger with empty metadata.

    Accepts either a LoggerOptions instance or its fields as keyword
    arguments::

        create_logger(LoggerOptions(transport=sink, level="debug1"))
        create_logger(transport=sink, level="debug1")

    The logger is not registered anywhere; see ``init_logger`` for that.
    """
    opts = _resolve_options(options, kwargs)
    return Logger(opts.transport, level=opts.level, format_error=opts.format_error)


def init_logger(options: Optional[LoggerOptions] = None, **kwargs: Any) -> Logger:
    """Create the global logger and make it the fallback for ``use_logger()``.

    Calling this again replaces the global logger. Scopes that are already
    active keep the logger they were given; only later fallback lookups see
    the new one. Not safe to call concurrently from several threads.

    Returns:
        The new global logger.
    """
    logger = create_logger(options, **kwargs)
    if _ctx.has_global():
        _log.debug("ctxlog: replacing the global logger")
    _ctx.set_global(logger)
    _log.debug("ctxlog: global logger initialized (level=%s)", logger.min_level.name)
    return logger


def use_logger() -> Logger:
    """Return the logger active in the current context.

    Raises:
        LoggerNotInitializedError: If no scope is active and
            ``init_logger`` has not been called.
    """
    return _ctx.get()


def clone_logger() -> Logger:
    """Return an independent copy of the active logger."""
    return use_logger().clone()


def cast_logger(callback: Callable[[Logger], T]) -> T:
    """Run ``callback`` in a new scope derived from the active logger.

    Shorthand for ``use_logger().cast(callback)``.

    Example:
        >>> async def handle(request):
        ...     async def scoped(log):
        ...         log.upd_meta({"request_id": request.id})
        ...         return await process(request)   # use_logger() sees it
        ...     return await cast_logger(scoped)
    """
    return use_logger().cast(callback)


@contextmanager
def logger_scope() -> Iterator[Logger]:
    """Context-manager form of ``cast_logger``.

    Example:
        >>> with logger_scope() as log:
        ...     log.upd_meta({"job": "reindex"})
        ...     await reindex()
    """
    with use_logger().scope() as child:
        yield child
