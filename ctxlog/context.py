"""context.py - Binding of a Logger to the current execution context.

LoggerContext keeps two pieces of state:

    Scoped logger:  The Logger bound to the current context. Stored in a
                    ``contextvars.ContextVar`` so every asyncio Task (and every
                    thread) sees its own binding, and a binding made before an
                    ``await`` is still in place after it resumes.

    Global logger:  The process-wide fallback created by ``init_logger``. Used
                    whenever no scope is active.

Tasks spawned with ``asyncio.create_task`` copy the context at creation time,
so work started from inside a scope keeps that scope's logger even after the
scope itself has returned.
"""

import asyncio
import contextvars
import inspect
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional, TypeVar

from .errors import LoggerNotInitializedError

if TYPE_CHECKING:
    from .logger import Logger

T = TypeVar("T")


class LoggerContext:
    """Resolves and binds the active Logger for the current context.

    Like the ContextVar it wraps, the class holds no per-instance state:
    every LoggerContext instance reads and writes the same class-level
    ContextVar and global slot.

    Attributes:
        _current (ContextVar[Logger]): The scoped logger, unset outside any
            scope.
        _global (Optional[Logger]): The fallback logger, ``None`` until
            ``set_global()`` is called.

    Example:
        >>> ctx = LoggerContext()
        >>> ctx.set_global(root)
        >>> ctx.get() is root
        True
        >>> with ctx.bind(child):
        ...     ctx.get() is child
        True
    """

    _current: "contextvars.ContextVar[Logger]" = contextvars.ContextVar(
        "ctxlog_logger"
    )
    _global: Optional["Logger"] = None

    def get(self) -> "Logger":
        """Return the scoped logger, falling back to the global one.

        Raises:
            LoggerNotInitializedError: If no scope is active and no global
                logger has been set.
        """
        try:
            return self._current.get()
        except LookupError:
            return self.get_global()

    def get_global(self) -> "Logger":
        """Return the global logger.

        Raises:
            LoggerNotInitializedError: If ``set_global()`` was never called.
        """
        logger = LoggerContext._global
        if logger is None:
            raise LoggerNotInitializedError()
        return logger

    def has_global(self) -> bool:
        return LoggerContext._global is not None

    def set_global(self, logger: Optional["Logger"]) -> None:
        """Replace the global logger. Passing ``None`` clears it."""
        LoggerContext._global = logger

    @contextmanager
    def bind(self, logger: "Logger") -> Iterator["Logger"]:
        """Bind ``logger`` for the duration of a ``with`` block.

        The previous binding (or the lack of one) is restored on exit, on
        both the normal and the exceptional path.
        """
        token = self._current.set(logger)
        try:
            yield logger
        finally:
            self._current.reset(token)

    def run(self, logger: "Logger", callback: Callable[["Logger"], T]) -> T:
        """Call ``callback(logger)`` with ``logger`` bound as the active one.

        The callback runs in a copy of the current context, so neither the
        binding nor any other ContextVar it sets is visible to the caller
        once this returns.

        If the callback returns a coroutine (i.e. it is an ``async def``
        function), the coroutine has not run yet. It is wrapped so that its
        body runs as a Task started in that same copied context whenever the
        wrapper is awaited. Writes made across the awaits stay inside the
        copy, exactly as for a synchronous callback.

        Returns:
            Whatever the callback returns, or the wrapping coroutine.
        """
        ctx = contextvars.copy_context()
        result = ctx.run(self._call_bound, logger, callback)
        if inspect.iscoroutine(result):
            return self._await_in(ctx, result)  # type: ignore[return-value]
        return result

    # ---------------------------------------------------------------------- #
    # Private helpers
    # ---------------------------------------------------------------------- #

    def _call_bound(self, logger: "Logger", callback: Callable[["Logger"], T]) -> T:
        self._current.set(logger)
        return callback(logger)

    async def _await_in(self, ctx: contextvars.Context, coro: Any) -> Any:
        # The Task copies ``ctx`` at creation; cancelling the awaiting task
        # cancels it too.
        task = ctx.run(asyncio.ensure_future, coro)
        return await task
