"""logger.py - The contextual Logger entity.

A Logger carries mutable metadata and an optional trace code, and forwards
every accepted record to a shared transport::

    transport(level, data, meta)

Loggers are cheap to clone. ``clone()`` and ``cast()`` produce a child with
its own copy of the metadata, so a child can be enriched (``upd_meta``,
``stack``) without the parent or any sibling ever seeing the change.

The ``dispatch``/``timeout``/``interval`` helpers run coroutines in the
background on the running asyncio loop and turn their failures into log
records instead of letting them escape.
"""

import asyncio
from contextlib import contextmanager
from functools import partial
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterator,
    Optional,
    Set,
    TypeVar,
)

from .context import LoggerContext
from .errors import format_error as default_format_error
from .levels import LEVEL_NAMES, LogLevel

Data = Dict[str, Any]
Transport = Callable[[LogLevel, Data, Data], Any]
Action = Callable[[], Awaitable[Any]]
ErrorFormatter = Callable[[Any], Any]

T = TypeVar("T")

TRACE_SEPARATOR = "."

# Lower bound for interval periods; a 0 period would reschedule on every
# loop iteration.
MIN_INTERVAL_MS = 1

_ctx = LoggerContext()

# The event loop only keeps weak references to tasks; dispatched actions are
# held here until they finish.
_background_tasks: Set["asyncio.Future[Any]"] = set()


def _noop(data: Data) -> None:
    pass


class Logger:
    """A logger with its own metadata, bound to a shared transport.

    The per-level methods (``emergency`` ... ``debug3``) are bound once in
    ``__init__``: levels at or above the threshold call ``log``, the others
    are no-ops that never build or send anything.

    Attributes:
        meta (dict): Live metadata sent with every record. Treat as read-only;
            use ``upd_meta()`` to change it.
        trace (Optional[str]): Dot-separated trace code, ``None`` until the
            first ``stack()`` call.
        min_level (LogLevel): Least severe level that is still sent.

    Example:
        >>> log = Logger(print_transport, level=LogLevel.info)
        >>> log.upd_meta({"request_id": "r-1"})
        >>> log.stack("billing")
        >>> log.info({"msg": "charged", "code": "ok"})
        # transport receives (info, {"msg": "charged", "code": "billing.ok"},
        #                     {"request_id": "r-1"})
    """

    emergency: Callable[[Data], None]
    alert: Callable[[Data], None]
    error: Callable[[Data], None]
    warning: Callable[[Data], None]
    info: Callable[[Data], None]
    debug1: Callable[[Data], None]
    debug2: Callable[[Data], None]
    debug3: Callable[[Data], None]

    def __init__(
        self,
        transport: Transport,
        level: LogLevel = LogLevel.info,
        format_error: ErrorFormatter = default_format_error,
        meta: Optional[Data] = None,
        trace: Optional[str] = None,
    ) -> None:
        """Create a Logger.

        Args:
            transport: Sink called as ``transport(level, data, meta)`` for
                every accepted record. Shared, never copied.
            level: Minimum severity sent by the per-level methods. Fixed for
                the lifetime of the logger.
            format_error: Converts exceptions caught by ``dispatch`` and
                ``timeout`` into plain data.
            meta: Initial metadata. Taken over as-is; ``clone()`` passes in
                a fresh copy.
            trace: Initial trace code.
        """
        self._transport = transport
        self._min_level = LogLevel(level)
        self._format_error = format_error
        self._meta: Data = {} if meta is None else meta
        self._trace = trace

        for lvl, name in LEVEL_NAMES.items():
            method = partial(self.log, lvl) if lvl <= self._min_level else _noop
            setattr(self, name, method)

    @property
    def meta(self) -> Data:
        return self._meta

    @property
    def trace(self) -> Optional[str]:
        return self._trace

    @property
    def min_level(self) -> LogLevel:
        return self._min_level

    @property
    def transport(self) -> Transport:
        return self._transport

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"Logger(level={self._min_level.name}, trace={self._trace!r}, "
            f"meta={self._meta!r})"
        )

    # ---------------------------------------------------------------------- #
    # Records
    # ---------------------------------------------------------------------- #

    def log(self, level: LogLevel, data: Data) -> None:
        """Send one record to the transport, without level filtering.

        When a trace code is set it is merged into ``data["code"]``: the
        trace becomes the code if none was given, otherwise it is prefixed
        (``"trace.code"``). The caller's dict is never modified; a copy is
        sent instead.

        Transport exceptions are not caught.
        """
        if self._trace is not None:
            code = data.get("code")
            data = dict(data)
            data["code"] = (
                self._trace if code is None else f"{self._trace}{TRACE_SEPARATOR}{code}"
            )
        self._transport(level, data, self._meta)

    def format_error(self, error: Any) -> Any:
        """Apply the configured error formatter to ``error``."""
        return self._format_error(error)

    # ---------------------------------------------------------------------- #
    # State
    # ---------------------------------------------------------------------- #

    def upd_meta(self, meta: Data) -> None:
        """Shallow-merge ``meta`` into this logger's metadata, in place.

        Nested values are replaced, never merged.
        """
        self._meta.update(meta)

    def stack(self, segment: str) -> None:
        """Append ``segment`` to the trace code.

        Example:
            >>> log.stack("api")
            >>> log.stack("orders")
            >>> log.trace
            'api.orders'
        """
        if self._trace is None:
            self._trace = segment
        else:
            self._trace = f"{self._trace}{TRACE_SEPARATOR}{segment}"

    def clone(self) -> "Logger":
        """Return an independent copy with the same transport and level."""
        return Logger(
            self._transport,
            level=self._min_level,
            format_error=self._format_error,
            meta=dict(self._meta),
            trace=self._trace,
        )

    # ---------------------------------------------------------------------- #
    # Scopes
    # ---------------------------------------------------------------------- #

    def cast(self, callback: Callable[["Logger"], T]) -> T:
        """Run ``callback`` with a clone of this logger as the active one.

        Everything the callback does, including coroutines it awaits and tasks
        it creates, resolves the clone through ``use_logger()``. The previous
        binding is active again as soon as this returns.

        If ``callback`` is an ``async def`` function the returned coroutine
        must be awaited; its body runs with the clone bound.

        Returns:
            The callback's return value.
        """
        return _ctx.run(self.clone(), callback)

    @contextmanager
    def scope(self) -> Iterator["Logger"]:
        """Bind a clone of this logger for the body of a ``with`` block.

        Example:
            >>> with use_logger().scope() as log:
            ...     log.upd_meta({"job": "nightly"})
            ...     await run_job()   # sees {"job": "nightly"}
        """
        with _ctx.bind(self.clone()) as child:
            yield child

    # ---------------------------------------------------------------------- #
    # Background execution
    # ---------------------------------------------------------------------- #

    def dispatch(self, level: LogLevel, action: Action) -> None:
        """Start ``action()`` in the background and log it if it fails.

        The action runs as a Task on the running loop, in a copy of the
        current context. This call returns immediately. A failure, whether
        raised while starting the action or later from the task, is logged
        at ``level`` as ``{"code": "dispatch_failed", "error": ...}`` using
        this logger's state at the time the failure is seen. A cancelled
        task is not logged.
        """
        try:
            asyncio.get_running_loop()
            task = asyncio.ensure_future(action())
        except Exception as exc:
            self._log_failure(level, "dispatch_failed", exc)
            return

        _background_tasks.add(task)
        task.add_done_callback(partial(self._on_dispatch_done, level))

    def timeout(self, level: LogLevel, delay_ms: float, action: Action) -> None:
        """Dispatch ``action`` once, after ``delay_ms`` milliseconds.

        A negative (or NaN) delay is treated as 0, so the action runs on the
        next loop iteration. Scheduling errors (non-numeric delay, no running
        loop) are logged right away as ``{"code": "timeout_failed", ...}``.
        """
        try:
            delay = delay_ms / 1000 if delay_ms > 0 else 0
            loop = asyncio.get_running_loop()
            loop.call_later(delay, self.dispatch, level, action)
        except Exception as exc:
            self._log_failure(level, "timeout_failed", exc)

    def interval(self, level: LogLevel, period_ms: float, action: Action) -> None:
        """Dispatch ``action`` now and then every ``period_ms`` milliseconds.

        The first dispatch always happens, whatever the period. The next run
        is scheduled as soon as the current dispatch call returns, so the
        period is fixed and does not wait for a slow action to finish. There
        is no way to stop it; it runs until the loop closes.

        Periods below ``MIN_INTERVAL_MS`` (including 0, negative and NaN) are
        raised to it. If the repetition cannot be scheduled (non-numeric
        period, no running loop) the failure is logged as
        ``{"code": "interval_failed", ...}`` after the first dispatch.
        """
        self.dispatch(level, action)
        try:
            period = period_ms if period_ms >= MIN_INTERVAL_MS else MIN_INTERVAL_MS
            loop = asyncio.get_running_loop()
        except Exception as exc:
            self._log_failure(level, "interval_failed", exc)
            return

        delay = period / 1000

        def launch() -> None:
            self.dispatch(level, action)
            loop.call_later(delay, launch)

        loop.call_later(delay, launch)

    # ---------------------------------------------------------------------- #
    # Private helpers
    # ---------------------------------------------------------------------- #

    def _on_dispatch_done(self, level: LogLevel, task: "asyncio.Future[Any]") -> None:
        _background_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log_failure(level, "dispatch_failed", exc)

    def _log_failure(self, level: LogLevel, code: str, exc: BaseException) -> None:
        self.log(level, {"code": code, "error": self._format_error(exc)})
