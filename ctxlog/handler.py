"""handler.py - Route stdlib ``logging`` records into the active ctxlog logger.

ContextLogHandler lets code that uses plain ``logging`` (including third-party
libraries) benefit from the request metadata bound with ``cast_logger``::

    import logging
    from ctxlog import init_logger
    from ctxlog.handler import ContextLogHandler
    from ctxlog.transport import StreamTransport

    init_logger(transport=StreamTransport(), level="debug1")
    logging.getLogger().addHandler(ContextLogHandler())

    logging.getLogger("db").warning("slow query")
    # -> {"level": "warning", "request_id": "...", "msg": "slow query",
    #     "logger": "db"}
"""

import logging

from .core import use_logger
from .levels import from_logging_level
from .transport import BRIDGED_ATTR


class ContextLogHandler(logging.Handler):
    """A logging.Handler that forwards records to ``use_logger()``.

    Each record becomes ``{"msg": ..., "logger": record.name}``; when the
    record carries exception info, the exception is added under ``error``
    through the logger's error formatter. The stdlib level is mapped onto a
    ctxlog level and sent through the matching per-level method, so the
    contextual logger's own threshold still applies.

    Records emitted by ``LoggingTransport`` are ignored, which makes it safe
    to attach this handler to the same logger a LoggingTransport writes to.

    Failures (including a missing ``init_logger`` call) go through
    ``Handler.handleError`` like any other handler error.
    """

    def emit(self, record: logging.LogRecord) -> None:
        if getattr(record, BRIDGED_ATTR, False):
            return
        try:
            logger = use_logger()
            data = {"msg": record.getMessage(), "logger": record.name}
            if record.exc_info and record.exc_info[1] is not None:
                data["error"] = logger.format_error(record.exc_info[1])
            level = from_logging_level(record.levelno)
            getattr(logger, level.name)(data)
        except Exception:
            self.handleError(record)
