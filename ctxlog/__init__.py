"""ctxlog/__init__.py - Public API for the ctxlog package.

ctxlog is a structured logger whose metadata follows the logical flow of an
operation across ``await`` points and spawned tasks. Set request metadata once
at the entry point; every record logged below it, at any depth, carries it.

Quick start:
    from ctxlog import init_logger, cast_logger, use_logger
    from ctxlog.transport import StreamTransport

    # 1. Once at startup
    init_logger(transport=StreamTransport(), level="info")

    # 2. At the entry point of each request
    async def handle(request):
        async def scoped(log):
            log.upd_meta({"request_id": request.id})
            await load_order(request.order_id)
        await cast_logger(scoped)

    # 3. Anywhere below, no logger parameter needed
    async def load_order(order_id):
        use_logger().info({"msg": "loading order", "order_id": order_id})
        # -> {"level": "info", "request_id": "...", "msg": "loading order", ...}

Exported names:
    init_logger:   Create the global fallback logger.
    use_logger:    The logger active in the current context.
    cast_logger:   Run a callback in a new scope derived from the active logger.
    logger_scope:  Context-manager form of cast_logger.
    clone_logger:  Independent copy of the active logger.
    create_logger: Build a standalone Logger without registering it.
    traced:        Decorator running each call in a scope with a trace segment.
    Logger, LogLevel, LoggerOptions, format_error, LoggerNotInitializedError.
"""

from .config import LoggerOptions
from .core import (
    cast_logger,
    clone_logger,
    create_logger,
    init_logger,
    logger_scope,
    use_logger,
)
from .errors import CtxlogError, LoggerNotInitializedError, format_error
from .instrument import traced
from .levels import LEVEL_NAMES, LogLevel, level_name, parse_level
from .logger import Logger

__all__ = [
    "init_logger",
    "use_logger",
    "cast_logger",
    "logger_scope",
    "clone_logger",
    "create_logger",
    "traced",
    "Logger",
    "LogLevel",
    "LEVEL_NAMES",
    "level_name",
    "parse_level",
    "LoggerOptions",
    "format_error",
    "CtxlogError",
    "LoggerNotInitializedError",
]
__version__ = "0.1.0"
