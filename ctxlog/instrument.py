"""instrument.py - The @traced decorator.

``@traced`` runs each call of the decorated function in its own logger scope
with one more trace segment, so every record logged during the call carries
a code that shows where it came from::

    from ctxlog import traced, use_logger

    @traced("orders")
    async def place_order(order_id):
        use_logger().info({"msg": "placing", "code": "start"})
        # code == "orders.start" (prefixed by any outer trace)

Metadata added inside the call stays inside it, as with ``cast_logger``.
"""

import inspect
from functools import wraps
from typing import Callable, Optional, Union

from .core import cast_logger
from .logger import Logger


def traced(segment: Union[str, Callable, None] = None) -> Callable:
    """Decorator that wraps each call in a new scope with a trace segment.

    Works for plain functions and ``async def`` functions. Can be applied
    bare (``@traced``, the segment is the function's ``__name__``) or with an
    explicit segment (``@traced("billing")``).

    Args:
        segment: Trace segment to append for the duration of each call.

    Returns:
        A decorator, or the wrapped function when applied bare.

    Raises:
        Any exception raised by the wrapped function, unchanged.
        LoggerNotInitializedError when called with no active scope and no
        global logger.
    """
    if callable(segment):
        return _decorate(segment, None)

    def decorator(func: Callable) -> Callable:
        return _decorate(func, segment)

    return decorator


def _decorate(func: Callable, segment: Optional[str]) -> Callable:
    name = segment or func.__name__

    if inspect.iscoroutinefunction(func):

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            def enter(log: Logger):
                log.stack(name)
                return func(*args, **kwargs)

            return await cast_logger(enter)

        return async_wrapper

    @wraps(func)
    def wrapper(*args, **kwargs):
        def enter(log: Logger):
            log.stack(name)
            return func(*args, **kwargs)

        return cast_logger(enter)

    return wrapper
