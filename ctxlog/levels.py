"""levels.py - Severity levels for ctxlog.

The registry is the single source of truth for the eight severity levels.
Logger uses it to build its per-level methods and transports use it to render
a human-readable level name.

Lower numeric value means higher severity::

    emergency(0) < alert(1) < error(2) < warning(3) < info(4)
        < debug1(5) < debug2(6) < debug3(7)
"""

import logging
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping, Union


class LogLevel(IntEnum):
    """Ordered severity levels, 0 being the most severe."""

    emergency = 0
    alert = 1
    error = 2
    warning = 3
    info = 4
    debug1 = 5
    debug2 = 6
    debug3 = 7


LEVEL_NAMES: Mapping[LogLevel, str] = MappingProxyType(
    {level: level.name for level in LogLevel}
)

# Conventional TRACE level below logging.DEBUG.
_LOGGING_TRACE = 5

# Highest stdlib level first; the first threshold <= levelno wins.
_FROM_LOGGING = (
    (logging.CRITICAL, LogLevel.alert),
    (logging.ERROR, LogLevel.error),
    (logging.WARNING, LogLevel.warning),
    (logging.INFO, LogLevel.info),
    (logging.DEBUG, LogLevel.debug1),
    (_LOGGING_TRACE, LogLevel.debug2),
)

_TO_LOGGING: Mapping[LogLevel, int] = MappingProxyType(
    {
        LogLevel.emergency: logging.CRITICAL,
        LogLevel.alert: logging.CRITICAL,
        LogLevel.error: logging.ERROR,
        LogLevel.warning: logging.WARNING,
        LogLevel.info: logging.INFO,
        LogLevel.debug1: logging.DEBUG,
        LogLevel.debug2: logging.DEBUG,
        LogLevel.debug3: logging.DEBUG,
    }
)


def level_name(level: int) -> str:
    """Return the canonical lowercase name of ``level``.

    Raises:
        ValueError: If ``level`` is not one of the registered levels.
    """
    return LEVEL_NAMES[LogLevel(level)]


def parse_level(value: Union[LogLevel, int, str]) -> LogLevel:
    """Normalise a level given as a LogLevel, an int or a name.

    Names are matched case-insensitively, so ``"INFO"`` and ``"info"`` are
    equivalent.

    Raises:
        ValueError: If ``value`` does not name a registered level.

    Example:
        >>> parse_level("warning")
        <LogLevel.warning: 3>
        >>> parse_level(2)
        <LogLevel.error: 2>
    """
    if isinstance(value, str):
        try:
            return LogLevel[value.strip().lower()]
        except KeyError:
            raise ValueError(f"unknown log level name: {value!r}") from None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"log level must be an int or a name, got {value!r}")
    return LogLevel(value)


def to_logging_level(level: int) -> int:
    """Map a ctxlog level onto the closest stdlib ``logging`` level."""
    return _TO_LOGGING[LogLevel(level)]


def from_logging_level(levelno: int) -> LogLevel:
    """Map a stdlib ``logging`` level number onto a ctxlog level."""
    for threshold, level in _FROM_LOGGING:
        if levelno >= threshold:
            return level
    return LogLevel.debug3
