"""config.py - Initialisation options for ctxlog."""

from dataclasses import dataclass
from typing import Any, Callable, Union

from .errors import format_error as default_format_error
from .levels import LogLevel, parse_level


@dataclass(frozen=True)
class LoggerOptions:
    """Options recognised by ``create_logger`` and ``init_logger``.

    Attributes:
        transport: Called as ``transport(level, data, meta)`` for every
            accepted record.
        format_error: Converts exceptions caught by the background helpers
            into plain data. Defaults to ``ctxlog.errors.format_error``.
        level: Minimum severity sent. Accepts a LogLevel, an int or a level
            name; stored as a LogLevel. Defaults to ``LogLevel.info``.

    Raises:
        TypeError: If ``transport`` or ``format_error`` is not callable.
        ValueError: If ``level`` does not name a registered level.
    """

    transport: Callable[..., Any]
    format_error: Callable[[Any], Any] = default_format_error
    level: Union[LogLevel, int, str] = LogLevel.info

    def __post_init__(self) -> None:
        if not callable(self.transport):
            raise TypeError(f"transport must be callable, got {self.transport!r}")
        if not callable(self.format_error):
            raise TypeError(
                f"format_error must be callable, got {self.format_error!r}"
            )
        object.__setattr__(self, "level", parse_level(self.level))
