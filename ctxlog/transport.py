"""transport.py - Reference transports for ctxlog.

A transport is any callable accepting ``(level, data, meta)``. This module
provides a small base class and three ready-made sinks:

    StreamTransport   one JSON line per record on a stream (default: stderr).
    FileTransport     appends JSON lines to a file on disk, with rotation.
    LoggingTransport  hands records to a stdlib ``logging.Logger``.

Typical usage::

    from ctxlog import init_logger
    from ctxlog.transport import FileTransport

    init_logger(transport=FileTransport("/var/log/app.jsonl"), level="info")
"""

import json
import logging
import os
import sys
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import IO, Any, Dict, Optional

from .levels import level_name, to_logging_level

# Set on LogRecords produced by LoggingTransport so that ContextLogHandler
# does not feed them back into the contextual logger.
BRIDGED_ATTR = "ctxlog_bridged"


def render_record(level: int, data: Dict[str, Any], meta: Dict[str, Any]) -> Dict[str, Any]:
    """Combine a record into one flat dict.

    ``data`` fields win over ``meta`` fields of the same name.

    Example:
        >>> render_record(4, {"msg": "hi"}, {"request_id": "r-1"})
        {'level': 'info', 'request_id': 'r-1', 'msg': 'hi'}
    """
    return {"level": level_name(level), **meta, **data}


class Transport(ABC):
    """Base class for transports.

    Subclasses implement ``__call__``. The call happens synchronously inside
    the logging call; exceptions raised here reach the code that logged.
    ``meta`` is the logger's live dict: read it during the call, do not keep
    a reference to it.
    """

    @abstractmethod
    def __call__(self, level: int, data: Dict[str, Any], meta: Dict[str, Any]) -> None:
        """Deliver one record."""


class StreamTransport(Transport):
    """Write each record as a JSON line to a writable stream.

    Values JSON cannot encode are rendered with ``str()``.

    Attributes:
        _stream: The writable file-like object to write to.
        _show_timestamp: If True, a UTC ``time`` field is added to each line.

    Example:
        >>> import sys
        >>> transport = StreamTransport(stream=sys.stdout)
        >>> transport(4, {"msg": "ready"}, {})
        {"level": "info", "msg": "ready"}
    """

    def __init__(self, stream=None, show_timestamp: bool = False) -> None:
        """Initialise the stream transport.

        Args:
            stream: A writable file-like object. Defaults to ``sys.stderr``
                so that log output does not pollute the application's stdout.
            show_timestamp: If True, add an ISO-8601 UTC ``time`` field to
                every record.
        """
        self._stream = stream or sys.stderr
        self._show_timestamp = show_timestamp

    def __call__(self, level: int, data: Dict[str, Any], meta: Dict[str, Any]) -> None:
        print(self._format(level, data, meta), file=self._stream)

    def _format(self, level: int, data: Dict[str, Any], meta: Dict[str, Any]) -> str:
        record = render_record(level, data, meta)
        if self._show_timestamp:
            record = {"time": _utc_now(), **record}
        return json.dumps(record, ensure_ascii=False, default=str)


class FileTransport(StreamTransport):
    """Append each record as a JSON line to a file on disk.

    The file and any missing parent directories are created on first write.
    Every line carries a UTC ``time`` field.

    Attributes:
        _path (str): Absolute or relative path to the log file.
        _max_bytes (int): Soft size limit before the file is rotated.
            0 means no rotation.
        _encoding (str): File encoding. Defaults to ``"utf-8"``.

    Example:
        >>> transport = FileTransport("./app.jsonl", max_bytes=5 * 1024 * 1024)
    """

    def __init__(
        self,
        path: str,
        max_bytes: int = 0,
        encoding: str = "utf-8",
    ) -> None:
        """Initialise the file transport.

        Args:
            path: Path to the output file. Parent directories are created
                automatically if they do not exist.
            max_bytes: Soft maximum file size in bytes. Once the file reaches
                it, it is renamed to ``<path>.bak`` (overwriting any previous
                backup) and a new file is started. 0 (default) disables
                rotation.
            encoding: Character encoding for the output file.

        Raises:
            ValueError: If ``max_bytes`` is negative.
        """
        if max_bytes < 0:
            raise ValueError(f"max_bytes must be >= 0, got {max_bytes}")
        super().__init__(show_timestamp=True)
        self._path = path
        self._max_bytes = max_bytes
        self._encoding = encoding

    def __call__(self, level: int, data: Dict[str, Any], meta: Dict[str, Any]) -> None:
        line = self._format(level, data, meta)
        with self._open_for_append() as f:
            f.write(line + "\n")

    # ---------------------------------------------------------------------- #
    # Private helpers
    # ---------------------------------------------------------------------- #

    def _open_for_append(self) -> IO[str]:
        """Open the log file for one record, rolling a full file over first."""
        os.makedirs(os.path.dirname(os.path.abspath(self._path)), exist_ok=True)
        if self._max_bytes and self._size() >= self._max_bytes:
            os.replace(self._path, self._path + ".bak")
        return open(self._path, "a", encoding=self._encoding)

    def _size(self) -> int:
        try:
            return os.path.getsize(self._path)
        except FileNotFoundError:
            return 0


class LoggingTransport(Transport):
    """Forward records to a stdlib ``logging.Logger``.

    The ctxlog level is mapped onto the closest stdlib level, the ``msg``
    field (if any) becomes the log message, and the full rendered record is
    attached to the LogRecord as ``record.ctxlog``.

    Example:
        >>> init_logger(transport=LoggingTransport(logging.getLogger("app")))
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        """Initialise the transport.

        Args:
            logger: Target stdlib logger. Defaults to the ``"ctxlog"`` logger.
        """
        self._logger = logger or logging.getLogger("ctxlog")

    def __call__(self, level: int, data: Dict[str, Any], meta: Dict[str, Any]) -> None:
        levelno = to_logging_level(level)
        if not self._logger.isEnabledFor(levelno):
            return
        record = render_record(level, data, meta)
        msg = data.get("msg", data.get("code", ""))
        self._logger.log(
            levelno,
            "%s",
            msg,
            extra={"ctxlog": record, BRIDGED_ATTR: True},
        )


def _utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
