"""Shared fixtures for the ctxlog test suite."""

from typing import Any, Dict, List, Tuple

import pytest

from ctxlog.context import LoggerContext


class RecordingTransport:
    """Transport that records every call.

    ``meta`` is copied at call time: the logger passes its live dict, so a
    plain reference would show later ``upd_meta`` changes.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[int, Dict[str, Any], Dict[str, Any]]] = []

    def __call__(self, level, data, meta) -> None:
        self.calls.append((level, data, dict(meta)))

    @property
    def codes(self) -> List[Any]:
        return [data.get("code") for _, data, _ in self.calls]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture(autouse=True)
def reset_global_logger():
    """Every test starts and ends without a global logger."""
    LoggerContext._global = None
    yield
    LoggerContext._global = None
