"""test_core.py - Tests for the global logger lifecycle and options.

Covers:
    - init_logger() installs a global logger with empty metadata
    - Options given as LoggerOptions or keyword arguments
    - Option validation (transport, format_error, level)
    - Re-initialisation replaces the fallback but not bound scopes
    - create_logger() / clone_logger() never touch the global slot
"""

import pytest

from ctxlog import (
    LoggerOptions,
    LogLevel,
    cast_logger,
    clone_logger,
    create_logger,
    format_error,
    init_logger,
    use_logger,
)
from ctxlog.context import LoggerContext


class TestInitLogger:
    def test_init_logger_returns_global_with_empty_meta(self, transport):
        root = init_logger(transport=transport, level=LogLevel.error)

        assert use_logger() is root
        assert root.meta == {}
        assert root.trace is None
        assert root.min_level is LogLevel.error

    def test_init_logger_accepts_options_object(self, transport):
        root = init_logger(LoggerOptions(transport=transport, level="debug2"))

        assert root.min_level is LogLevel.debug2
        assert root.transport is transport

    def test_init_logger_rejects_options_and_kwargs_together(self, transport):
        with pytest.raises(TypeError):
            init_logger(LoggerOptions(transport=transport), level="info")

    def test_init_logger_scenario_error_threshold(self, transport):
        """Level error: info() is dropped, error() is sent as (2, data, {})."""
        init_logger(transport=transport, level=LogLevel.error)
        use_logger().info({"msg": "ignored"})
        assert transport.calls == []

        use_logger().error({"msg": "x"})
        assert transport.calls == [(2, {"msg": "x"}, {})]

    def test_reinit_replaces_fallback(self, transport):
        first = init_logger(transport=transport)
        second = init_logger(transport=transport)

        assert first is not second
        assert use_logger() is second

    def test_reinit_does_not_affect_active_scope(self, transport):
        init_logger(transport=transport)

        def callback(log):
            init_logger(transport=transport)
            return use_logger() is log

        assert cast_logger(callback) is True

    def test_init_logger_logs_to_stdlib(self, transport, caplog):
        with caplog.at_level("DEBUG", logger="ctxlog.core"):
            init_logger(transport=transport)
            init_logger(transport=transport)

        messages = [r.getMessage() for r in caplog.records]
        assert any("replacing the global logger" in m for m in messages)


class TestLoggerOptions:
    def test_defaults(self, transport):
        opts = LoggerOptions(transport=transport)

        assert opts.level is LogLevel.info
        assert opts.format_error is format_error

    def test_level_name_is_normalised(self, transport):
        assert LoggerOptions(transport=transport, level="WARNING").level is LogLevel.warning

    def test_non_callable_transport_rejected(self):
        with pytest.raises(TypeError, match="transport"):
            LoggerOptions(transport="stderr")

    def test_non_callable_formatter_rejected(self, transport):
        with pytest.raises(TypeError, match="format_error"):
            LoggerOptions(transport=transport, format_error=None)

    def test_unknown_level_rejected(self, transport):
        with pytest.raises(ValueError):
            LoggerOptions(transport=transport, level="loud")

    def test_options_are_frozen(self, transport):
        opts = LoggerOptions(transport=transport)
        with pytest.raises(AttributeError):
            opts.level = LogLevel.debug3  # type: ignore[misc]


class TestStandaloneLoggers:
    def test_create_logger_does_not_register_global(self, transport):
        create_logger(transport=transport)
        assert not LoggerContext().has_global()

    def test_clone_logger_copies_active_logger(self, transport):
        root = init_logger(transport=transport)
        root.upd_meta({"svc": "api"})
        copy = clone_logger()
        copy.upd_meta({"svc": "worker"})

        assert copy is not root
        assert root.meta == {"svc": "api"}
        assert use_logger() is root
