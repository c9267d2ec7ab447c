"""test_errors.py - Tests for format_error and the package exceptions.

Covers:
    - Non-exception values pass through unchanged
    - Class name, message and traceback frames are captured
    - Instance attributes are kept
    - ``__cause__`` chains are formatted recursively
"""

from ctxlog.errors import (
    CtxlogError,
    LoggerNotInitializedError,
    format_error,
    format_error_stack,
)


def _raised(exc):
    try:
        raise exc
    except BaseException as caught:
        return caught


class QuotaError(Exception):
    def __init__(self, msg, quota):
        super().__init__(msg)
        self.quota = quota


class TestFormatError:
    def test_non_exception_passes_through(self):
        payload = {"reason": "timeout"}
        assert format_error(payload) is payload
        assert format_error("text") == "text"
        assert format_error(None) is None

    def test_class_and_message(self):
        out = format_error(_raised(ValueError("bad value")))

        assert out["_class"] == "ValueError"
        assert out["_message"] == "bad value"

    def test_stack_lists_frames(self):
        out = format_error(_raised(ValueError("bad value")))

        assert isinstance(out["_stack"], list)
        assert any("_raised" in frame for frame in out["_stack"])

    def test_never_raised_exception_has_no_stack(self):
        assert format_error(ValueError("fresh"))["_stack"] is None

    def test_instance_attributes_are_kept(self):
        out = format_error(_raised(QuotaError("over quota", quota=10)))

        assert out["quota"] == 10
        assert out["_class"] == "QuotaError"

    def test_cause_is_formatted_recursively(self):
        try:
            try:
                raise KeyError("inner")
            except KeyError as inner:
                raise RuntimeError("outer") from inner
        except RuntimeError as outer:
            out = format_error(outer)

        assert out["_class"] == "RuntimeError"
        assert out["_cause"]["_class"] == "KeyError"
        assert "_cause" not in out["_cause"]

    def test_no_cause_key_without_cause(self):
        assert "_cause" not in format_error(_raised(ValueError("x")))


class TestFormatErrorStack:
    def test_none_traceback(self):
        assert format_error_stack(None) is None


class TestExceptions:
    def test_not_initialized_error_hierarchy(self):
        err = LoggerNotInitializedError()

        assert isinstance(err, CtxlogError)
        assert isinstance(err, RuntimeError)
        assert "init_logger" in str(err)
