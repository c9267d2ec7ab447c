"""test_instrument.py - Tests for the @traced decorator.

Covers:
    - Bare @traced uses the function name as the trace segment
    - @traced("segment") uses the given segment
    - Nested decorated calls accumulate segments
    - Explicit codes are prefixed by the trace
    - Metadata set inside a decorated call stays inside it
    - Async functions keep the scope across awaits
    - Return values, exceptions and functools metadata are preserved
"""

import asyncio

import pytest

from ctxlog import LoggerNotInitializedError, init_logger, traced, use_logger


class TestTracedSync:
    def test_bare_decorator_uses_function_name(self, transport):
        init_logger(transport=transport)

        @traced
        def checkout():
            use_logger().info({"msg": "x"})

        checkout()
        assert transport.codes == ["checkout"]

    def test_explicit_segment(self, transport):
        init_logger(transport=transport)

        @traced("billing")
        def charge():
            use_logger().info({"msg": "x", "code": "ok"})

        charge()
        assert transport.codes == ["billing.ok"]

    def test_nested_calls_accumulate(self, transport):
        init_logger(transport=transport)

        @traced("inner")
        def inner():
            use_logger().info({"msg": "deep"})

        @traced("outer")
        def outer():
            inner()
            use_logger().info({"msg": "shallow"})

        outer()
        use_logger().info({"msg": "top"})

        assert transport.codes == ["outer.inner", "outer", None]

    def test_meta_stays_inside_call(self, transport):
        root = init_logger(transport=transport)

        @traced
        def handler():
            use_logger().upd_meta({"user": "u-1"})

        handler()
        assert root.meta == {}

    def test_return_value_and_exception_preserved(self, transport):
        init_logger(transport=transport)

        @traced
        def double(x):
            return x * 2

        @traced
        def fail():
            raise ValueError("nope")

        assert double(4) == 8
        with pytest.raises(ValueError, match="nope"):
            fail()

    def test_wraps_preserves_metadata(self):
        @traced("seg")
        def documented():
            """Docstring."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."

    def test_requires_logger(self):
        @traced
        def orphan():
            pass

        with pytest.raises(LoggerNotInitializedError):
            orphan()


class TestTracedAsync:
    @pytest.mark.asyncio
    async def test_async_function_keeps_scope_across_awaits(self, transport):
        init_logger(transport=transport)

        @traced("worker")
        async def work(job_id):
            use_logger().upd_meta({"job": job_id})
            await asyncio.sleep(0)
            use_logger().info({"msg": "done", "code": "finish"})
            return job_id

        assert await work("j-1") == "j-1"
        use_logger().info({"msg": "after"})

        assert transport.calls[0][1]["code"] == "worker.finish"
        assert transport.calls[0][2] == {"job": "j-1"}
        assert transport.calls[1][2] == {}

    @pytest.mark.asyncio
    async def test_concurrent_async_calls_are_isolated(self, transport):
        init_logger(transport=transport)

        @traced
        async def handle(rid, delay):
            use_logger().upd_meta({"rid": rid})
            await asyncio.sleep(delay)
            use_logger().info({"msg": rid})

        await asyncio.gather(handle("a", 0.01), handle("b", 0))

        for _, data, meta in transport.calls:
            assert meta == {"rid": data["msg"]}

    @pytest.mark.asyncio
    async def test_async_exception_propagates(self, transport):
        init_logger(transport=transport)

        @traced
        async def broken():
            await asyncio.sleep(0)
            raise KeyError("missing")

        with pytest.raises(KeyError):
            await broken()
