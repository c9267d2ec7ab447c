"""examples/background_usage.py - dispatch / timeout / interval demo.

Background work started from inside a request scope keeps that scope's
metadata, and its failures end up in the log instead of crashing the loop.

Run:
    python examples/background_usage.py
"""

import asyncio
import sys

from ctxlog import LogLevel, cast_logger, init_logger, use_logger
from ctxlog.transport import StreamTransport

init_logger(
    transport=StreamTransport(stream=sys.stdout, show_timestamp=True),
    level=LogLevel.debug1,
)


async def send_receipt() -> None:
    await asyncio.sleep(0.01)
    raise ConnectionError("mail server unreachable")


async def heartbeat() -> None:
    use_logger().debug1({"msg": "heartbeat"})


async def main() -> None:
    async def scoped(log):
        log.upd_meta({"request_id": "req-77"})
        log.dispatch(LogLevel.error, send_receipt)  # fire and forget
        log.timeout(LogLevel.warning, 50, send_receipt)  # retry once later

    await cast_logger(scoped)
    use_logger().interval(LogLevel.error, 30, heartbeat)

    await asyncio.sleep(0.12)


if __name__ == "__main__":
    asyncio.run(main())
