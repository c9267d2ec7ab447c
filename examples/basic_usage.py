"""examples/basic_usage.py - ctxlog integration demo.

Demonstrates the two ways of opening a scope:
    Scenario A - cast_logger() with an async callback, per request
    Scenario B - @traced on the functions of a call chain

Run:
    python examples/basic_usage.py
"""

import asyncio
import sys

from ctxlog import LogLevel, cast_logger, init_logger, traced, use_logger
from ctxlog.transport import StreamTransport

# ---------------------------------------------------------------------------
# Setup: one call at startup
# ---------------------------------------------------------------------------
init_logger(transport=StreamTransport(stream=sys.stdout), level=LogLevel.debug1)


# ===========================================================================
# Scenario A: cast_logger() at the request entry point
# ===========================================================================


async def get_balance(user_id: int) -> int:
    """Simulate a DB balance query. No logger parameter needed."""
    await asyncio.sleep(0.01)
    use_logger().debug1({"msg": "queried balance", "user_id": user_id})
    return 3_000


async def pay(user_id: int, amount: int) -> None:
    use_logger().info({"msg": "payment attempt", "amount": amount})
    balance = await get_balance(user_id)

    if balance < amount:
        use_logger().error({"msg": "insufficient funds", "code": "insufficient_funds"})
        return

    use_logger().info({"msg": "payment successful"})


async def handle_request(request_id: str, user_id: int, amount: int) -> None:
    async def scoped(log):
        log.upd_meta({"request_id": request_id, "user_id": user_id})
        log.stack("payments")
        await pay(user_id, amount)

    await cast_logger(scoped)


# ===========================================================================
# Scenario B: @traced adds one trace segment per call
# ===========================================================================


@traced("inventory")
async def reserve(product_id: int) -> bool:
    use_logger().info({"msg": "reserving", "code": "reserve", "product_id": product_id})
    return True


@traced("orders")
async def place_order(order_id: int) -> None:
    use_logger().upd_meta({"order_id": order_id})
    await reserve(product_id=7)
    use_logger().info({"msg": "order placed", "code": "placed"})


# ---------------------------------------------------------------------------
# Run both scenarios
# ---------------------------------------------------------------------------
async def main() -> None:
    print("=" * 60)
    print("Scenario A: cast_logger() per request")
    print("=" * 60)
    await handle_request("req-1", user_id=101, amount=5_000)

    print()
    print("=" * 60)
    print("Scenario B: @traced call chain")
    print("=" * 60)
    await place_order(order_id=42)

    print()
    use_logger().info({"msg": "outside any scope: no request metadata"})


if __name__ == "__main__":
    asyncio.run(main())
