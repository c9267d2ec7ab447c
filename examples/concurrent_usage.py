"""examples/concurrent_usage.py - Scope isolation between concurrent requests.

Two requests are handled concurrently on one event loop. Their log records
interleave, yet each record carries only its own request's metadata, even
after every ``await``.

Run:
    python examples/concurrent_usage.py
"""

import asyncio
import sys

from ctxlog import LogLevel, cast_logger, init_logger, use_logger
from ctxlog.transport import StreamTransport

init_logger(transport=StreamTransport(stream=sys.stdout), level=LogLevel.info)


async def fetch_inventory(product_id: int) -> int:
    """Simulate a DB read for product stock."""
    await asyncio.sleep(0.01)
    stock = {1: 10, 2: 0, 3: 5}  # product 2 is out of stock
    use_logger().info({"msg": "fetched inventory", "product_id": product_id})
    return stock.get(product_id, 0)


async def place_order(order_id: int, product_id: int, qty: int) -> None:
    async def scoped(log):
        log.upd_meta({"order_id": order_id})
        use_logger().info({"msg": "order received", "qty": qty})
        stock = await fetch_inventory(product_id)

        if stock < qty:
            use_logger().error({"msg": "insufficient stock", "code": "out_of_stock"})
            return
        use_logger().info({"msg": "order placed"})

    await cast_logger(scoped)


async def main() -> None:
    print("=" * 60)
    print("Launching two concurrent order requests...")
    print("  order 1001: product_id=1, qty=3  -> success (stock=10)")
    print("  order 1002: product_id=2, qty=1  -> fail    (stock=0)")
    print("=" * 60)
    await asyncio.gather(place_order(1001, 1, 3), place_order(1002, 2, 1))


if __name__ == "__main__":
    asyncio.run(main())
