"""examples/multithreaded_usage.py - One shared logger, many threads.

All threads write through the same Logger. Lines from different threads may
interleave, but a header is never separated from the body line it belongs
to.

Run:
    python examples/multithreaded_usage.py
"""

import sys
import threading
import time

import qtrace
from qtrace import q, trace

# Write to stdout instead of /tmp/q and repeat headers quickly.
qtrace.configure(sink=sys.stdout, header_interval=0.05)


@trace
def fetch_inventory(product_id: int) -> int:
    time.sleep(0.01)  # simulate DB latency
    stock = {1: 10, 2: 0, 3: 5}
    return stock.get(product_id, 0)


def place_order(order_id: int, product_id: int, qty: int) -> None:
    q(order_id, expr="order_id")
    stock = fetch_inventory(product_id)
    if q(stock < qty, expr="stock < qty"):
        q("out of stock")
        return
    q("order placed")


if __name__ == "__main__":
    threads = [
        threading.Thread(target=place_order, args=(1001, 1, 3), name="Thread-A"),
        threading.Thread(target=place_order, args=(1002, 2, 1), name="Thread-B"),
        threading.Thread(target=place_order, args=(1003, 3, 5), name="Thread-C"),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
