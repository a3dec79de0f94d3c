"""Hello server: answers key queries over HTTP until interrupted."""

from __future__ import annotations

import argparse
import functools
import queue
import signal
import socket

from conkit.handler import Handler
from conkit.statistics import Report, Statistics
from conkit.tcp import CancellableTcpListener
from conkit.thread_pool import ThreadPool

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 7878
POOL_SIZE = 7


def serve(listener: CancellableTcpListener, pool: ThreadPool, handler: Handler) -> Statistics:
    """Handle connections on ``pool`` until ``listener`` is cancelled; return the statistics."""
    reports: queue.SimpleQueue[Report] = queue.SimpleQueue()

    def handle(request_id: int, conn: socket.socket) -> None:
        reports.put(handler.handle_conn(request_id, conn))

    def listen() -> None:
        for request_id, conn in enumerate(listener.incoming()):
            pool.execute(functools.partial(handle, request_id, conn))

    pool.execute(listen)
    pool.join()

    stats = Statistics()
    while not reports.empty():
        report = reports.get()
        print(f"[report] {report}")
        stats.add_report(report)
    return stats


def main(argv: list[str] | None = None) -> int:
    """Run the server until Ctrl-C, then print the statistics."""
    parser = argparse.ArgumentParser(description="Hello server with a cache.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    print(f"Run `curl http://{args.host}:{args.port}/KEY` to query the server with KEY")

    with ThreadPool(POOL_SIZE) as pool, CancellableTcpListener((args.host, args.port)) as listener:
        previous = signal.signal(signal.SIGINT, lambda *_: listener.cancel())
        try:
            stats = serve(listener, pool, Handler())
        finally:
            signal.signal(signal.SIGINT, previous)

    print(f"[stat] {stats}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())