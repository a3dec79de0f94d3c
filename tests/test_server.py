import socket
import threading

from conkit.handler import Handler
from conkit.server import serve
from conkit.tcp import CancellableTcpListener
from conkit.thread_pool import ThreadPool


def _request(address, payload):
    with socket.create_connection(address) as client:
        client.sendall(payload)
        chunks = []
        while chunk := client.recv(4096):
            chunks.append(chunk)
    return b"".join(chunks)


def test_serve_collects_statistics_until_cancelled():
    results = []
    with ThreadPool(4) as pool, CancellableTcpListener(("127.0.0.1", 0)) as listener:
        runner = threading.Thread(
            target=lambda: results.append(serve(listener, pool, Handler(compute=str.upper)))
        )
        runner.start()

        first = _request(listener.address, b"GET /abc HTTP/1.1\r\n\r\n")
        second = _request(listener.address, b"GET /abc HTTP/1.1\r\n\r\n")
        bad = _request(listener.address, b"garbage\r\n\r\n")

        listener.cancel()
        runner.join(timeout=10)

    assert first.startswith(b"HTTP/1.1 200 OK")
    assert first == second
    assert bad.startswith(b"HTTP/1.1 404 NOT FOUND")
    assert len(results) == 1
    assert results[0].hits == {"abc": 2, None: 1}


def test_serve_with_no_connections_has_empty_statistics():
    with ThreadPool(2) as pool, CancellableTcpListener(("127.0.0.1", 0)) as listener:
        timer = threading.Timer(0.2, listener.cancel)
        timer.start()
        try:
            stats = serve(listener, pool, Handler(compute=str.upper))
        finally:
            timer.join(timeout=5)
    assert stats.hits == {}