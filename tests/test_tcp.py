import socket
import threading

import pytest

from conkit.tcp import CancellableTcpListener


def test_accepts_connections():
    with CancellableTcpListener(("127.0.0.1", 0)) as listener:
        assert listener.address[1] > 0
        with socket.create_connection(listener.address) as client:
            client.sendall(b"hi")
            conn = next(listener.incoming())
            with conn:
                assert conn.recv(16) == b"hi"


def test_cancel_stops_iteration():
    with CancellableTcpListener(("127.0.0.1", 0)) as listener:
        timer = threading.Timer(0.2, listener.cancel)
        timer.start()
        try:
            assert list(listener.incoming()) == []
        finally:
            timer.join(timeout=5)


def test_closed_listener_cannot_accept():
    listener = CancellableTcpListener(("127.0.0.1", 0))
    listener.close()
    with pytest.raises(OSError):
        next(listener.incoming())