"""TCP listener whose accept loop can be cancelled from another thread."""

from __future__ import annotations

import socket
import threading
from typing import Iterator

_WILDCARDS = {"": "127.0.0.1", "0.0.0.0": "127.0.0.1", "::": "::1"}


class CancellableTcpListener:
    """A listening socket whose ``incoming`` iterator stops once cancelled."""

    def __init__(self, address: tuple[str, int]) -> None:
        self._sock = socket.create_server(address)
        self.address: tuple[str, int] = self._sock.getsockname()[:2]
        self._canceled = threading.Event()

    def cancel(self) -> None:
        """Stop accepting connections, waking a blocked ``accept`` with a dummy connection."""
        self._canceled.set()
        host, port = self.address
        host = _WILDCARDS.get(host, host)
        with socket.create_connection((host, port)):
            pass

    def incoming(self) -> Iterator[socket.socket]:
        """Yield accepted connections until the listener is cancelled."""
        while True:
            conn, _ = self._sock.accept()
            if self._canceled.is_set():
                conn.close()
                return
            yield conn

    def close(self) -> None:
        """Close the listening socket."""
        self._sock.close()

    def __enter__(self) -> CancellableTcpListener:
        return self

    def __exit__(self, *args) -> None:
        self.close()