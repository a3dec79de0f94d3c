"""Request handler for the hello server, backed by a cache."""

from __future__ import annotations

import re
import socket
import time
from typing import Callable

from conkit.cache import Cache
from conkit.statistics import Report

OK_PAGE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <title>Hello!</title>
  </head>
  <body>
    <p>Result for key "{key}" is "{result}"</p>
  </body>
</html>"""

NOT_FOUND_PAGE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <title>Hello!</title>
  </head>
  <body>
    <h1>Oops!</h1>
    <p>Sorry, I don't know what you're asking for.</p>
  </body>
</html>"""

_REQUEST = re.compile(r"GET /(?P<key>\w+) HTTP/1.1\r\n")


def expensive_computation(key: str) -> str:
    """Compute the result for ``key``; takes a few seconds."""
    print(f"[handler] doing computation for key: {key}")
    time.sleep(3)
    return f"{key}🐕"


class Handler:
    """Answers requests for keys, caching each key's result."""

    def __init__(self, compute: Callable[[str], str] = expensive_computation) -> None:
        self.compute = compute
        self.cache: Cache[str, str] = Cache()

    def handle_conn(self, request_id: int, stream: socket.socket) -> Report:
        """Read one request from ``stream``, answer it, close it and report the key."""
        with stream:
            data = stream.recv(512)
            match = _REQUEST.search(data.decode("utf-8", "replace"))
            key = match["key"] if match else None
            if key is not None:
                result = self.cache.get_or_insert_with(key, self.compute)
                page = OK_PAGE.replace("{key}", key).replace("{result}", result)
                response = f"HTTP/1.1 200 OK\r\n\r\n{page}"
            else:
                response = f"HTTP/1.1 404 NOT FOUND\r\n\r\n{NOT_FOUND_PAGE}"
            stream.sendall(response.encode("utf-8"))
        return Report(request_id, key)