import socket
from unittest import mock

from conkit.handler import Handler, expensive_computation
from conkit.statistics import Report


def _exchange(handler, request_id, payload):
    client, server = socket.socketpair()
    with client:
        client.sendall(payload)
        report = handler.handle_conn(request_id, server)
        chunks = []
        while chunk := client.recv(4096):
            chunks.append(chunk)
    return report, b"".join(chunks)


def test_valid_request_gets_result():
    handler = Handler(compute=str.upper)
    report, response = _exchange(handler, 3, b"GET /abc HTTP/1.1\r\nHost: x\r\n\r\n")
    assert response.startswith(b"HTTP/1.1 200 OK\r\n\r\n<!DOCTYPE html>")
    assert 'Result for key "abc" is "ABC"' in response.decode("utf-8")
    assert report == Report(3, "abc")


def test_invalid_request_gets_not_found():
    handler = Handler(compute=str.upper)
    report, response = _exchange(handler, 1, b"POST /abc HTTP/1.1\r\n\r\n")
    assert response.startswith(b"HTTP/1.1 404 NOT FOUND\r\n\r\n")
    assert b"<h1>Oops!</h1>" in response
    assert report == Report(1, None)


def test_results_are_cached():
    calls = []

    def compute(key):
        calls.append(key)
        return key[::-1]

    handler = Handler(compute=compute)
    for i in range(3):
        report, response = _exchange(handler, i, b"GET /key HTTP/1.1\r\n\r\n")
        assert report.key == "key"
        assert 'is "yek"' in response.decode("utf-8")
    assert calls == ["key"]


def test_expensive_computation_appends_dog():
    with mock.patch("conkit.handler.time.sleep") as sleep:
        assert expensive_computation("dog") == "dog🐕"
    sleep.assert_called_once_with(3)