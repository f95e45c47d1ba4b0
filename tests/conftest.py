import socket
import threading

import pytest

from server import WebSocketServer
from wsutil.observer import Observer


class RecordingObserver(Observer):
    def __init__(self):
        self.keys = []
        self.messages = []
        self.failures = []

    def connected(self, key):
        self.keys.append(key)

    def received(self, message):
        self.messages.append(message)

    def failed(self, client_address, exc):
        self.failures.append(exc)


class ChunkedStream:
    """recv() over fixed bytes, handing out at most ``chunk`` bytes per call."""

    def __init__(self, data, chunk=1):
        self.data = data
        self.chunk = chunk

    def recv(self, size):
        out = self.data[:min(size, self.chunk)]
        self.data = self.data[len(out):]
        return out


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def make_server(observer):
    servers = []

    def start(**kwargs):
        kwargs.setdefault("observer", observer)
        server = WebSocketServer(("127.0.0.1", 0), **kwargs)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return server

    yield start
    for server in servers:
        server.shutdown()
        server.server_close()


def connect(server):
    sock = socket.create_connection(server.server_address[:2], timeout=5)
    return sock
