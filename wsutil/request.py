class Request:

    def __init__(self, request: bytes):
        self.body = b""
        self.method = ""
        self.path = ""
        self.http_version = ""
        self.headers = {}
        head, _, body = request.partition(b'\r\n\r\n')
        req = head.split(b'\r\n')
        request_line = req[0].split(b' ')
        if len(request_line) != 3:
            raise ValueError("malformed request line: %r" % req[0])
        self.method = str(request_line[0], "utf-8")
        self.path = str(request_line[1], "utf-8")
        self.http_version = str(request_line[2], "utf-8")
        for i in range(1, len(req)):
            if req[i] == b'':
                break
            header = req[i].split(b':', 1)
            if len(header) != 2:
                continue
            self.headers[str(header[0], "utf-8").strip()] = str(header[1], "utf-8").strip()
        if self.method == 'POST':
            self.body = body

    def header(self, name, default=None):
        # header names are case-insensitive
        name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return default

    def is_upgrade(self):
        upgrade = self.header("Upgrade", "")
        return upgrade.lower() == "websocket"


MAX_HEAD_SIZE = 8192


class RequestHeadTooLarge(ValueError):
    pass


def read_request(sock, chunk_size=2048, max_size=MAX_HEAD_SIZE):
    """Read an HTTP request head from ``sock``.

    Returns the parsed Request and whatever bytes arrived after the blank line,
    which after an upgrade already belong to the first frame. Raises
    RequestHeadTooLarge once more than ``max_size`` bytes arrived without the
    blank line.
    """
    received_data = b""
    while b"\r\n\r\n" not in received_data:
        if len(received_data) > max_size:
            raise RequestHeadTooLarge("request head exceeds %d bytes" % max_size)
        chunk = sock.recv(chunk_size)
        if not chunk:
            return None, b""
        received_data += chunk
    head, _, rest = received_data.partition(b"\r\n\r\n")
    return Request(head + b"\r\n\r\n"), rest


def test1():
    request = Request(b'GET / HTTP/1.1\r\nHost: localhost:1337\r\nConnection: keep-alive\r\n\r\n')
    assert request.method == "GET"
    assert "Host" in request.headers
    assert request.headers["Host"] == "localhost:1337"
    assert request.body == b""
    assert not request.is_upgrade()


def test2():
    request = Request(b'GET /chat HTTP/1.1\r\nupgrade: WebSocket\r\nsec-websocket-key: dGhlIHNhbXBsZSBub25jZQ==\r\n\r\n')
    assert request.path == "/chat"
    assert request.is_upgrade()
    assert request.header("Sec-WebSocket-Key") == "dGhlIHNhbXBsZSBub25jZQ=="


if __name__ == '__main__':
    test1()
    test2()
