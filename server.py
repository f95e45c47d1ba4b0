import socketserver
import sys
import config
from wsutil.request import read_request, RequestHeadTooLarge
from wsutil.router import Router, http_response
from wsutil.websockets import handshake_response, decode_message, encode_message
from wsutil.errors import ConnectionClosed
from wsutil.observer import Observer, PrintObserver


def hello(request):
    return http_response("200 OK", b"hey")


router = Router()
router.add_route("*", ".*", hello)


def echo(message):
    return message


class PrefixedStream:
    """recv() that hands out bytes read past the HTTP head before touching the socket."""

    def __init__(self, sock, leftover=b""):
        self.sock = sock
        self.leftover = leftover

    def recv(self, size):
        if self.leftover:
            chunk = self.leftover[:size]
            self.leftover = self.leftover[size:]
            return chunk
        return self.sock.recv(size)


class WebSocketHandler(socketserver.BaseRequestHandler):

    def handle(self):
        observer = self.server.observer
        self.request.settimeout(self.server.read_timeout)
        try:
            request, leftover = read_request(self.request)
        except RequestHeadTooLarge:
            self.request.sendall(http_response("400 Bad Request", b"request head too large"))
            return
        if request is None:
            return
        if not request.is_upgrade():
            self.request.sendall(self.server.router.route_request(request))
            return
        key = request.header("Sec-WebSocket-Key")
        if key is None:
            self.request.sendall(http_response("400 Bad Request", b"missing Sec-WebSocket-Key"))
            return

        observer.connected(key)
        response = handshake_response(key)
        observer.handshake(response.decode("utf-8"))
        self.request.sendall(response)

        stream = PrefixedStream(self.request, leftover)
        while True:
            try:
                message = decode_message(stream)
            except ConnectionClosed:
                break
            observer.received(message)
            reply = self.server.on_message(message)
            if reply is None:
                continue
            frame = encode_message(reply)
            self.request.sendall(frame)
            observer.sent(frame)

    def finish(self):
        self.server.observer.disconnected(self.client_address)


class WebSocketServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, server_address, on_message=echo, observer=None, read_timeout=None):
        self.on_message = on_message
        self.observer = observer if observer is not None else Observer()
        self.read_timeout = read_timeout
        self.router = router
        super().__init__(server_address, WebSocketHandler)

    def handle_error(self, request, client_address):
        # a failure stays inside its own connection, which gets closed right after
        self.observer.failed(client_address, sys.exc_info()[1])


def main():
    host = config.SERVER_HOST
    port = config.SERVER_PORT
    observer = Observer() if config.QUIET else PrintObserver()

    server = WebSocketServer((host, port), observer=observer, read_timeout=config.READ_TIMEOUT)

    observer.listening(host, port)

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()


if __name__ == "__main__":
    main()
