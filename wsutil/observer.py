import time
import traceback


class Observer:
    """Diagnostics hooks handed to each connection handler. The base class is silent."""

    def listening(self, host, port):
        pass

    def connected(self, key):
        pass

    def handshake(self, headers):
        pass

    def received(self, message):
        pass

    def sent(self, frame):
        pass

    def failed(self, client_address, exc):
        pass

    def disconnected(self, client_address):
        pass


class PrintObserver(Observer):

    def log(self, *a):
        print(time.strftime("[%H:%M:%S]"), *a, flush=True)

    def listening(self, host, port):
        self.log("server listening to", host, port)

    def connected(self, key):
        self.log(f"{key} connected!")

    def handshake(self, headers):
        self.log({"headers": headers})

    def received(self, message):
        self.log("message received!", message)

    def sent(self, frame):
        self.log("sent", len(frame), "bytes")

    def failed(self, client_address, exc):
        self.log(f"something bad happened! client: {client_address}, msg: {exc!r}")
        print("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), end="", flush=True)

    def disconnected(self, client_address):
        self.log("disconnected:", client_address)
