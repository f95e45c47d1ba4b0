class WebSocketError(Exception):
    pass


class ProtocolError(WebSocketError):
    """A frame header uses something outside the supported subset of the protocol."""


class MessageTooLong(ProtocolError):
    """The payload would need the 64-bit length marker."""


class MalformedPayload(WebSocketError, ValueError):
    """The payload is not a UTF-8 encoded JSON document."""


class ConnectionClosed(WebSocketError):
    """The stream ended before the next frame started."""


class IncompleteFrame(WebSocketError):
    """The stream ended in the middle of a frame."""

    def __init__(self, expected, received):
        super().__init__(f"expected {expected} bytes, stream ended after {received}")
        self.expected = expected
        self.received = received
