import hashlib
import base64
import json
from bson.json_util import dumps
from wsutil.errors import ProtocolError, MessageTooLong, MalformedPayload, ConnectionClosed, IncompleteFrame

GUID = "258EAFA5-E914-47DA-95CA-C5AB0DC85B11"

OPCODE_TEXT = 0x1

SEVEN_BITS_INTEGER_MARKER = 125
SIXTEEN_BITS_INTEGER_MARKER = 126
MAXIMUM_SIXTEEN_BITS_INTEGER = 2 ** 16 - 1
MASK_KEY_BYTES_LENGTH = 4

FIN_BIT = 0x80
RSV_BITS = 0x70
MASK_BIT = 0x80


class WSFrame:
    def __init__(self):
        self.fin_bit = 0
        self.opcode = 0
        self.masked = False
        self.payload_length = 0
        self.mask_key = b""
        self.payload = b""
        self.start = 0


class _Buffer:
    # recv() over bytes already in memory
    def __init__(self, data):
        self.data = bytes(data)
        self.offset = 0

    def recv(self, size):
        chunk = self.data[self.offset:self.offset + size]
        self.offset += len(chunk)
        return chunk


def compute_accept(key):
    key += GUID
    key = hashlib.sha1(key.encode("utf-8"))
    return base64.b64encode(key.digest()).decode()


def handshake_response(key):
    accept = compute_accept(key)
    headers = [
        "HTTP/1.1 101 Switching Protocols",
        "Upgrade: websocket",
        "Connection: Upgrade",
        "Sec-WebSocket-Accept: " + accept,
        "",
    ]
    return "".join(line + "\r\n" for line in headers).encode("utf-8")


def apply_mask(data, mask_key):
    # XOR is its own inverse, so this both masks and unmasks
    out = bytearray(data)
    for i in range(len(out)):
        out[i] ^= mask_key[i % MASK_KEY_BYTES_LENGTH]
    return bytes(out)


def read_exact(stream, size, frame_start=False):
    """Block until exactly ``size`` bytes arrived on ``stream``.

    An empty read means the peer closed the stream. At a frame boundary that is
    a normal close, anywhere else the frame is cut short.
    """
    data = b""
    while len(data) < size:
        chunk = stream.recv(size - len(data))
        if not chunk:
            if frame_start and len(data) == 0:
                raise ConnectionClosed("stream closed")
            raise IncompleteFrame(size, len(data))
        data += chunk
    return data


def read_ws_frame(stream):
    ws = WSFrame()
    header = read_exact(stream, 1, frame_start=True) + read_exact(stream, 1)
    ws.fin_bit = header[0] >> 7
    ws.opcode = header[0] & 0x0F
    ws.masked = bool(header[1] & MASK_BIT)
    if header[0] & RSV_BITS:
        raise ProtocolError("reserved bits set without a negotiated extension")
    if ws.opcode != OPCODE_TEXT:
        raise ProtocolError("unsupported opcode 0x%X" % ws.opcode)
    if not ws.fin_bit:
        raise ProtocolError("fragmented messages are not supported")
    if not ws.masked:
        raise ProtocolError("client frames must be masked")
    length_indicator = header[1] & 0x7F
    start = 2
    if length_indicator <= SEVEN_BITS_INTEGER_MARKER:
        ws.payload_length = length_indicator
    elif length_indicator == SIXTEEN_BITS_INTEGER_MARKER:
        ws.payload_length = int.from_bytes(read_exact(stream, 2), byteorder="big")
        start += 2
    else:
        raise MessageTooLong("the received message is too long")
    ws.mask_key = read_exact(stream, MASK_KEY_BYTES_LENGTH)
    start += MASK_KEY_BYTES_LENGTH
    ws.start = start
    ws.payload = apply_mask(read_exact(stream, ws.payload_length), ws.mask_key)
    return ws


def parse_ws_frame(frame):
    return read_ws_frame(_Buffer(frame))


def decode_message(stream):
    ws = read_ws_frame(stream)
    try:
        return json.loads(ws.payload.decode("utf-8"))
    except ValueError as e:
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        raise MalformedPayload("payload is not a UTF-8 JSON document: %s" % e) from e


def generate_ws_frame(payload: bytes, mask_key: bytes = None):
    """Build a single text frame around ``payload``.

    Server frames go out unmasked. ``mask_key`` is only for producing client
    frames, e.g. from a test client.
    """
    payload_length = len(payload)
    mask_bit = MASK_BIT if mask_key is not None else 0
    frame = bytearray([FIN_BIT | OPCODE_TEXT])
    if payload_length <= SEVEN_BITS_INTEGER_MARKER:
        frame.append(mask_bit | payload_length)
    elif payload_length <= MAXIMUM_SIXTEEN_BITS_INTEGER:
        frame.append(mask_bit | SIXTEEN_BITS_INTEGER_MARKER)
        frame += payload_length.to_bytes(2, byteorder="big")
    else:
        raise MessageTooLong("message is too long: %d bytes" % payload_length)
    if mask_key is not None:
        if len(mask_key) != MASK_KEY_BYTES_LENGTH:
            raise ValueError("mask key must be 4 bytes")
        frame += mask_key
        payload = apply_mask(payload, mask_key)
    frame += payload
    return bytes(frame)


def encode_message(message, mask_key=None):
    text = dumps(message, separators=(",", ":"))
    return generate_ws_frame(text.encode("utf-8"), mask_key)
