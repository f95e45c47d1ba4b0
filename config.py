import os

SERVER_HOST = os.environ.get("WS_HOST", "0.0.0.0")
SERVER_PORT = int(os.environ.get("WS_PORT", "1337"))

# seconds; unset means a partial read blocks forever
READ_TIMEOUT = float(os.environ["WS_READ_TIMEOUT"]) if os.environ.get("WS_READ_TIMEOUT") else None

QUIET = os.environ.get("WS_QUIET", "") not in ("", "0", "false")
