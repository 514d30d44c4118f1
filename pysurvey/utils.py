import socket
import logging

logger = logging.getLogger("pysurvey")

PORT = 12013


class UDPHandler(logging.Handler):
    """A logging handler that sends records to a listening process.

    Prompts draw on the terminal, so logs written to stdout or stderr would
    get mixed up with them.
    """

    udp_address = ("127.0.0.1", PORT)

    def __init__(self):
        super().__init__()
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

    def emit(self, record):
        msg = self.format(record)
        bb = msg.encode()
        size = 2**10
        while bb:
            bb1 = bb[:size]
            bb = bb[size:]
            self._socket.sendto(bb1, self.udp_address)

    def close(self):
        self._socket.close()
        super().close()


def enable_udp_logging(level=logging.DEBUG):
    """Send the logs of this process to ``pysurvey --listen``."""
    for handler in logger.handlers:
        if isinstance(handler, UDPHandler):
            return handler
    handler = UDPHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


def listen_to_logs():
    """Called from ``pysurvey --listen``.

    This way we can see the logs from another process, so they do not get
    mixed up with the prompts.
    """

    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", PORT))

    while True:
        data, addr = sock.recvfrom(2**20)
        print(data.decode())
