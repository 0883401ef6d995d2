import logging
import socket
from typing import Callable

from .config import Config
from .sndrcv import IPPROTO_SCTP

logger = logging.getLogger(__name__)

SocketFactory = Callable[[Config, int], socket.socket]


class ServerSetupError(Exception):

    def __init__(self, step: str, error: OSError):
        super().__init__(step, error)
        self.step = step
        self.error = error

    def __str__(self) -> str:
        return f"Unable to {self.step}(): {self.error.strerror or self.error}"


def create_server_socket(config: Config, socket_type: int) -> socket.socket:
    """
    IPv6 dual-stack SCTP socket, bound and listening on config.port.
    One-to-many (SOCK_SEQPACKET) sockets listen too, otherwise no association gets accepted.
    """
    try:
        sock = socket.socket(socket.AF_INET6, socket_type, IPPROTO_SCTP)
    except OSError as exc:
        raise ServerSetupError("socket", exc) from exc

    step = "setsockopt"
    try:
        if hasattr(socket, "IPV6_V6ONLY"):
            sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 0)
        step = "bind"
        logger.debug("Binding to port %d", config.port)
        sock.bind((config.host, config.port))
        step = "listen"
        sock.listen(config.backlog)
        sock.setblocking(False)
    except OSError as exc:
        sock.close()
        raise ServerSetupError(step, exc) from exc
    return sock
