import asyncio
import socket

from sctp_server.config import Config
from sctp_server.sockets import ServerSetupError


def tcp_socket_factory(config: Config, socket_type: int) -> socket.socket:
    """Same contract as create_server_socket(), over TCP so it works without kernel SCTP support."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    step = "bind"
    try:
        sock.bind((config.host, config.port))
        step = "listen"
        sock.listen(config.backlog)
        sock.setblocking(False)
    except OSError as exc:
        sock.close()
        raise ServerSetupError(step, exc) from exc
    return sock


def sctp_available() -> bool:
    try:
        sock = socket.socket(socket.AF_INET6, socket.SOCK_STREAM, socket.IPPROTO_SCTP)
    except (OSError, AttributeError):
        return False
    try:
        sock.bind(("::", 0))
    except OSError:
        return False
    finally:
        sock.close()
    return True


async def recv_exactly(sock: socket.socket, size: int) -> bytes:
    loop = asyncio.get_running_loop()
    data = b""
    while len(data) < size:
        chunk = await loop.sock_recv(sock, size - len(data))
        if not chunk:
            break
        data += chunk
    return data
