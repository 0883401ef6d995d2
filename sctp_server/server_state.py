import socket

from .config import Config


class ServerContext:
    """
    State shared by the loops for the lifetime of the server
    """

    def __init__(self, config: Config):
        self.config = config
        """
        Listening socket in stream mode, the one-to-many socket every message arrives on in message mode.
        Assigned once the socket factory succeeded, closed in close().
        """
        self.sock: socket.socket | None = None
        """
        Receive buffer reused by every receive call. Only the first `n` bytes returned by a receive
        are valid, nothing ever reads past them.
        """
        self.recvbuf = bytearray(config.buffer_size)
        self.verbose = config.verbose
        self.echo = config.echo

    @property
    def port(self) -> int:
        return self.config.port

    @property
    def recvbuf_size(self) -> int:
        return len(self.recvbuf)

    def close(self) -> None:
        if self.sock is not None:
            self.sock.close()
        self.recvbuf = bytearray()
