DEFAULT_HOST = "::"
DEFAULT_PORT = 2001
DEFAULT_BUFFER_SIZE = 1024
DEFAULT_BACKLOG = 2
# seconds to wait for readiness before checking if a stop was requested
DEFAULT_POLL_TIMEOUT = 0.1
DEFAULT_SEND_TIMEOUT = 1.0

STREAM_MODE = "stream"
MESSAGE_MODE = "message"
MODES = (STREAM_MODE, MESSAGE_MODE)


class Config:

    def __init__(
            self,
            host=DEFAULT_HOST,
            port=DEFAULT_PORT,
            buffer_size=DEFAULT_BUFFER_SIZE,
            mode=STREAM_MODE,
            echo=False,
            verbose=False,
            backlog=DEFAULT_BACKLOG,
            poll_timeout=DEFAULT_POLL_TIMEOUT,
            send_timeout=DEFAULT_SEND_TIMEOUT,
    ):
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"Malformed port given: {port}")
        if not 0 < buffer_size <= 0xFFFF:
            raise ValueError(f"Illegal recv buffer size given: {buffer_size}")
        if mode not in MODES:
            raise ValueError(f"Unknown mode {mode!r}, expected one of {', '.join(MODES)}")
        if poll_timeout <= 0:
            raise ValueError("poll_timeout must be positive")

        self.host = host
        self.port = port
        self.buffer_size = buffer_size
        self.mode = mode
        self.echo = echo
        self.verbose = verbose
        self.backlog = backlog
        self.poll_timeout = poll_timeout
        self.send_timeout = send_timeout

    @property
    def message_mode(self) -> bool:
        return self.mode == MESSAGE_MODE
