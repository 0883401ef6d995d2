from typing import Generator
import asyncio
import signal
import sys
import logging
import contextlib
import threading
import click
from ._types import PeerAddress
from .config import Config
from .flow_control import CancellationToken
from .modes import TransportMode
from .message_conn import MessageMode
from .server_state import ServerContext
from .sockets import ServerSetupError, SocketFactory, create_server_socket
from .stream_conn import StreamMode


HANDLED_SIGNALS = {
    signal.SIGINT: "SIGINT",
    signal.SIGTERM: "SIGTERM",
}
if sys.platform == "win32":
    HANDLED_SIGNALS[signal.SIGBREAK] = "SIGBREAK"
else:
    HANDLED_SIGNALS[signal.SIGPIPE] = "SIGPIPE"


logger = logging.getLogger(__name__)


def mode_for(config: Config) -> TransportMode:
    if config.message_mode:
        return MessageMode()
    return StreamMode()


class Server:
    def __init__(self, config: Config, socket_factory: SocketFactory = create_server_socket):
        self.config = config
        self.mode = mode_for(config)
        self.token = CancellationToken()
        self.context: ServerContext | None = None
        self.started = False
        self._socket_factory = socket_factory
        self._captured_signals: list[int] = []

    def run(self) -> int:
        return asyncio.run(self.serve())

    async def serve(self) -> int:
        with self.capture_signals():
            return await self._serve()

    async def _serve(self) -> int:
        logger.info("Starting server...")
        self.startup()
        try:
            ok = await self.main_loop()
        finally:
            self.shutdown()
        logger.info("Server shutdown complete!")
        return 0 if ok else 1

    def startup(self) -> None:
        context = ServerContext(self.config)
        logger.debug("Using %s socket", self.mode.name)
        try:
            context.sock = self._socket_factory(self.config, self.mode.socket_type)
        except ServerSetupError as exc:
            logger.error("Error while initializing the server: %s", exc)
            context.close()
            sys.exit(1)

        self.context = context
        self.mode.prepare(context)
        logger.debug("Allocated %d bytes for recv buffer", context.recvbuf_size)
        self._log_startup_message(context.sock)
        self.started = True

    def _log_startup_message(self, listener):
        address = PeerAddress.from_sockaddr(listener.getsockname())
        message = f"SCTP {self.mode.name} server listening on %s (Press CTRL+C to quit)"
        color_message = (
            f"SCTP {self.mode.name} server listening on "
            + click.style("%s", bold=True)
            + " (Press CTRL+C to quit)"
        )
        logger.info(
            message,
            address or listener.getsockname(),
            extra={"color_message": color_message},
        )

    async def main_loop(self) -> bool:
        """
        Only one mode is active for the lifetime of the server. Stream mode returns from run_once()
        after every connection, message mode only when stopped, either way the token is looked at again
        before going back in. A False return means the socket is unusable.
        """
        while not self.token.cancelled:
            if not await self.mode.run_once(self.context, self.token):
                return False
        return True

    def stop(self) -> None:
        self.token.cancel()

    def shutdown(self) -> None:
        logger.info("Shutting down server...")
        for sig in self._captured_signals:
            logger.debug("Received signal %s", HANDLED_SIGNALS.get(sig, sig))
            if sig == getattr(signal, "SIGPIPE", None):
                logger.warning("Received SIGPIPE, closing down")
        if self.context is not None:
            self.context.close()

    # signal handling
    @contextlib.contextmanager
    def capture_signals(self) -> Generator[None, None, None]:
        """
        Signals can only be listened to from the main thread
        """
        if threading.current_thread() is not threading.main_thread():
            yield
            return
        original_handlers = {sig: signal.signal(sig, self.handle_exit) for sig in HANDLED_SIGNALS.keys()}
        try:
            yield
        finally:
            # Restore original signal handlers
            for sig, handler in original_handlers.items():
                signal.signal(sig, handler)

    def handle_exit(self, sig: int, frame) -> None:
        # no I/O here, the loops pick the request up between two waits
        self._captured_signals.append(sig)
        self.token.cancel()
