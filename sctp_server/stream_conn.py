"""
Stream mode: one-to-one SCTP sockets (SOCK_STREAM).

The listening socket hands out one association at a time:
- accept() waits for the next peer, looking at the cancellation token between poll intervals.
- serve_connection() reads what the peer sends into the shared receive buffer, dumps it and echoes it
  back when asked to, until the peer closes the association or the server is stopped.
The next accept() only starts once the previous connection has been closed, so two sessions never overlap.
"""

import asyncio
import logging
import socket

import click

from ._types import PeerAddress, PollResult
from .flow_control import CancellationToken, wait_readable
from .modes import TransportMode
from .server_state import ServerContext
from .util import xdump

logger = logging.getLogger(__name__)


class StreamMode(TransportMode):
    name = "stream"
    socket_type = socket.SOCK_STREAM

    async def run_once(self, ctx: ServerContext, token: CancellationToken) -> bool:
        try:
            accepted = await self.accept(ctx, token)
        except OSError as exc:
            logger.error("Error in accept(): %s", exc)
            return False
        if accepted is None:
            return True

        conn, peer = accepted
        click.echo(f"Connection from {peer or 'unknown'}")
        try:
            if not await self.serve_connection(ctx, conn, token):
                logger.warning("Session with %s ended with an error", peer or "unknown")
        finally:
            conn.close()
        return True

    async def accept(
            self,
            ctx: ServerContext,
            token: CancellationToken
    ) -> tuple[socket.socket, PeerAddress | None] | None:
        """
        Returns None if a stop was requested before any peer showed up.
        """
        while not token.cancelled:
            outcome = await wait_readable(ctx.sock, ctx.config.poll_timeout)
            if outcome.result is PollResult.ERROR:
                raise outcome.error
            if outcome.result is not PollResult.READY:
                continue

            logger.debug("Going to accept()")
            try:
                conn, address = ctx.sock.accept()
            except (BlockingIOError, InterruptedError):
                # likely we are closing
                continue
            conn.setblocking(False)
            return conn, PeerAddress.from_sockaddr(address)
        return None

    async def serve_connection(
            self,
            ctx: ServerContext,
            conn: socket.socket,
            token: CancellationToken
    ) -> bool:
        while not token.cancelled:
            outcome = await wait_readable(conn, ctx.config.poll_timeout)
            if outcome.result is PollResult.ERROR:
                logger.error("Error while waiting for data: %s", outcome.error)
                return False
            if outcome.result is not PollResult.READY:
                continue

            try:
                count = conn.recv_into(ctx.recvbuf, ctx.recvbuf_size)
            except (BlockingIOError, InterruptedError):
                continue
            except OSError as exc:
                logger.error("Error in recv(): %s", exc)
                return False

            if count == 0:
                click.echo("Connection closed by the remote host")
                return True

            data = bytes(ctx.recvbuf[:count])
            logger.info("Received %d bytes", count)
            click.echo(xdump(data, "Received data"))
            if ctx.echo:
                await self.echo(ctx, conn, data)
        return True

    async def echo(self, ctx: ServerContext, conn: socket.socket, data: bytes) -> None:
        loop = asyncio.get_running_loop()
        logger.debug("Echoing data back")
        try:
            await asyncio.wait_for(loop.sock_sendall(conn, data), ctx.config.send_timeout)
        except (OSError, asyncio.TimeoutError) as exc:
            logger.warning("send() failed while echoing received data: %s", exc)
