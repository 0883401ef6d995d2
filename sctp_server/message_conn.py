"""
Message mode: a single one-to-many SCTP socket (SOCK_SEQPACKET).

There is no accept step, every message of every association arrives on the bound socket together with
the sender's address and, when the data io event is subscribed, its sctp_sndrcvinfo. Replies go back
through the same socket to the address the message came from.
"""

import logging
import socket

import click

from ._types import MessageMetadata, PeerAddress, PollResult
from .flow_control import CancellationToken, wait_readable
from .modes import TransportMode
from .server_state import ServerContext
from .sndrcv import (
    ANCILLARY_BUFSIZE,
    MSG_NOTIFICATION,
    decode_ancillary,
    sndrcv_ancillary,
    subscribe_data_io_events,
)
from .util import xdump

logger = logging.getLogger(__name__)

MSG_EOR = getattr(socket, "MSG_EOR", 0x80)


class MessageMode(TransportMode):
    name = "message"
    socket_type = socket.SOCK_SEQPACKET

    def prepare(self, ctx: ServerContext) -> None:
        # stream id and ppid are needed for the metadata report and to echo on the same stream
        if not (ctx.verbose or ctx.echo):
            return
        try:
            subscribe_data_io_events(ctx.sock)
        except OSError as exc:
            logger.warning("Unable to subscribe to SCTP IO events: %s", exc)
            ctx.verbose = False

    async def run_once(self, ctx: ServerContext, token: CancellationToken) -> bool:
        while not token.cancelled:
            outcome = await wait_readable(ctx.sock, ctx.config.poll_timeout)
            if outcome.result is PollResult.ERROR:
                logger.error("Error while waiting for data: %s", outcome.error)
                return False
            if outcome.result is not PollResult.READY:
                continue

            try:
                count, ancdata, msg_flags, address = ctx.sock.recvmsg_into(
                    [ctx.recvbuf], ANCILLARY_BUFSIZE
                )
            except (BlockingIOError, InterruptedError):
                continue
            except OSError as exc:
                logger.error("Error in recvmsg(): %s", exc)
                return False

            if msg_flags & MSG_NOTIFICATION:
                logger.debug("Skipping SCTP notification of %d bytes", count)
                continue
            if count == 0:
                click.echo("Connection closed by remote host")
                continue

            self.handle_message(ctx, bytes(ctx.recvbuf[:count]), ancdata, msg_flags, address)
        return True

    def handle_message(self, ctx: ServerContext, data: bytes, ancdata, msg_flags: int, address) -> None:
        logger.debug("Received %d bytes", len(data))
        peer = PeerAddress.from_sockaddr(address)
        click.echo(f"Packet from {peer or 'unknown'}  with {len(data)} bytes of data")
        if not msg_flags & MSG_EOR:
            logger.warning(
                "Message did not fit into the %d byte receive buffer, the rest follows in the next read",
                ctx.recvbuf_size,
            )

        try:
            metadata = decode_ancillary(ancdata)
        except ValueError as exc:
            logger.warning("Malformed sctp_sndrcvinfo: %s", exc)
            metadata = None

        if ctx.verbose and metadata is not None:
            click.echo(self.describe(metadata))
        click.echo(xdump(data, "Received data"))
        if ctx.echo:
            self.echo(ctx, data, address, metadata)

    @staticmethod
    def describe(metadata: MessageMetadata) -> str:
        return (
            f"\t stream: {metadata.stream} ppid: {metadata.ppid} context: {metadata.context}\n"
            f"\t ssn: {metadata.ssn} tsn: {metadata.tsn} cumtsn: {metadata.cumtsn} [{metadata.ordering}]"
        )

    def echo(self, ctx: ServerContext, data: bytes, address, metadata: MessageMetadata | None) -> None:
        if not address:
            logger.warning("Error while echoing data: sender address is unknown")
            return
        logger.debug("Echoing data back")
        try:
            ctx.sock.sendmsg([data], sndrcv_ancillary(metadata), 0, address)
        except OSError as exc:
            logger.warning("Error while echoing data: %s", exc)
