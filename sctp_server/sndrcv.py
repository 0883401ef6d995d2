"""
Per-message SCTP delivery information.

With the sctp_data_io_event subscription enabled the kernel attaches a SCTP_SNDRCV control message
(struct sctp_sndrcvinfo) to every message read from a one-to-many socket. The same structure,
sent as ancillary data, selects the stream and payload protocol identifier of an outgoing message.
"""

import socket
import struct

from ._types import MessageMetadata

IPPROTO_SCTP = getattr(socket, "IPPROTO_SCTP", 132)

# setsockopt() option name and control message type, from <netinet/sctp.h>
SCTP_EVENTS = 11
SCTP_SNDRCV = 1

SCTP_UNORDERED = 0x0001
MSG_NOTIFICATION = 0x8000

# stream, ssn, flags, <pad>, ppid, context, timetolive, tsn, cumtsn, assoc_id
_SNDRCVINFO = struct.Struct("=HHHxxIIIIIi")
SNDRCVINFO_SIZE = _SNDRCVINFO.size

ANCILLARY_BUFSIZE = socket.CMSG_SPACE(SNDRCVINFO_SIZE)

# struct sctp_event_subscribe, only sctp_data_io_event turned on
_DATA_IO_EVENTS = bytes([1]) + bytes(9)


def decode_sndrcvinfo(data: bytes) -> MessageMetadata:
    if len(data) < SNDRCVINFO_SIZE:
        raise ValueError(
            f"sctp_sndrcvinfo needs {SNDRCVINFO_SIZE} bytes, got {len(data)}"
        )
    stream, ssn, flags, ppid, context, ttl, tsn, cumtsn, assoc_id = _SNDRCVINFO.unpack_from(data)
    return MessageMetadata(
        stream=stream,
        ssn=ssn,
        flags=flags,
        # the payload protocol identifier travels untouched, in network byte order
        ppid=socket.ntohl(ppid),
        context=context,
        timetolive=ttl,
        tsn=tsn,
        cumtsn=cumtsn,
        assoc_id=assoc_id,
    )


def decode_ancillary(ancdata) -> MessageMetadata | None:
    for level, kind, data in ancdata:
        if level == IPPROTO_SCTP and kind == SCTP_SNDRCV:
            return decode_sndrcvinfo(data)
    return None


def encode_sndrcvinfo(stream: int, ppid: int, flags: int = 0, context: int = 0) -> bytes:
    return _SNDRCVINFO.pack(stream, 0, flags, socket.htonl(ppid), context, 0, 0, 0, 0)


def sndrcv_ancillary(metadata: MessageMetadata | None) -> list[tuple[int, int, bytes]]:
    """Control messages that send a reply on the stream and with the PPID of `metadata`."""
    if metadata is None:
        return []
    return [(IPPROTO_SCTP, SCTP_SNDRCV, encode_sndrcvinfo(metadata.stream, metadata.ppid))]


def subscribe_data_io_events(sock: socket.socket) -> None:
    sock.setsockopt(IPPROTO_SCTP, SCTP_EVENTS, _DATA_IO_EVENTS)
