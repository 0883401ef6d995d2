import socket
import struct

import pytest

from sctp_server.sndrcv import (
    IPPROTO_SCTP,
    SCTP_SNDRCV,
    SCTP_UNORDERED,
    SNDRCVINFO_SIZE,
    decode_ancillary,
    decode_sndrcvinfo,
    encode_sndrcvinfo,
    sndrcv_ancillary,
    subscribe_data_io_events,
)


def sndrcvinfo(stream=0, ssn=0, flags=0, ppid=0, context=0, ttl=0, tsn=0, cumtsn=0, assoc_id=0) -> bytes:
    return struct.pack("=HHHxxIIIIIi", stream, ssn, flags, socket.htonl(ppid), context, ttl, tsn, cumtsn, assoc_id)


def test_sndrcvinfo_is_32_bytes():
    assert SNDRCVINFO_SIZE == 32


def test_decode_all_fields():
    data = sndrcvinfo(stream=3, ssn=7, ppid=51, context=9, tsn=4000000000, cumtsn=3999999999, assoc_id=12)

    metadata = decode_sndrcvinfo(data)

    assert metadata.stream == 3
    assert metadata.ssn == 7
    assert metadata.ppid == 51
    assert metadata.context == 9
    assert metadata.tsn == 4000000000
    assert metadata.cumtsn == 3999999999
    assert metadata.assoc_id == 12


@pytest.mark.parametrize(
    ("flags", "ordered", "ordering"),
    [
        (0, True, "ordered"),
        (SCTP_UNORDERED, False, "unordered"),
        (SCTP_UNORDERED | 0x0008, False, "unordered"),
    ],
)
def test_ordering_flag(flags, ordered, ordering):
    metadata = decode_sndrcvinfo(sndrcvinfo(flags=flags))

    assert metadata.ordered is ordered
    assert metadata.ordering == ordering


def test_decode_rejects_short_data():
    with pytest.raises(ValueError):
        decode_sndrcvinfo(b"\x00" * 16)


def test_decode_ancillary_picks_sndrcv_message():
    ancdata = [
        (socket.SOL_SOCKET, 1, b"\x00" * 4),
        (IPPROTO_SCTP, SCTP_SNDRCV, sndrcvinfo(stream=2, ppid=99)),
    ]

    metadata = decode_ancillary(ancdata)

    assert metadata.stream == 2
    assert metadata.ppid == 99


def test_decode_ancillary_without_sndrcv_message():
    assert decode_ancillary([]) is None
    assert decode_ancillary([(IPPROTO_SCTP, 99, b"")]) is None


def test_encode_puts_ppid_in_network_byte_order():
    data = encode_sndrcvinfo(stream=5, ppid=0x01020304)

    assert len(data) == SNDRCVINFO_SIZE
    assert data[0:2] == struct.pack("=H", 5)
    assert data[8:12] == b"\x01\x02\x03\x04"


def test_reply_ancillary_keeps_stream_and_ppid():
    received = decode_sndrcvinfo(sndrcvinfo(stream=4, ssn=10, flags=SCTP_UNORDERED, ppid=46, tsn=77))

    [(level, kind, data)] = sndrcv_ancillary(received)
    reply = decode_sndrcvinfo(data)

    assert (level, kind) == (IPPROTO_SCTP, SCTP_SNDRCV)
    assert (reply.stream, reply.ppid) == (4, 46)
    assert reply.ordered


def test_reply_ancillary_without_metadata():
    assert sndrcv_ancillary(None) == []


def test_subscribe_data_io_events(mocker):
    sock = mocker.NonCallableMagicMock(spec=socket.socket)

    subscribe_data_io_events(sock)

    level, option, value = sock.setsockopt.call_args.args
    assert (level, option) == (IPPROTO_SCTP, 11)
    assert value[0] == 1
    assert not any(value[1:])
