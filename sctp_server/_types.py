import enum
import ipaddress
import socket
from dataclasses import dataclass
from typing import NamedTuple


class PollResult(enum.Enum):
    READY = "ready"
    TIMED_OUT = "timed-out"
    INTERRUPTED = "interrupted"
    ERROR = "error"


class PollOutcome(NamedTuple):
    result: PollResult
    error: OSError | None = None


@dataclass(frozen=True)
class PeerAddress:
    family: int
    host: str
    port: int

    @classmethod
    def from_sockaddr(cls, address) -> "PeerAddress | None":
        """
        Build a peer address from what accept()/recvmsg() returned.
        IPv4 peers come back as (host, port), IPv6 peers as (host, port, flowinfo, scope_id).
        Returns None when the address can not be interpreted, callers print "unknown" then.
        """
        if not isinstance(address, tuple):
            return None
        if len(address) == 2:
            family = socket.AF_INET
        elif len(address) == 4:
            family = socket.AF_INET6
        else:
            return None
        host, port = address[0], address[1]
        try:
            ipaddress.ip_address(host)
            port = int(port)
        except (TypeError, ValueError):
            return None
        return cls(family, host, port)

    @property
    def ipv4_mapped(self) -> str | None:
        if self.family != socket.AF_INET6:
            return None
        mapped = ipaddress.ip_address(self.host).ipv4_mapped
        return str(mapped) if mapped is not None else None

    def __str__(self) -> str:
        if self.family == socket.AF_INET:
            return f"{self.host}:{self.port}"
        mapped = self.ipv4_mapped
        if mapped is not None:
            return f"{mapped}:{self.port}"
        return f"[{self.host}]:{self.port}"


@dataclass(frozen=True)
class MessageMetadata:
    stream: int
    ssn: int
    flags: int
    ppid: int
    context: int
    timetolive: int
    tsn: int
    cumtsn: int
    assoc_id: int

    @property
    def ordered(self) -> bool:
        # SCTP_UNORDERED
        return not self.flags & 0x0001

    @property
    def ordering(self) -> str:
        return "ordered" if self.ordered else "unordered"
