"""Data models for netprobe snapshots."""

from __future__ import annotations

import socket
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import NamedTuple


class TCPState(Enum):
    """TCP connection states from /proc/net/tcp (include/net/tcp_states.h)."""

    ESTABLISHED = 1
    SYN_SENT = 2
    SYN_RECV = 3
    FIN_WAIT1 = 4
    FIN_WAIT2 = 5
    TIME_WAIT = 6
    CLOSE = 7
    CLOSE_WAIT = 8
    LAST_ACK = 9
    LISTEN = 10
    CLOSING = 11

    @classmethod
    def from_hex(cls, hex_str: str) -> TCPState:
        return cls(int(hex_str, 16))


# Status reported for sockets that have no state machine (UDP, UNIX).
STATUS_NONE = "NONE"
# Status reported for a TCP state code we don't have in TCPState.
STATUS_UNKNOWN = "UNKNOWN"


def proto_label(family: int, sock_type: int | None) -> str:
    """Short protocol label, e.g. "tcp4", "udp6" or "unix"."""
    if family == socket.AF_UNIX:
        return "unix"
    base = "tcp" if sock_type == socket.SOCK_STREAM else "udp"
    return base + ("6" if family == socket.AF_INET6 else "4")


@dataclass(frozen=True)
class ConnectionKind:
    """One kernel socket table: its file name under net/ and what it holds."""

    filename: str
    family: int
    type: int | None = None

    @property
    def label(self) -> str:
        return proto_label(self.family, self.type)


class InodeOwner(NamedTuple):
    """A (pid, fd) pair referencing a socket inode."""

    pid: int
    fd: int


@dataclass
class InterfaceCounters:
    """Per-interface counters from /proc/net/dev."""

    name: str
    bytes_sent: int = 0
    bytes_recv: int = 0
    packets_sent: int = 0
    packets_recv: int = 0
    errin: int = 0
    errout: int = 0
    dropin: int = 0
    dropout: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class ProtocolCounters:
    """Counters for one protocol section of /proc/net/snmp."""

    protocol: str
    stats: dict[str, int] = field(default_factory=dict)

    def as_dict(self) -> dict:
        return {"protocol": self.protocol, "stats": dict(self.stats)}


@dataclass
class FilterStat:
    """Connection tracking table occupancy."""

    conntrack_count: int
    conntrack_max: int

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Address:
    ip: str = ""
    port: int = 0


@dataclass(frozen=True)
class ConnectionRecord:
    """A single socket from one of the /proc/net tables.

    Hashable; equality covers every field except ``path``, which UNIX sockets
    already carry in ``laddr.ip``.
    """

    fd: int
    family: int
    type: int
    laddr: Address
    raddr: Address
    status: str
    pid: int
    path: str = field(default="", compare=False)

    @property
    def proto(self) -> str:
        return proto_label(self.family, self.type)

    def as_dict(self) -> dict:
        return {
            "fd": self.fd,
            "family": self.family,
            "type": self.type,
            "localaddr": {"ip": self.laddr.ip, "port": self.laddr.port},
            "remoteaddr": {"ip": self.raddr.ip, "port": self.raddr.port},
            "status": self.status,
            "pid": self.pid,
        }


@dataclass
class ConnectionSummary:
    """Aggregate counts over one connection snapshot."""

    total: int = 0
    listening: int = 0
    established: int = 0
    by_status: dict[str, int] = field(default_factory=dict)
    by_proto: dict[str, int] = field(default_factory=dict)
    pids: set[int] = field(default_factory=set)

    @property
    def process_count(self) -> int:
        return len(self.pids)

    def as_dict(self) -> dict:
        return {
            "total": self.total,
            "listening": self.listening,
            "established": self.established,
            "by_status": dict(self.by_status),
            "by_proto": dict(self.by_proto),
            "processes": self.process_count,
        }
