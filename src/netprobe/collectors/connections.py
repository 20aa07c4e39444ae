"""Socket table collector reading /proc/net/{tcp,tcp6,udp,udp6,unix}."""

from __future__ import annotations

import logging
import socket
from types import MappingProxyType

from netprobe.collectors.inodes import InodeIndex, get_all_inodes, get_proc_inodes
from netprobe.errors import FormatError, InvalidArgumentError, MalformedInputError
from netprobe.models import (
    STATUS_NONE,
    STATUS_UNKNOWN,
    Address,
    ConnectionKind,
    ConnectionRecord,
    InodeOwner,
    TCPState,
)
from netprobe.procfs import host_proc, path_exists, read_lines
from netprobe.utils import decode_address

logger = logging.getLogger(__name__)

TCP4 = ConnectionKind("tcp", socket.AF_INET, socket.SOCK_STREAM)
TCP6 = ConnectionKind("tcp6", socket.AF_INET6, socket.SOCK_STREAM)
UDP4 = ConnectionKind("udp", socket.AF_INET, socket.SOCK_DGRAM)
UDP6 = ConnectionKind("udp6", socket.AF_INET6, socket.SOCK_DGRAM)
UNIX = ConnectionKind("unix", socket.AF_UNIX)

KINDS = MappingProxyType(
    {
        "all": (TCP4, TCP6, UDP4, UDP6, UNIX),
        "tcp": (TCP4, TCP6),
        "tcp4": (TCP4,),
        "tcp6": (TCP6,),
        "udp": (UDP4, UDP6),
        "udp4": (UDP4,),
        "udp6": (UDP6,),
        "unix": (UNIX,),
        "inet": (TCP4, TCP6, UDP4, UDP6),
        "inet4": (TCP4, UDP4),
        "inet6": (TCP6, UDP6),
    }
)

_NO_OWNER = InodeOwner(pid=0, fd=0)


def get_connections(
    kind: str = "all",
    proc_path: str | None = None,
) -> list[ConnectionRecord]:
    """Return every socket of the given kind on the system.

    ``kind`` is one of the keys of KINDS. The result has no duplicates and no
    particular order.
    """
    return _retrieve(kind, 0, proc_path)


def get_connections_for_process(
    kind: str,
    pid: int,
    proc_path: str | None = None,
) -> list[ConnectionRecord]:
    """Return the sockets of the given kind held open by one process.

    A pid with no socket descriptors (or one that has gone away) gives an
    empty list.
    """
    return _retrieve(kind, pid, proc_path)


def _retrieve(kind: str, pid: int, proc_path: str | None) -> list[ConnectionRecord]:
    if kind not in KINDS:
        raise InvalidArgumentError(
            f"invalid kind {kind!r}; choose between {', '.join(KINDS)}"
        )

    if pid:
        inodes = get_proc_inodes(pid, proc_path)
        if not inodes:
            logger.debug("pid %d has no socket descriptors", pid)
            return []
    else:
        inodes = get_all_inodes(proc_path)

    seen: set[ConnectionRecord] = set()
    connections: list[ConnectionRecord] = []
    for conn_kind in KINDS[kind]:
        path = host_proc("net", conn_kind.filename, proc_path=proc_path)
        if conn_kind.family == socket.AF_UNIX:
            rows = process_unix(path, conn_kind, inodes, pid)
        else:
            rows = process_inet(path, conn_kind, inodes, pid)
        for record in rows:
            if record in seen:
                continue
            seen.add(record)
            connections.append(record)
    return connections


def process_inet(
    path: str,
    kind: ConnectionKind,
    inodes: InodeIndex,
    filter_pid: int = 0,
) -> list[ConnectionRecord]:
    """Parse /proc/net/tcp*, /proc/net/udp*.

    Rows whose addresses fail to decode are dropped; the rest of the table is
    still returned.
    """
    if path.endswith("6") and not path_exists(path):
        # Kernel built without IPv6.
        return []

    rows: list[ConnectionRecord] = []
    for line in read_lines(path)[1:]:  # Skip header
        fields = line.split()
        if len(fields) < 10:
            continue
        local, remote, status_hex, inode = fields[1], fields[2], fields[3], fields[9]

        owners = inodes.get(inode)
        owner = owners[0] if owners else _NO_OWNER
        if filter_pid and owner.pid != filter_pid:
            continue

        if kind.type == socket.SOCK_STREAM:
            status = _tcp_status(status_hex, path)
        else:
            status = STATUS_NONE

        try:
            laddr = decode_address(kind.family, local)
            raddr = decode_address(kind.family, remote)
        except MalformedInputError as e:
            logger.debug("Skipping row in %s: %s", path, e)
            continue

        rows.append(
            ConnectionRecord(
                fd=owner.fd,
                family=kind.family,
                type=kind.type,
                laddr=laddr,
                raddr=raddr,
                status=status,
                pid=owner.pid,
            )
        )
    return rows


def process_unix(
    path: str,
    kind: ConnectionKind,
    inodes: InodeIndex,
    filter_pid: int = 0,
) -> list[ConnectionRecord]:
    """Parse /proc/net/unix.

    Unlike the inet tables, a socket type that isn't an integer means the
    table layout changed, so it raises FormatError instead of skipping.
    """
    rows: list[ConnectionRecord] = []
    for line in read_lines(path)[1:]:  # Skip header
        # Num RefCount Protocol Flags Type St Inode [Path]
        tokens = line.split(None, 7)
        if len(tokens) < 7:
            continue
        try:
            sock_type = int(tokens[4])
        except ValueError:
            raise FormatError(
                f"{path}: socket type {tokens[4]!r} is not an integer"
            ) from None
        inode = tokens[6]
        sock_path = tokens[7].rstrip() if len(tokens) == 8 else ""

        # With UNIX sockets a single inode may be shared by many descriptors.
        for owner in inodes.get(inode) or [_NO_OWNER]:
            if filter_pid and owner.pid != filter_pid:
                continue
            rows.append(
                ConnectionRecord(
                    fd=owner.fd,
                    family=kind.family,
                    type=sock_type,
                    laddr=Address(ip=sock_path),
                    raddr=Address(),
                    status=STATUS_NONE,
                    pid=owner.pid,
                    path=sock_path,
                )
            )
    return rows


def _tcp_status(status_hex: str, path: str) -> str:
    try:
        return TCPState.from_hex(status_hex).name
    except ValueError:
        logger.warning("Unknown TCP state %r in %s", status_hex, path)
        return STATUS_UNKNOWN
