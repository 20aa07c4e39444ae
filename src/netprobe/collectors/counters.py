"""Counter collectors for /proc/net/dev, /proc/net/snmp and conntrack.

All three are strict: a field that should be numeric and isn't raises
FormatError rather than being skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from netprobe.errors import FormatError
from netprobe.models import FilterStat, InterfaceCounters, ProtocolCounters
from netprobe.procfs import host_proc, read_ints, read_lines

logger = logging.getLogger(__name__)

PROTOCOLS = ("ip", "icmp", "icmpmsg", "tcp", "udp", "udplite")

# Positions in the /proc/net/dev columns after "iface:".
# Receive: bytes packets errs drop fifo frame compressed multicast
# Transmit: bytes packets errs drop fifo colls carrier compressed
_DEV_FIELDS = (
    ("bytes_recv", 0),
    ("packets_recv", 1),
    ("errin", 2),
    ("dropin", 3),
    ("bytes_sent", 8),
    ("packets_sent", 9),
    ("errout", 10),
    ("dropout", 13),
)
_DEV_MIN_FIELDS = 14


def get_interface_counters(
    per_interface: bool = True,
    proc_path: str | None = None,
) -> list[InterfaceCounters]:
    """Read network I/O counters for every interface from /proc/net/dev.

    With ``per_interface=False`` the result is a single record named "all"
    holding the sum over every interface.
    """
    return get_interface_counters_from_file(
        per_interface, host_proc("net", "dev", proc_path=proc_path)
    )


def get_interface_counters_from_file(
    per_interface: bool,
    path: str,
) -> list[InterfaceCounters]:
    """Same as get_interface_counters, reading an explicit file."""
    counters: list[InterfaceCounters] = []
    for line in read_lines(path)[2:]:  # Skip the two header lines
        name, sep, rest = line.partition(":")
        name = name.strip()
        if not sep or not name:
            continue

        fields = rest.split()
        if len(fields) < _DEV_MIN_FIELDS:
            raise FormatError(
                f"{path}: expected at least {_DEV_MIN_FIELDS} fields for {name}, "
                f"got {len(fields)}"
            )
        values = {}
        for attr, idx in _DEV_FIELDS:
            try:
                values[attr] = int(fields[idx])
            except ValueError:
                raise FormatError(
                    f"{path}: non-numeric {attr} {fields[idx]!r} for {name}"
                ) from None
        counters.append(InterfaceCounters(name=name, **values))

    if not per_interface:
        return [sum_interface_counters(counters)]
    return counters


def sum_interface_counters(counters: Iterable[InterfaceCounters]) -> InterfaceCounters:
    """Fold per-interface counters into one record named "all"."""
    total = InterfaceCounters(name="all")
    for nic in counters:
        for attr, _idx in _DEV_FIELDS:
            setattr(total, attr, getattr(total, attr) + getattr(nic, attr))
    return total


def get_protocol_counters(
    protocols: Iterable[str] | None = None,
    proc_path: str | None = None,
) -> list[ProtocolCounters]:
    """Read per-protocol counters from /proc/net/snmp.

    The file is a series of line pairs, a header naming the counters and a
    line with their values, both prefixed with "Proto: ". Only the requested
    protocols (all of PROTOCOLS when none are given) are parsed.
    """
    wanted = {p.lower() for p in protocols or ()} or set(PROTOCOLS)
    path = host_proc("net", "snmp", proc_path=proc_path)
    lines = read_lines(path)

    stats: list[ProtocolCounters] = []
    i = 0
    while i < len(lines):
        header = lines[i]
        if not header.strip():
            i += 1
            continue
        prefix, sep, labels = header.partition(":")
        if not sep:
            raise FormatError(f"{path} is not formatted correctly, expected ':'")
        proto = prefix.strip().lower()
        if proto not in wanted:
            # Skip the header and its value line.
            i += 2
            continue
        if i + 1 >= len(lines):
            raise FormatError(f"{path}: no value line for {prefix}")

        names = labels.split()
        values = lines[i + 1].partition(":")[2].split()
        if len(names) != len(values):
            raise FormatError(
                f"{path} is not formatted correctly, expected same number of "
                f"columns for {prefix} ({len(names)} != {len(values)})"
            )
        counter = ProtocolCounters(protocol=proto)
        for name, value in zip(names, values):
            try:
                counter.stats[name] = int(value)
            except ValueError:
                raise FormatError(
                    f"{path}: non-numeric {prefix} {name} {value!r}"
                ) from None
        stats.append(counter)
        i += 2
    return stats


def get_filter_counters(proc_path: str | None = None) -> list[FilterStat]:
    """Read the conntrack table usage.

    Raises FileNotFoundError when the host has no connection tracking.
    """
    count_file = host_proc(
        "sys", "net", "netfilter", "nf_conntrack_count", proc_path=proc_path
    )
    max_file = host_proc(
        "sys", "net", "netfilter", "nf_conntrack_max", proc_path=proc_path
    )
    count = read_ints(count_file)
    limit = read_ints(max_file)
    if not count or not limit:
        raise FormatError(f"empty conntrack counter in {count_file} or {max_file}")
    logger.debug("conntrack %d/%d", count[0], limit[0])
    return [FilterStat(conntrack_count=count[0], conntrack_max=limit[0])]
