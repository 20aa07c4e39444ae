"""Rich renderables for printing snapshots on a terminal."""

from __future__ import annotations

from rich.table import Table
from rich.text import Text

from netprobe.models import (
    ConnectionRecord,
    ConnectionSummary,
    FilterStat,
    InterfaceCounters,
    ProtocolCounters,
)
from netprobe.utils import format_address, format_bytes

# Column definitions: (key, label)
CONNECTION_COLUMNS = [
    ("proto", "Proto"),
    ("laddr", "Local Address"),
    ("raddr", "Remote Address"),
    ("status", "Status"),
    ("pid", "PID"),
    ("fd", "FD"),
]

SORT_KEYS = ["proto", "laddr", "status", "pid"]

STATUS_STYLES = {
    "ESTABLISHED": "green",
    "LISTEN": "cyan",
    "TIME_WAIT": "yellow",
    "CLOSE_WAIT": "yellow",
    "UNKNOWN": "bold red",
}


def sort_connections(
    connections: list[ConnectionRecord],
    key: str,
) -> list[ConnectionRecord]:
    """Sort connections by one of SORT_KEYS."""
    return sorted(connections, key=lambda c: _sort_value(c, key))


def _sort_value(conn: ConnectionRecord, key: str):
    if key == "proto":
        return (conn.proto, conn.laddr.ip, conn.laddr.port)
    elif key == "laddr":
        return (conn.laddr.ip, conn.laddr.port)
    elif key == "status":
        return (conn.status, conn.proto)
    elif key == "pid":
        return (conn.pid, conn.fd)
    return 0


def status_text(status: str) -> Text:
    return Text(status, style=STATUS_STYLES.get(status, ""))


def connection_row(conn: ConnectionRecord) -> tuple:
    """Cells for one connection, in CONNECTION_COLUMNS order."""
    return (
        conn.proto,
        Text(format_address(conn.laddr)),
        Text(format_address(conn.raddr)),
        status_text(conn.status),
        str(conn.pid) if conn.pid else "-",
        str(conn.fd) if conn.pid else "-",
    )


def connections_table(connections: list[ConnectionRecord], sort_key: str = "proto") -> Table:
    table = Table(title=f"Connections ({len(connections)})")
    for _key, label in CONNECTION_COLUMNS:
        table.add_column(label, no_wrap=True)
    for conn in sort_connections(connections, sort_key):
        table.add_row(*connection_row(conn))
    return table


def interfaces_table(counters: list[InterfaceCounters]) -> Table:
    table = Table(title="Interfaces")
    table.add_column("Interface")
    for label in ("Recv", "Pkts In", "Err In", "Drop In", "Sent", "Pkts Out", "Err Out", "Drop Out"):
        table.add_column(label, justify="right")
    for nic in counters:
        table.add_row(
            nic.name,
            format_bytes(nic.bytes_recv),
            str(nic.packets_recv),
            str(nic.errin),
            str(nic.dropin),
            format_bytes(nic.bytes_sent),
            str(nic.packets_sent),
            str(nic.errout),
            str(nic.dropout),
        )
    return table


def protocols_table(counters: list[ProtocolCounters]) -> Table:
    table = Table(title="Protocol counters")
    table.add_column("Protocol")
    table.add_column("Counter")
    table.add_column("Value", justify="right")
    for proto in counters:
        for name, value in proto.stats.items():
            table.add_row(proto.protocol, name, str(value))
    return table


def conntrack_table(stats: list[FilterStat]) -> Table:
    table = Table(title="Conntrack")
    table.add_column("Count", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Usage", justify="right")
    for stat in stats:
        usage = stat.conntrack_count / stat.conntrack_max * 100 if stat.conntrack_max else 0.0
        table.add_row(str(stat.conntrack_count), str(stat.conntrack_max), f"{usage:.1f}%")
    return table


def summary_table(summary: ConnectionSummary) -> Table:
    table = Table(title="Summary", show_header=False)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Total", str(summary.total))
    table.add_row("Listening", str(summary.listening))
    table.add_row("Established", str(summary.established))
    table.add_row("Processes", str(summary.process_count))
    for proto, count in sorted(summary.by_proto.items()):
        table.add_row(f"  {proto}", str(count))
    for status, count in sorted(summary.by_status.items()):
        table.add_row(f"  {status}", str(count))
    return table
