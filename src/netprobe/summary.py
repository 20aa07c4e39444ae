"""Aggregate statistics over a connection snapshot."""

from __future__ import annotations

from collections.abc import Iterable

from netprobe.models import ConnectionRecord, ConnectionSummary, TCPState


def summarize(connections: Iterable[ConnectionRecord]) -> ConnectionSummary:
    """Count connections by status and protocol, and the pids owning them."""
    summary = ConnectionSummary()
    for conn in connections:
        summary.total += 1
        summary.by_status[conn.status] = summary.by_status.get(conn.status, 0) + 1
        summary.by_proto[conn.proto] = summary.by_proto.get(conn.proto, 0) + 1
        if conn.status == TCPState.LISTEN.name:
            summary.listening += 1
        elif conn.status == TCPState.ESTABLISHED.name:
            summary.established += 1
        if conn.pid:
            summary.pids.add(conn.pid)
    return summary
