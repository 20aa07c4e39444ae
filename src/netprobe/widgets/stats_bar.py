"""Bottom stats bar widget showing snapshot totals."""

from __future__ import annotations

from textual.widgets import Static

from netprobe.models import ConnectionSummary, FilterStat


class StatsBar(Static):
    """Bottom bar: total sockets, listening, established, processes, conntrack."""

    DEFAULT_CSS = """
    StatsBar {
        dock: bottom;
        height: 1;
        background: $surface;
        color: $text-muted;
    }
    """

    def on_mount(self) -> None:
        self.update_stats(ConnectionSummary())

    def update_stats(
        self,
        summary: ConnectionSummary,
        conntrack: FilterStat | None = None,
    ) -> None:
        parts = [
            f" Sockets: {summary.total}",
            f"LISTEN: {summary.listening}",
            f"EST: {summary.established}",
            f"Procs: {summary.process_count}",
        ]
        if conntrack:
            parts.append(f"Conntrack: {conntrack.conntrack_count}/{conntrack.conntrack_max}")
        self.update(" | ".join(parts) + " ")
