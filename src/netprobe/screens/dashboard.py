"""Main dashboard screen showing one snapshot at a time."""

from __future__ import annotations

import logging

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.screen import Screen
from textual.widgets import Footer

from netprobe.collectors.connections import (
    KINDS,
    get_connections,
    get_connections_for_process,
)
from netprobe.collectors.counters import get_filter_counters, get_interface_counters
from netprobe.config import AppConfig
from netprobe.errors import NetprobeError
from netprobe.models import ConnectionRecord, FilterStat, InterfaceCounters
from netprobe.summary import summarize
from netprobe.widgets.connections_table import ConnectionsTable
from netprobe.widgets.header_bar import HeaderBar
from netprobe.widgets.interfaces_table import InterfacesTable
from netprobe.widgets.stats_bar import StatsBar

logger = logging.getLogger(__name__)

KIND_CYCLE = list(KINDS)


class DashboardScreen(Screen):
    """Connections and interface counters, refreshed on demand."""

    def __init__(self, config: AppConfig) -> None:
        super().__init__()
        self.config = config
        self.kind = config.kind if config.kind in KINDS else "all"

    def compose(self) -> ComposeResult:
        yield HeaderBar(proc_path=self.config.proc_path)
        with Horizontal(id="main-panels"):
            yield ConnectionsTable(sort_key=self.config.sort_key)
            yield InterfacesTable()
        yield StatsBar()
        yield Footer()

    def on_mount(self) -> None:
        self._header.set_scope(self.kind, self.config.pid)
        self.take_snapshot()

    @property
    def _header(self) -> HeaderBar:
        return self.query_one(HeaderBar)

    @property
    def _table(self) -> ConnectionsTable:
        return self.query_one(ConnectionsTable)

    @property
    def _interfaces(self) -> InterfacesTable:
        return self.query_one(InterfacesTable)

    @property
    def _stats(self) -> StatsBar:
        return self.query_one(StatsBar)

    # --- Snapshot worker ---

    def take_snapshot(self) -> None:
        kind = self.kind
        pid = self.config.pid
        proc_path = self.config.proc_path
        per_interface = self.config.per_interface

        def _work() -> None:
            try:
                if pid:
                    conns = get_connections_for_process(kind, pid, proc_path)
                else:
                    conns = get_connections(kind, proc_path)
                nics = get_interface_counters(per_interface, proc_path)
            except (OSError, NetprobeError) as e:
                logger.debug("Snapshot failed", exc_info=True)
                self.app.call_from_thread(self.notify, f"Snapshot failed: {e}", severity="error")
                return
            conntrack: FilterStat | None = None
            try:
                conntrack = get_filter_counters(proc_path)[0]
            except (OSError, NetprobeError) as e:
                # Hosts without nf_conntrack loaded.
                logger.debug("No conntrack counters: %s", e)
            self.app.call_from_thread(self.show_snapshot, conns, nics, conntrack)

        self.run_worker(_work, thread=True, exclusive=True, group="snapshot")

    # --- UI refresh (main thread) ---

    def show_snapshot(
        self,
        connections: list[ConnectionRecord],
        interfaces: list[InterfaceCounters],
        conntrack: FilterStat | None = None,
    ) -> None:
        self._table.update_data(connections)
        self._interfaces.update_data(interfaces)
        self._stats.update_stats(summarize(connections), conntrack)

    # --- Actions ---

    def action_refresh(self) -> None:
        self.take_snapshot()

    def action_cycle_sort(self) -> None:
        self._table.cycle_sort()

    def action_cycle_kind(self) -> None:
        idx = KIND_CYCLE.index(self.kind)
        self.kind = KIND_CYCLE[(idx + 1) % len(KIND_CYCLE)]
        self._header.set_scope(self.kind, self.config.pid)
        self.notify(f"Kind: {self.kind}")
        self.take_snapshot()
