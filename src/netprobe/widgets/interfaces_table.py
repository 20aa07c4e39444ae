"""Per-interface counters table widget."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.widgets import DataTable, Static

from netprobe.models import InterfaceCounters
from netprobe.utils import format_bytes

COLUMNS = [
    ("name", "Iface"),
    ("recv", "Recv"),
    ("sent", "Sent"),
    ("err", "Err in/out"),
    ("drop", "Drop in/out"),
]


class InterfacesTable(Static):
    """DataTable of /proc/net/dev counters."""

    DEFAULT_CSS = """
    InterfacesTable {
        height: 1fr;
        width: 1fr;
    }
    InterfacesTable DataTable {
        height: 1fr;
    }
    """

    def compose(self) -> ComposeResult:
        yield DataTable(id="iface-table", cursor_type="row")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        for key, label in COLUMNS:
            table.add_column(label, key=key)

    def update_data(self, counters: list[InterfaceCounters]) -> None:
        table = self.query_one(DataTable)
        table.clear()
        for nic in counters:
            table.add_row(
                nic.name,
                format_bytes(nic.bytes_recv),
                format_bytes(nic.bytes_sent),
                f"{nic.errin}/{nic.errout}",
                f"{nic.dropin}/{nic.dropout}",
                key=nic.name,
            )
