"""Sortable connections table widget."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.widgets import DataTable, Static

from netprobe.models import ConnectionRecord
from netprobe.render import CONNECTION_COLUMNS, SORT_KEYS, connection_row, sort_connections


class ConnectionsTable(Static):
    """DataTable listing the sockets of the current snapshot."""

    DEFAULT_CSS = """
    ConnectionsTable {
        height: 1fr;
        width: 2fr;
    }
    ConnectionsTable DataTable {
        height: 1fr;
    }
    """

    def __init__(self, sort_key: str = "proto") -> None:
        super().__init__()
        self._sort_key = sort_key if sort_key in SORT_KEYS else SORT_KEYS[0]
        self._connections: list[ConnectionRecord] = []

    def compose(self) -> ComposeResult:
        table = DataTable(id="conn-table", cursor_type="row")
        yield table

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        for key, label in CONNECTION_COLUMNS:
            table.add_column(label, key=key)

    @property
    def sort_key(self) -> str:
        return self._sort_key

    def cycle_sort(self) -> None:
        """Cycle through sort columns."""
        idx = SORT_KEYS.index(self._sort_key)
        self._sort_key = SORT_KEYS[(idx + 1) % len(SORT_KEYS)]
        self.update_data(self._connections)

    def update_data(self, connections: list[ConnectionRecord]) -> None:
        """Replace all table data with a new snapshot."""
        self._connections = connections
        table = self.query_one(DataTable)
        cursor_row = table.cursor_row

        table.clear()
        for conn in sort_connections(connections, self._sort_key):
            table.add_row(*connection_row(conn))

        if connections and cursor_row < len(connections):
            table.move_cursor(row=cursor_row)
