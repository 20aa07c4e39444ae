"""Header bar widget showing hostname, uptime, and snapshot scope."""

from __future__ import annotations

import platform
from pathlib import Path

from textual.widgets import Static

from netprobe.procfs import host_proc
from netprobe.utils import format_duration


class HeaderBar(Static):
    """Top bar: hostname, uptime, kind and procfs root."""

    DEFAULT_CSS = """
    HeaderBar {
        dock: top;
        height: 1;
        background: $accent;
        color: $text;
        text-style: bold;
    }
    """

    def __init__(self, proc_path: str | None = None) -> None:
        super().__init__()
        self._proc_path = proc_path
        self._kind = "all"
        self._pid = 0

    def on_mount(self) -> None:
        self._refresh_display()

    def set_scope(self, kind: str, pid: int = 0) -> None:
        self._kind = kind
        self._pid = pid
        self._refresh_display()

    def _refresh_display(self) -> None:
        hostname = platform.node() or "unknown"
        root = host_proc(proc_path=self._proc_path)
        parts = [
            f" netprobe | {hostname}",
            f"Up: {_get_uptime(root)}",
            f"Kind: {self._kind}",
        ]
        if self._pid:
            parts.append(f"PID: {self._pid}")
        parts.append(f"Root: {root}")
        self.update(" | ".join(parts) + " ")


def _get_uptime(root: str) -> str:
    """Read system uptime from <root>/uptime."""
    try:
        text = (Path(root) / "uptime").read_text()
        seconds = float(text.split()[0])
        return format_duration(seconds)
    except (OSError, ValueError, IndexError):
        return "?"
