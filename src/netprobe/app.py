"""netprobe Textual application."""

from __future__ import annotations

from textual.app import App

from netprobe.config import AppConfig
from netprobe.screens.dashboard import DashboardScreen


class NetprobeApp(App):
    """Interactive snapshot viewer."""

    TITLE = "netprobe"

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh", "Refresh"),
        ("k", "cycle_kind", "Kind"),
        ("s", "cycle_sort", "Sort"),
        ("question_mark", "help", "Help"),
    ]

    def __init__(self, config: AppConfig) -> None:
        super().__init__()
        self.config = config

    def on_mount(self) -> None:
        self.push_screen(DashboardScreen(config=self.config))

    def _delegate(self, action: str) -> None:
        """Delegate an action to the current screen if it supports it."""
        screen = self.screen
        method = getattr(screen, action, None)
        if method:
            method()

    def action_refresh(self) -> None:
        self._delegate("action_refresh")

    def action_cycle_kind(self) -> None:
        self._delegate("action_cycle_kind")

    def action_cycle_sort(self) -> None:
        self._delegate("action_cycle_sort")

    def action_help(self) -> None:
        from netprobe.screens.help_screen import HelpScreen

        self.push_screen(HelpScreen())
