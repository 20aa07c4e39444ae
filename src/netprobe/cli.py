"""CLI entry point for netprobe."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from netprobe import __version__
from netprobe.collectors.connections import (
    KINDS,
    get_connections,
    get_connections_for_process,
)
from netprobe.collectors.counters import (
    PROTOCOLS,
    get_filter_counters,
    get_interface_counters,
    get_protocol_counters,
)
from netprobe.config import AppConfig
from netprobe.errors import NetprobeError
from netprobe.render import (
    SORT_KEYS,
    connections_table,
    conntrack_table,
    interfaces_table,
    protocols_table,
    summary_table,
)
from netprobe.summary import summarize

logger = logging.getLogger(__name__)

SECTIONS = ["connections", "interfaces", "protocols", "conntrack", "summary"]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="netprobe",
        description="Snapshot network counters and socket tables from /proc",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"netprobe {__version__}",
    )
    parser.add_argument(
        "section",
        nargs="?",
        choices=SECTIONS,
        default="connections",
        help="What to report (default: connections)",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to TOML config file",
    )
    parser.add_argument(
        "--proc-path",
        metavar="PATH",
        help="procfs root to read (default: $HOST_PROC or /proc)",
    )
    parser.add_argument(
        "--kind",
        choices=list(KINDS),
        help="Connection kind (default: all)",
    )
    parser.add_argument(
        "--pid",
        type=int,
        metavar="PID",
        help="Only report sockets owned by this process",
    )
    parser.add_argument(
        "--sort",
        choices=SORT_KEYS,
        help="Sort connections by column (default: proto)",
    )
    parser.add_argument(
        "--total",
        action="store_true",
        help="Sum interface counters into a single 'all' row",
    )
    parser.add_argument(
        "--protocols",
        metavar="LIST",
        help=f"Comma separated protocols for the snmp counters ({','.join(PROTOCOLS)})",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print JSON instead of tables",
    )
    parser.add_argument(
        "--tui",
        action="store_true",
        help="Open the interactive snapshot viewer",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def collect(section: str, config: AppConfig):
    """Run the collector behind a section; returns (renderable, json data)."""
    if section in ("connections", "summary"):
        if config.pid:
            conns = get_connections_for_process(config.kind, config.pid, config.proc_path)
        else:
            conns = get_connections(config.kind, config.proc_path)
        if section == "summary":
            summary = summarize(conns)
            return summary_table(summary), summary.as_dict()
        return connections_table(conns, config.sort_key), [c.as_dict() for c in conns]
    if section == "interfaces":
        nics = get_interface_counters(config.per_interface, config.proc_path)
        return interfaces_table(nics), [n.as_dict() for n in nics]
    if section == "protocols":
        protos = get_protocol_counters(config.protocols, config.proc_path)
        return protocols_table(protos), [p.as_dict() for p in protos]
    if section == "conntrack":
        stats = get_filter_counters(config.proc_path)
        return conntrack_table(stats), [s.as_dict() for s in stats]
    raise ValueError(f"unknown section {section!r}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    # Build CLI overrides dict
    overrides: dict = {}
    if args.proc_path:
        overrides["proc_path"] = args.proc_path
    if args.kind:
        overrides["kind"] = args.kind
    if args.pid is not None:
        overrides["pid"] = args.pid
    if args.sort:
        overrides["sort_key"] = args.sort
    if args.total:
        overrides["per_interface"] = False
    if args.protocols:
        overrides["protocols"] = [p.strip() for p in args.protocols.split(",") if p.strip()]
    if args.json:
        overrides["output"] = "json"

    try:
        config = AppConfig.load(config_path=args.config, cli_overrides=overrides)
    except (OSError, NetprobeError) as e:
        Console(stderr=True).print(f"error: {e}", style="bold red", markup=False)
        return 1

    if args.tui:
        from netprobe.app import NetprobeApp

        app = NetprobeApp(config)
        app.run()
        return 0

    console = Console()
    try:
        renderable, data = collect(args.section, config)
    except (OSError, NetprobeError) as e:
        logger.debug("Collecting %s failed", args.section, exc_info=True)
        Console(stderr=True).print(f"error: {e}", style="bold red", markup=False)
        return 1

    if config.output == "json":
        sys.stdout.write(json.dumps(data, indent=2) + "\n")
    else:
        console.print(renderable)
    return 0


if __name__ == "__main__":
    sys.exit(main())
