"""Read-only network telemetry from the Linux procfs."""

from netprobe.collectors.connections import (
    KINDS,
    get_connections,
    get_connections_for_process,
)
from netprobe.collectors.counters import (
    PROTOCOLS,
    get_filter_counters,
    get_interface_counters,
    get_interface_counters_from_file,
    get_protocol_counters,
)
from netprobe.errors import (
    ConfigError,
    FormatError,
    InvalidArgumentError,
    MalformedInputError,
    NetprobeError,
)
from netprobe.procfs import list_process_ids

__version__ = "0.1.0"

__all__ = [
    "KINDS",
    "PROTOCOLS",
    "ConfigError",
    "FormatError",
    "InvalidArgumentError",
    "MalformedInputError",
    "NetprobeError",
    "get_connections",
    "get_connections_for_process",
    "get_filter_counters",
    "get_interface_counters",
    "get_interface_counters_from_file",
    "get_protocol_counters",
    "list_process_ids",
]
