"""Exception types raised by the procfs collectors.

I/O failures are not wrapped: a missing or unreadable pseudo-file surfaces as
the builtin ``OSError`` family (``FileNotFoundError``, ``PermissionError``).
"""

from __future__ import annotations


class NetprobeError(Exception):
    """Base class for netprobe errors."""


class FormatError(NetprobeError, ValueError):
    """A procfs file does not have the structure we expect."""


class MalformedInputError(NetprobeError, ValueError):
    """A single address token could not be decoded.

    Row-scoped: the connection parsers catch it and drop the row.
    """


class InvalidArgumentError(NetprobeError, ValueError):
    """The caller asked for something we don't know, e.g. an unknown kind."""


class ConfigError(NetprobeError, ValueError):
    """A config file or NETPROBE_* environment variable holds a bad value."""
