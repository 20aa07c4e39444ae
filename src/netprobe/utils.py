"""Utility functions for decoding /proc/net addresses and formatting output."""

from __future__ import annotations

import ipaddress
import socket
import struct

from netprobe.errors import MalformedInputError
from netprobe.models import Address


def parse_hex_ipv4(hex_str: str) -> str:
    """Parse a hex-encoded IPv4 address from /proc/net/tcp (little-endian).

    /proc/net/tcp stores IPv4 as a little-endian 32-bit hex string.
    E.g., "0100007F" -> 127.0.0.1
    """
    return str(ipaddress.IPv4Address(_unhex(hex_str, 4)[::-1]))


def parse_hex_ipv6(hex_str: str) -> str:
    """Parse a hex-encoded IPv6 address from /proc/net/tcp6.

    /proc/net/tcp6 stores IPv6 as four little-endian 32-bit words, so each
    4-byte group is reversed on its own, not the whole 16 bytes.
    E.g., "00000000000000000000000001000000" -> ::1

    IPv4-mapped addresses (dual-stack listeners) are returned in dotted
    form: "0000000000000000FFFF00000500000A" -> 10.0.0.5
    """
    packed = struct.pack(">4I", *struct.unpack("<4I", _unhex(hex_str, 16)))
    addr = ipaddress.IPv6Address(packed)
    if addr.ipv4_mapped is not None:
        return str(addr.ipv4_mapped)
    return str(addr)


def parse_hex_port(hex_str: str) -> int:
    """Parse a hex-encoded port number (big-endian)."""
    try:
        port = int(hex_str, 16)
    except ValueError:
        raise MalformedInputError(f"invalid port {hex_str!r}") from None
    if port < 0:
        raise MalformedInputError(f"invalid port {hex_str!r}")
    return port


def decode_address(family: int, token: str) -> Address:
    """Decode an ``ADDR:PORT`` token from /proc/net/{tcp,tcp6,udp,udp6}.

    Examples:
        decode_address(AF_INET, "0500000A:0016") -> Address("10.0.0.5", 22)
        decode_address(AF_INET6, "0085002452100113070057A13F025401:0035")
            -> Address("2400:8500:1301:1052:a157:7:154:23f", 53)
    """
    parts = token.split(":")
    if len(parts) != 2:
        raise MalformedInputError(f"does not contain port: {token!r}")
    addr_hex, port_hex = parts
    port = parse_hex_port(port_hex)
    if family == socket.AF_INET:
        ip = parse_hex_ipv4(addr_hex)
    else:
        ip = parse_hex_ipv6(addr_hex)
    return Address(ip=ip, port=port)


def _unhex(hex_str: str, size: int) -> bytes:
    try:
        raw = bytes.fromhex(hex_str)
    except ValueError as e:
        raise MalformedInputError(f"decode error for {hex_str!r}: {e}") from e
    if len(raw) != size:
        raise MalformedInputError(
            f"expected {size} address bytes, got {len(raw)} in {hex_str!r}"
        )
    return raw


def format_address(addr: Address) -> str:
    """Render an Address the way netstat does: ``ip:port``, ``[ip6]:port``."""
    if not addr.ip and not addr.port:
        return "-"
    if not addr.port:
        return addr.ip
    if ":" in addr.ip:
        return f"[{addr.ip}]:{addr.port}"
    return f"{addr.ip}:{addr.port}"


def format_bytes(num_bytes: int | float) -> str:
    """Format byte count to human-readable string.

    Examples:
        format_bytes(0) -> "0 B"
        format_bytes(1023) -> "1023 B"
        format_bytes(1024) -> "1.0 KiB"
        format_bytes(1048576) -> "1.0 MiB"
    """
    if num_bytes < 0:
        return f"-{format_bytes(-num_bytes)}"
    for unit in ("B", "KiB", "MiB", "GiB", "TiB"):
        if abs(num_bytes) < 1024.0 or unit == "TiB":
            if unit == "B":
                return f"{int(num_bytes)} {unit}"
            return f"{num_bytes:.1f} {unit}"
        num_bytes /= 1024.0
    return f"{num_bytes:.1f} TiB"


def format_duration(seconds: float) -> str:
    """Format seconds into a human-readable duration string.

    Examples:
        format_duration(45) -> "45s"
        format_duration(125) -> "2m 5s"
        format_duration(3661) -> "1h 1m"
        format_duration(86400) -> "1d 0h"
    """
    if seconds < 0:
        return "0s"
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds}s"
    minutes, secs = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"
    hours, minutes = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {minutes}m"
    days, hours = divmod(hours, 24)
    return f"{days}d {hours}h"
