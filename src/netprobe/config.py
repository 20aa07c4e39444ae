"""Configuration loading and management."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from netprobe.errors import ConfigError


@dataclass
class AppConfig:
    """Application configuration with sensible defaults."""

    # procfs root; None defers to $HOST_PROC, then /proc
    proc_path: str | None = None

    # Connections
    kind: str = "all"
    pid: int = 0
    sort_key: str = "proto"

    # Counters
    per_interface: bool = True
    protocols: list[str] = field(default_factory=list)

    # Output: "table" or "json"
    output: str = "table"

    @classmethod
    def load(
        cls,
        config_path: str | None = None,
        cli_overrides: dict | None = None,
    ) -> AppConfig:
        """Load config from TOML file with CLI overrides.

        Resolution order: CLI flag > env var > config file > defaults
        """
        config = cls()

        toml_path = _resolve_config_path(config_path)
        if toml_path and toml_path.exists():
            with open(toml_path, "rb") as f:
                try:
                    data = tomllib.load(f)
                except tomllib.TOMLDecodeError as e:
                    raise ConfigError(f"{toml_path}: {e}") from e
            _apply_toml(config, data)

        _apply_env(config)

        if cli_overrides:
            _apply_overrides(config, cli_overrides)

        return config


def _resolve_config_path(explicit_path: str | None) -> Path | None:
    """Resolve config file path."""
    if explicit_path:
        return Path(explicit_path)
    xdg = os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    candidates = [
        Path(xdg) / "netprobe" / "config.toml",
        Path.home() / ".netprobe.toml",
    ]
    for p in candidates:
        if p.exists():
            return p
    return None


def _apply_toml(config: AppConfig, data: dict) -> None:
    """Apply TOML data to config."""
    for key in ("proc_path", "output"):
        if key in data:
            setattr(config, key, data[key])

    if "connections" in data:
        conns = data["connections"]
        if "kind" in conns:
            config.kind = str(conns["kind"])
        if "pid" in conns:
            try:
                config.pid = int(conns["pid"])
            except ValueError:
                raise ConfigError(f"connections.pid: invalid value {conns['pid']!r}") from None
        if "sort" in conns:
            config.sort_key = str(conns["sort"])

    if "counters" in data:
        counters = data["counters"]
        if "per_interface" in counters:
            config.per_interface = bool(counters["per_interface"])
        if "protocols" in counters:
            config.protocols = [str(p) for p in counters["protocols"]]


def _apply_env(config: AppConfig) -> None:
    """Apply environment variable overrides (NETPROBE_ prefix)."""
    env_map = {
        "NETPROBE_PROC_PATH": ("proc_path", str),
        "NETPROBE_KIND": ("kind", str),
        "NETPROBE_PID": ("pid", int),
        "NETPROBE_OUTPUT": ("output", str),
        "NETPROBE_PER_INTERFACE": ("per_interface", lambda v: v.lower() in ("1", "true", "yes")),
    }
    for env_key, (attr, converter) in env_map.items():
        val = os.environ.get(env_key)
        if val is None:
            continue
        try:
            setattr(config, attr, converter(val))
        except ValueError:
            raise ConfigError(f"{env_key}: invalid value {val!r}") from None


def _apply_overrides(config: AppConfig, overrides: dict) -> None:
    """Apply CLI argument overrides."""
    for key, value in overrides.items():
        if value is not None and hasattr(config, key):
            setattr(config, key, value)
