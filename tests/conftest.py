"""Shared test fixtures for netprobe tests."""

from __future__ import annotations

import os
import textwrap

import pytest

from netprobe.config import AppConfig

TCP = textwrap.dedent("""\
      sl  local_address rem_address   st tx_queue rx_queue tr tm->when retrnsmt   uid  timeout inode
       0: 0100007F:0050 00000000:0000 0A 00000000:00000000 00:00000000 00000000     0        0 1001 1 0000000000000000 100 0 0 10 0
       1: 0500000A:0016 6401A8C0:3039 01 00000000:00000000 02:000AFB1E 00000000     0        0 1002 4 0000000000000000 20 4 30 10 -1
       2: 0500000A:C000 08080808:01BB 06 00000000:00000000 03:00001234 00000000     0        0 0 3 0000000000000000
       3: ZZZZZZZZ:0016 00000000:0000 0A 00000000:00000000 00:00000000 00000000     0        0 1003 1 0000000000000000 100 0 0 10 0
       4: 0100007F:0050 00000000:0000
""")

TCP6 = textwrap.dedent("""\
      sl  local_address                         remote_address                        st tx_queue rx_queue tr tm->when retrnsmt   uid  timeout inode
       0: 00000000000000000000000001000000:0277 00000000000000000000000000000000:0000 0A 00000000:00000000 00:00000000 00000000     0        0 2001 1 0000000000000000 100 0 0 10 0
       1: 0085002452100113070057A13F025401:0035 00000000000000000000000000000000:0000 0A 00000000:00000000 00:00000000 00000000     0        0 2002 1 0000000000000000 100 0 0 10 0
""")

UDP = textwrap.dedent("""\
       sl  local_address rem_address   st tx_queue rx_queue tr tm->when retrnsmt   uid  timeout inode ref pointer drops
      0: 3500007F:0035 00000000:0000 07 00000000:00000000 00:00000000 00000000   101        0 3001 2 0000000000000000 0
""")

UNIX = textwrap.dedent("""\
    Num       RefCount Protocol Flags    Type St Inode Path
    0000000000000000: 00000002 00000000 00010000 0001 01 4001 /run/dbus/system_bus_socket
    0000000000000000: 00000003 00000000 00000000 0001 03 4002
    0000000000000000: 00000002 00000000 00010000 0002 01 4003 /run/unowned.sock
""")

NET_DEV = textwrap.dedent("""\
    Inter-|   Receive                                                |  Transmit
     face |bytes    packets errs drop fifo frame compressed multicast|bytes    packets errs drop fifo colls carrier compressed
        lo:    1000      10    0    0    0     0          0         0     1000      10    0    0    0     0       0          0
      eth0:     100     200    3    4    5     6          7         8      900    1000   11   12   13    14      15         16
""")

SNMP = textwrap.dedent("""\
    Ip: Forwarding DefaultTTL InReceives
    Ip: 1 64 12345
    Icmp: InMsgs InErrors
    Icmp: 10 0
    Tcp: RtoAlgorithm RtoMin RtoMax MaxConn ActiveOpens
    Tcp: 1 200 120000 -1 42
    Udp: InDatagrams NoPorts
    Udp: 100 2
""")

# pid -> {fd: link target}
FD_LINKS = {
    100: {
        0: "/dev/null",
        3: "socket:[1001]",
        4: "socket:[4001]",
        5: "socket:[4002]",
        6: "pipe:[999]",
    },
    200: {
        3: "socket:[1002]",
        7: "socket:[4001]",
        8: "socket:[2001]",
    },
    400: {
        1: "/dev/pts/0",
    },
}


def make_fd_links(root, pid: int, links: dict[int, str]) -> None:
    fd_dir = root / str(pid) / "fd"
    fd_dir.mkdir(parents=True)
    for fd, target in links.items():
        os.symlink(target, fd_dir / str(fd))


@pytest.fixture
def fd_links():
    """Helper for tests that build their own /proc/<pid>/fd trees."""
    return make_fd_links


@pytest.fixture
def tmp_proc(tmp_path):
    """Create a mock /proc filesystem structure.

    udp6 is left out to stand in for a kernel without IPv6.
    """
    root = tmp_path / "proc"
    net_dir = root / "net"
    net_dir.mkdir(parents=True)
    (net_dir / "tcp").write_text(TCP)
    (net_dir / "tcp6").write_text(TCP6)
    (net_dir / "udp").write_text(UDP)
    (net_dir / "unix").write_text(UNIX)
    (net_dir / "dev").write_text(NET_DEV)
    (net_dir / "snmp").write_text(SNMP)

    nf_dir = root / "sys" / "net" / "netfilter"
    nf_dir.mkdir(parents=True)
    (nf_dir / "nf_conntrack_count").write_text("42\n")
    (nf_dir / "nf_conntrack_max").write_text("262144\n")

    (root / "uptime").write_text("3661.25 7000.00\n")

    for pid, links in FD_LINKS.items():
        make_fd_links(root, pid, links)
    # A process that exited: its directory is left but fd/ is gone.
    (root / "300").mkdir()
    (root / "self").mkdir()

    return root


@pytest.fixture
def sample_config(tmp_path):
    """Create a sample config file and return its path."""
    config_content = textwrap.dedent("""\
        proc_path = "/host/proc"
        output = "json"

        [connections]
        kind = "tcp"
        pid = 1234
        sort = "status"

        [counters]
        per_interface = false
        protocols = ["tcp", "udp"]
    """)
    config_file = tmp_path / "config.toml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def default_config():
    """Return a default AppConfig."""
    return AppConfig()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Keep the host's netprobe settings and config files out of tests."""
    for var in (
        "HOST_PROC",
        "NETPROBE_PROC_PATH",
        "NETPROBE_KIND",
        "NETPROBE_PID",
        "NETPROBE_OUTPUT",
        "NETPROBE_PER_INTERFACE",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
