"""Tests for netprobe.collectors.counters."""

import textwrap

import pytest

from netprobe.collectors.counters import (
    get_filter_counters,
    get_interface_counters,
    get_interface_counters_from_file,
    get_protocol_counters,
    sum_interface_counters,
)
from netprobe.errors import FormatError
from netprobe.models import InterfaceCounters

HEADER = (
    "Inter-|   Receive                                                |  Transmit\n"
    " face |bytes    packets errs drop fifo frame compressed multicast|bytes    packets errs drop fifo colls carrier compressed\n"
)


class TestInterfaceCounters:
    def test_per_interface(self, tmp_proc):
        nics = get_interface_counters(True, proc_path=str(tmp_proc))
        assert [n.name for n in nics] == ["lo", "eth0"]
        eth0 = nics[1]
        assert eth0 == InterfaceCounters(
            name="eth0",
            bytes_recv=100,
            packets_recv=200,
            errin=3,
            dropin=4,
            bytes_sent=900,
            packets_sent=1000,
            errout=11,
            dropout=14,
        )

    def test_summed(self, tmp_proc):
        nics = get_interface_counters(False, proc_path=str(tmp_proc))
        assert nics == [
            InterfaceCounters(
                name="all",
                bytes_recv=1100,
                packets_recv=210,
                errin=3,
                dropin=4,
                bytes_sent=1900,
                packets_sent=1010,
                errout=11,
                dropout=14,
            )
        ]

    def test_from_file_sum_matches_rows(self, tmp_path):
        path = tmp_path / "dev"
        path.write_text(HEADER + textwrap.dedent("""\
              a: 1 2 3 4 0 0 0 0 5 6 7 0 0 8 0 0
              b: 10 20 30 40 0 0 0 0 50 60 70 0 0 80 0 0
              c: 100 200 300 400 0 0 0 0 500 600 700 0 0 800 0 0
        """))
        rows = get_interface_counters_from_file(True, str(path))
        total = get_interface_counters_from_file(False, str(path))[0]
        assert len(rows) == 3
        assert total.name == "all"
        assert total.bytes_recv == 111
        assert total.packets_recv == 222
        assert total.errin == 333
        assert total.dropin == 444
        assert total.bytes_sent == 555
        assert total.packets_sent == 666
        assert total.errout == 777
        assert total.dropout == 888

    def test_no_space_after_colon(self, tmp_path):
        path = tmp_path / "dev"
        path.write_text(HEADER + "eth1:5 6 7 8 0 0 0 0 9 10 11 0 0 12 0 0\n")
        nic = get_interface_counters_from_file(True, str(path))[0]
        assert nic.name == "eth1"
        assert nic.bytes_recv == 5
        assert nic.dropout == 12

    def test_blank_lines_skipped(self, tmp_path):
        path = tmp_path / "dev"
        path.write_text(HEADER + "\n  lo: 1 1 0 0 0 0 0 0 1 1 0 0 0 0 0 0\n\n")
        assert len(get_interface_counters_from_file(True, str(path))) == 1

    def test_non_numeric_is_fatal(self, tmp_path):
        path = tmp_path / "dev"
        path.write_text(HEADER + "  lo: 1 x 0 0 0 0 0 0 1 1 0 0 0 0 0 0\n")
        with pytest.raises(FormatError):
            get_interface_counters_from_file(True, str(path))

    def test_short_row_is_fatal(self, tmp_path):
        path = tmp_path / "dev"
        path.write_text(HEADER + "  lo: 1 2 3\n")
        with pytest.raises(FormatError):
            get_interface_counters_from_file(True, str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_interface_counters_from_file(True, str(tmp_path / "dev"))

    def test_empty_sum(self):
        assert sum_interface_counters([]) == InterfaceCounters(name="all")


class TestProtocolCounters:
    def test_all_by_default(self, tmp_proc):
        stats = get_protocol_counters(proc_path=str(tmp_proc))
        assert [s.protocol for s in stats] == ["ip", "icmp", "tcp", "udp"]

    def test_requested_only(self, tmp_proc):
        stats = get_protocol_counters(["tcp"], proc_path=str(tmp_proc))
        assert len(stats) == 1
        assert stats[0].protocol == "tcp"
        assert stats[0].stats == {
            "RtoAlgorithm": 1,
            "RtoMin": 200,
            "RtoMax": 120000,
            "MaxConn": -1,
            "ActiveOpens": 42,
        }

    def test_case_insensitive(self, tmp_proc):
        stats = get_protocol_counters(["UDP", "Ip"], proc_path=str(tmp_proc))
        assert [s.protocol for s in stats] == ["ip", "udp"]
        assert stats[1].stats == {"InDatagrams": 100, "NoPorts": 2}

    def test_absent_protocol(self, tmp_proc):
        assert get_protocol_counters(["udplite"], proc_path=str(tmp_proc)) == []

    def _snmp(self, tmp_path, body):
        root = tmp_path / "proc"
        (root / "net").mkdir(parents=True)
        (root / "net" / "snmp").write_text(textwrap.dedent(body))
        return str(root)

    def test_mismatched_columns(self, tmp_path):
        root = self._snmp(tmp_path, """\
            Tcp: RtoAlgorithm RtoMin RtoMax
            Tcp: 1 200
        """)
        with pytest.raises(FormatError):
            get_protocol_counters(["tcp"], proc_path=root)

    def test_mismatch_in_unrequested_protocol_ignored(self, tmp_path):
        root = self._snmp(tmp_path, """\
            Tcp: RtoAlgorithm RtoMin RtoMax
            Tcp: 1 200
            Udp: InDatagrams
            Udp: 7
        """)
        stats = get_protocol_counters(["udp"], proc_path=root)
        assert stats[0].stats == {"InDatagrams": 7}

    def test_missing_colon(self, tmp_path):
        root = self._snmp(tmp_path, """\
            garbage line
            Tcp: 1
        """)
        with pytest.raises(FormatError):
            get_protocol_counters(["tcp"], proc_path=root)

    def test_non_numeric_value(self, tmp_path):
        root = self._snmp(tmp_path, """\
            Udp: InDatagrams NoPorts
            Udp: 1 many
        """)
        with pytest.raises(FormatError):
            get_protocol_counters(["udp"], proc_path=root)

    def test_missing_value_line(self, tmp_path):
        root = self._snmp(tmp_path, """\
            Udp: InDatagrams NoPorts
        """)
        with pytest.raises(FormatError):
            get_protocol_counters(["udp"], proc_path=root)


class TestFilterCounters:
    def test_read(self, tmp_proc):
        stats = get_filter_counters(proc_path=str(tmp_proc))
        assert len(stats) == 1
        assert stats[0].conntrack_count == 42
        assert stats[0].conntrack_max == 262144

    def test_missing_count(self, tmp_proc):
        (tmp_proc / "sys" / "net" / "netfilter" / "nf_conntrack_count").unlink()
        with pytest.raises(FileNotFoundError):
            get_filter_counters(proc_path=str(tmp_proc))

    def test_missing_max(self, tmp_proc):
        (tmp_proc / "sys" / "net" / "netfilter" / "nf_conntrack_max").unlink()
        with pytest.raises(FileNotFoundError):
            get_filter_counters(proc_path=str(tmp_proc))

    def test_empty_file(self, tmp_proc):
        (tmp_proc / "sys" / "net" / "netfilter" / "nf_conntrack_count").write_text("")
        with pytest.raises(FormatError):
            get_filter_counters(proc_path=str(tmp_proc))
