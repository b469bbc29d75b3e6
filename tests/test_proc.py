"""Tests for the cgroup.procs reader."""

import os

import psutil
import pytest

from container_profiler.collectors import proc
from container_profiler.collectors.proc import ProcCollector
from container_profiler.models import ContainerStat


class TestPids:
    """Tests for ProcCollector.pids."""

    def test_bad_lines_are_discarded(self, cgroupfs):
        """Non numeric lines are skipped without failing the read."""
        cgroupfs.write("cpuacct", "abc123", "cgroup.procs", "1\n2\nbad\n3\n")

        assert ProcCollector.pids_docker("abc123") == [1, 2, 3]

    def test_explicit_base(self, tmp_path):
        """A supplied base skips mount discovery."""
        (tmp_path / "abc123").mkdir()
        (tmp_path / "abc123" / "cgroup.procs").write_text("10\n20\n")

        assert ProcCollector.pids("abc123", str(tmp_path)) == [10, 20]

    def test_empty_group(self, cgroupfs):
        """A group without processes yields no PIDs."""
        cgroupfs.write("cpuacct", "abc123", "cgroup.procs", "")

        assert ProcCollector.pids_docker("abc123") == []

    def test_systemd_layout(self, cgroupfs):
        """PIDs are read from system.slice when the docker dir is absent."""
        cgroupfs.write("cpuacct", "abc123", "cgroup.procs", "42\n", systemd=True)

        assert ProcCollector.pids_docker("abc123") == [42]

    def test_missing_group_raises(self, cgroupfs):
        """A container that is gone surfaces as OSError."""
        with pytest.raises(OSError):
            ProcCollector.pids_docker("gone")

    def test_parse_procs_reports_skipped(self):
        """The decoder returns the discarded lines."""
        assert ProcCollector.parse_procs(["5", "x", "6"]) == ([5, 6], ["x"])

    def test_out_of_range_pids_are_skipped(self):
        """Only plain decimals within the signed 32-bit range are PIDs."""
        lines = ["1_0", "-3", "99999999999", "2147483647", " 7 "]

        pids, skipped = ProcCollector.parse_procs(lines)

        assert pids == [2147483647, 7]
        assert skipped == ["1_0", "-3", "99999999999"]

    def test_undecodable_bytes_are_skipped(self, cgroupfs):
        """A line with invalid UTF-8 is dropped, the rest is read."""
        path = cgroupfs.write("cpuacct", "abc123", "cgroup.procs", "")
        path.write_bytes(b"200\n\xff\xfe\n201\n")

        assert ProcCollector.pids_docker("abc123") == [200, 201]


class TestDescribe:
    """Tests for ProcCollector.describe."""

    def test_rows_include_process_name(self):
        """Live PIDs are described with their psutil process name."""
        container = ContainerStat(type="Docker", name="web1", id="abc123", image="nginx:latest")

        rows = ProcCollector.describe({os.getpid(): container})

        assert rows == [{
            "pid": os.getpid(),
            "process": psutil.Process(os.getpid()).name(),
            "container": "web1",
            "id": "abc123",
            "image": "nginx:latest",
        }]

    def test_vanished_process(self, monkeypatch):
        """A process that exited is shown with a placeholder name."""

        def gone(pid):
            raise psutil.NoSuchProcess(pid)

        monkeypatch.setattr(proc.psutil, "Process", gone)
        container = ContainerStat(type="Docker", name="web1", id="abc123", image="nginx")

        rows = ProcCollector.describe({30: container, 10: container})

        assert [row["pid"] for row in rows] == [10, 30]
        assert all(row["process"] == "?" for row in rows)
