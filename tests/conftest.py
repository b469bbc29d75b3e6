"""Shared fixtures: fake cgroup trees and mount tables."""

from pathlib import Path

import pytest

from container_profiler.collectors.cgroup import Cgroup


@pytest.fixture
def mount_table(tmp_path_factory, monkeypatch):
    """Write a mount table and point the resolver at it."""

    def write(*lines: str) -> Path:
        path = tmp_path_factory.mktemp("mtab") / "mounts"
        path.write_text("".join(f"{line}\n" for line in lines))
        monkeypatch.setattr(Cgroup, "MOUNTS_FILE", str(path))
        return path

    return write


class FakeCgroupFS:
    """A cgroup v1 layout with separate cpu,cpuacct and memory hierarchies."""

    def __init__(self, root: Path):
        self.root = root
        self.cpuacct = root / "cpu,cpuacct"
        self.memory = root / "memory"
        for mount in (self.cpuacct, self.memory):
            (mount / "docker").mkdir(parents=True)

    def mount_lines(self) -> list[str]:
        return [
            "sysfs /sys sysfs rw,nosuid,nodev,noexec,relatime 0 0",
            "tmpfs /sys/fs/cgroup tmpfs ro,nosuid,nodev,noexec,mode=755 0 0",
            f"cgroup {self.root}/systemd cgroup rw,nosuid,nodev,noexec,relatime,name=systemd 0 0",
            f"cgroup {self.cpuacct} cgroup rw,nosuid,nodev,noexec,relatime,cpu,cpuacct 0 0",
            f"cgroup {self.memory} cgroup rw,nosuid,nodev,noexec,relatime,memory 0 0",
        ]

    def write(self, subsystem: str, container_id: str, file: str, content: str, systemd: bool = False) -> Path:
        mount = self.cpuacct if subsystem == "cpuacct" else self.memory
        if systemd:
            directory = mount / "system.slice" / f"docker-{container_id}.scope"
        else:
            directory = mount / "docker" / container_id
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / file
        path.write_text(content)
        return path


@pytest.fixture
def cgroupfs(tmp_path_factory, mount_table):
    """A fake cgroup filesystem registered in the mount table."""
    fs = FakeCgroupFS(tmp_path_factory.mktemp("cgroupfs"))
    mount_table(*fs.mount_lines())
    return fs
