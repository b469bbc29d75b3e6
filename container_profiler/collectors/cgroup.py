import os

from .base import BaseCollector
from .errors import MountPointNotFoundError


class Cgroup:
    MOUNTS_FILE = os.getenv("CGROUP_PROFILER_MOUNTS", "/proc/mounts")
    DOCKER_DIR = "docker"
    SLICE_DIR = "system.slice"

    @staticmethod
    def mount_point(subsystem: str) -> str:
        """
        Find where a cgroup subsystem is mounted. Example /proc/mounts entries:
            cgroup /sys/fs/cgroup/cpuset cgroup rw,relatime,cpuset 0 0
            cgroup /sys/fs/cgroup/cpu,cpuacct cgroup rw,relatime,cpu,cpuacct 0 0
            cgroup /sys/fs/cgroup/memory cgroup rw,relatime,memory 0 0

        A table with a single cgroup entry is the old single-hierarchy style
        and that mount serves every subsystem. Otherwise the last entry whose
        mount point contains `subsystem` wins.
        """
        cgroups = [line for line in BaseCollector._read_lines(Cgroup.MOUNTS_FILE)
                   if line.startswith("cgroup ")]

        # old cgroup style
        if len(cgroups) == 1:
            return cgroups[0].split(" ")[1]

        candidate = ""
        for line in cgroups:
            tokens = line.split(" ")
            if len(tokens) > 1 and subsystem in tokens[1]:
                candidate = tokens[1]

        if not candidate:
            raise MountPointNotFoundError(subsystem)
        return candidate

    @staticmethod
    def docker_base(subsystem: str) -> str:
        return os.path.join(Cgroup.mount_point(subsystem), Cgroup.DOCKER_DIR)

    @staticmethod
    def file_path(container_id: str, base: str, subsystem: str, file: str) -> str:
        """
        Build the path of `file` for a container.

        `base/<id>/<file>` is used when it exists, otherwise the systemd layout
        `<mount>/system.slice/docker-<id>.scope/<file>`. The fallback is not
        checked; a bad id fails later when the caller reads it.
        """
        if not base:
            base = Cgroup.docker_base(subsystem)
        statfile = os.path.join(base, container_id, file)

        if not os.path.exists(statfile):
            statfile = os.path.join(
                Cgroup.mount_point(subsystem),
                Cgroup.SLICE_DIR,
                f"docker-{container_id}.scope",
                file,
            )
        return statfile
