from ..models import CgroupCPUStat
from .base import BaseCollector
from .cgroup import Cgroup


class CpuCollector(BaseCollector):
    STAT_FILE = "cpuacct.stat"
    STAT_KEYS = ("user", "system")

    @staticmethod
    def parse_stat(lines):
        """Decode cpuacct.stat lines. Returns: (values, skipped_lines)"""
        return BaseCollector._parse_kv_lines(lines, CpuCollector.STAT_KEYS, BaseCollector._parse_ticks)

    @staticmethod
    def cpu(container_id: str, base: str = "") -> CgroupCPUStat:
        """
        CPU ticks of a cgroup. `container_id` is the docker id when docker is
        used; an empty id reads the aggregate group found at `base`.
        """
        statfile = Cgroup.file_path(container_id, base, "cpuacct", CpuCollector.STAT_FILE)
        lines = BaseCollector._read_lines(statfile)

        values, skipped = CpuCollector.parse_stat(lines)
        for line in skipped:
            BaseCollector.logger.debug("Skipped line in %s: %r", statfile, line)

        return CgroupCPUStat(
            container_id=container_id or "all",
            user=values.get("user", 0.0),
            system=values.get("system", 0.0),
            skipped=skipped,
        )

    @staticmethod
    def cpu_docker(container_id: str) -> CgroupCPUStat:
        return CpuCollector.cpu(container_id, Cgroup.docker_base("cpuacct"))
