from ..models import MEM_STAT_KEYS, CgroupMemStat
from .base import BaseCollector
from .cgroup import Cgroup
from .errors import CgroupError, StatFormatError


class MemCollector(BaseCollector):
    STAT_FILE = "memory.stat"

    # Single value files, keyed by the CgroupMemStat field they fill.
    SCALAR_FILES = {
        "mem_usage_in_bytes": "memory.usage_in_bytes",
        "mem_max_usage_in_bytes": "memory.max_usage_in_bytes",
        "mem_limit_in_bytes": "memory.limit_in_bytes",
        "mem_fail_cnt": "memory.failcnt",
    }

    @staticmethod
    def parse_stat(lines):
        """Decode memory.stat lines. Returns: (values, skipped_lines)"""
        return BaseCollector._parse_kv_lines(lines, MEM_STAT_KEYS, BaseCollector._parse_uint)

    @staticmethod
    def read_scalar(container_id: str, base: str, file: str) -> int:
        """Read a cgroup memory file holding exactly one unsigned integer."""
        statfile = Cgroup.file_path(container_id, base, "memory", file)
        lines = BaseCollector._read_lines(statfile)
        if len(lines) != 1:
            raise StatFormatError(statfile, len(lines))
        return BaseCollector._parse_uint(lines[0].strip())

    @staticmethod
    def mem(container_id: str, base: str = "") -> CgroupMemStat:
        statfile = Cgroup.file_path(container_id, base, "memory", MemCollector.STAT_FILE)
        lines = BaseCollector._read_lines(statfile)

        values, skipped = MemCollector.parse_stat(lines)
        for line in skipped:
            BaseCollector.logger.debug("Skipped line in %s: %r", statfile, line)

        # empty containerID means all cgroup
        ret = CgroupMemStat(container_id=container_id or "all", skipped=skipped, **values)

        for field_name, file in MemCollector.SCALAR_FILES.items():
            try:
                setattr(ret, field_name, MemCollector.read_scalar(container_id, base, file))
            except (OSError, ValueError, CgroupError) as e:
                BaseCollector.logger.debug("Failed to read %s for %s: %s", file, ret.container_id, e)
                ret.errors[field_name] = e

        return ret

    @staticmethod
    def mem_docker(container_id: str) -> CgroupMemStat:
        return MemCollector.mem(container_id, Cgroup.docker_base("memory"))
