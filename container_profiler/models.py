"""Data models for container-profiler."""

import json
from dataclasses import dataclass, field, fields
from typing import Any

# Keys read from memory.stat, named exactly as the kernel exposes them.
MEM_STAT_KEYS = (
    "cache",
    "rss",
    "rss_huge",
    "mapped_file",
    "pgpgin",
    "pgpgout",
    "pgfault",
    "pgmajfault",
    "inactive_anon",
    "active_anon",
    "inactive_file",
    "active_file",
    "unevictable",
    "hierarchical_memory_limit",
    "total_cache",
    "total_rss",
    "total_rss_huge",
    "total_mapped_file",
    "total_pgpgin",
    "total_pgpgout",
    "total_pgfault",
    "total_pgmajfault",
    "total_inactive_anon",
    "total_active_anon",
    "total_inactive_file",
    "total_active_file",
    "total_unevictable",
)


def _diagnostic(default_factory):
    return field(default_factory=default_factory, repr=False, compare=False, metadata={"diagnostic": True})


class _JsonRecord:
    """Mixin giving stat records their canonical JSON text form."""

    __slots__ = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if not f.metadata.get("diagnostic")
        }

    def __str__(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(slots=True)
class CgroupCPUStat(_JsonRecord):
    """CPU accounting of one cgroup, in clock ticks."""

    container_id: str
    user: float = 0.0
    system: float = 0.0
    skipped: list[str] = _diagnostic(list)

    def seconds(self, ticks_per_second: int) -> tuple[float, float]:
        """Convert (user, system) ticks to seconds."""
        return self.user / ticks_per_second, self.system / ticks_per_second


@dataclass(slots=True)
class CgroupMemStat(_JsonRecord):
    """Memory accounting of one cgroup. Every counter defaults to zero."""

    container_id: str
    cache: int = 0
    rss: int = 0
    rss_huge: int = 0
    mapped_file: int = 0
    pgpgin: int = 0
    pgpgout: int = 0
    pgfault: int = 0
    pgmajfault: int = 0
    inactive_anon: int = 0
    active_anon: int = 0
    inactive_file: int = 0
    active_file: int = 0
    unevictable: int = 0
    hierarchical_memory_limit: int = 0
    total_cache: int = 0
    total_rss: int = 0
    total_rss_huge: int = 0
    total_mapped_file: int = 0
    total_pgpgin: int = 0
    total_pgpgout: int = 0
    total_pgfault: int = 0
    total_pgmajfault: int = 0
    total_inactive_anon: int = 0
    total_active_anon: int = 0
    total_inactive_file: int = 0
    total_active_file: int = 0
    total_unevictable: int = 0
    mem_usage_in_bytes: int = 0
    mem_max_usage_in_bytes: int = 0
    mem_limit_in_bytes: int = 0
    mem_fail_cnt: int = 0
    skipped: list[str] = _diagnostic(list)
    # Per scalar field errors; the field itself stays at zero.
    errors: dict[str, Exception] = _diagnostic(dict)


@dataclass(slots=True)
class DockerContainerStat(_JsonRecord):
    """One row of `docker ps -a` output."""

    container_id: str
    name: str
    image: str
    status: str
    running: bool


@dataclass(slots=True, frozen=True)
class ContainerStat(_JsonRecord):
    """Container summary attached to every PID of that container."""

    type: str
    name: str
    id: str
    image: str
