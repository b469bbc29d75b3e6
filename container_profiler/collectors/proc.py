from typing import Any, Dict, List

import psutil

from ..models import ContainerStat
from .base import BaseCollector
from .cgroup import Cgroup


class ProcCollector(BaseCollector):
    PROCS_FILE = "cgroup.procs"

    @staticmethod
    def parse_procs(lines):
        """Returns: (pids, skipped_lines)"""
        pids = []
        skipped = []
        for line in lines:
            try:
                pids.append(BaseCollector._parse_pid(line.strip()))
            except ValueError:
                skipped.append(line)
        return pids, skipped

    @staticmethod
    def pids(container_id: str, base: str = "") -> List[int]:
        """PIDs attached to a container's cpuacct group."""
        statfile = Cgroup.file_path(container_id, base, "cpuacct", ProcCollector.PROCS_FILE)
        pids, skipped = ProcCollector.parse_procs(BaseCollector._read_lines(statfile))
        if skipped:
            BaseCollector.logger.debug("Skipped %d lines in %s: %r", len(skipped), statfile, skipped)
        return pids

    @staticmethod
    def pids_docker(container_id: str) -> List[int]:
        return ProcCollector.pids(container_id, Cgroup.docker_base("cpuacct"))

    @staticmethod
    def describe(process_map: Dict[int, ContainerStat]) -> List[Dict[str, Any]]:
        """
        Rows for a PID -> container map, sorted by PID, with the process name
        looked up through psutil ("?" when the process is gone or hidden).
        """
        rows = []
        for pid in sorted(process_map):
            container = process_map[pid]
            try:
                name = psutil.Process(pid).name()
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess, ValueError):
                name = "?"
            rows.append({
                "pid": pid,
                "process": name,
                "container": container.name,
                "id": container.id,
                "image": container.image,
            })
        return rows
