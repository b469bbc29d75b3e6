import logging
import os
from typing import Any, Dict, Optional

import psutil

from .base import BaseCollector
from .cgroup import Cgroup
from .container import DockerCollector
from .cpu import CpuCollector
from .errors import CgroupError
from .mem import MemCollector

logger = logging.getLogger(__name__)


class CollectorManager:
    def __init__(self, docker: Optional[DockerCollector] = None):
        """
        Initialize collector manager.

        Args:
            docker: Container enumerator to use (a default DockerCollector if omitted)
        """
        self.docker = docker or DockerCollector()

    def collect_metrics(self) -> Dict[str, Any]:
        """One sample of CPU and memory usage for every running container."""
        data = {
            "timestamp": BaseCollector.get_timestamp(),
            "containers": [],
        }
        try:
            containers = self.docker.list_containers()
        except CgroupError as e:
            logger.error("Error listing containers: %s", e)
            return data

        for container in containers:
            if not container.running:
                continue
            try:
                cpu = CpuCollector.cpu_docker(container.container_id)
                mem = MemCollector.mem_docker(container.container_id)
            except (OSError, CgroupError) as e:
                # Most likely stopped since it was listed
                logger.warning("Dropping container %s from sample: %s", container.name, e)
                continue

            user_s, system_s = cpu.seconds(BaseCollector.TICKS_PER_SECOND)
            row = {
                "id": container.container_id,
                "name": container.name,
                "image": container.image,
                "cpu_user_ticks": cpu.user,
                "cpu_system_ticks": cpu.system,
                "cpu_user_seconds": user_s,
                "cpu_system_seconds": system_s,
            }
            mem_fields = mem.to_dict()
            mem_fields.pop("container_id")
            row.update({f"mem_{k}" if not k.startswith("mem_") else k: v for k, v in mem_fields.items()})
            data["containers"].append(row)

        return data

    def close(self):
        pass

    def get_static_info(self, session_uuid: str) -> Dict[str, Any]:
        """Host and cgroup layout information, captured once per session."""
        mounts = {}
        for subsystem in ("cpuacct", "memory"):
            try:
                mounts[subsystem] = Cgroup.mount_point(subsystem)
            except (OSError, CgroupError) as e:
                logger.warning("No mount point for %s: %s", subsystem, e)
                mounts[subsystem] = None

        return {
            "uuid": session_uuid,
            "host": {
                "hostname": os.uname().nodename,
                "kernel": f"{os.uname().sysname} {os.uname().release}",
                "boot_time": psutil.boot_time(),
                "ticks_per_second": BaseCollector.TICKS_PER_SECOND,
            },
            "cgroup_mounts": mounts,
            "docker_available": self.docker.is_available(),
        }
