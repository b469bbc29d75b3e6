import os
import shutil
import subprocess
from typing import Callable, Dict, List, Optional

from ..models import ContainerStat, DockerContainerStat
from .base import BaseCollector
from .cgroup import Cgroup
from .errors import CgroupError, DockerCommandError, DockerNotAvailableError
from .proc import ProcCollector

logger = BaseCollector.logger


def run_command(args, timeout=None) -> str:
    """Run a command and return its stdout, raising DockerCommandError on failure."""
    try:
        result = subprocess.run(args, capture_output=True, text=True, check=True, timeout=timeout)
    except subprocess.CalledProcessError as e:
        raise DockerCommandError(args, e.returncode, e.stderr) from e
    except subprocess.TimeoutExpired as e:
        raise DockerCommandError(args, stderr=f"timed out after {timeout}s") from e
    except OSError as e:
        raise DockerCommandError(args, stderr=str(e)) from e
    return result.stdout


class DockerCollector(BaseCollector):
    DOCKER_BIN = os.getenv("CGROUP_PROFILER_DOCKER", "docker")
    PS_FORMAT = "{{.ID}}|{{.Image}}|{{.Names}}|{{.Status}}"
    CONTAINER_TYPE = "Docker"

    def __init__(
        self,
        invoke: Optional[Callable[[List[str]], str]] = None,
        lookup: Callable[[str], Optional[str]] = shutil.which,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            invoke: Runs a command (argv list) and returns its stdout.
                Defaults to a subprocess call.
            lookup: Resolves the docker executable on PATH.
            timeout: Seconds allowed per docker call with the default invoke.
        """
        self._invoke = invoke or (lambda args: run_command(args, timeout=timeout))
        self._lookup = lookup

    def _docker(self, *args) -> str:
        path = self._lookup(self.DOCKER_BIN)
        if not path:
            raise DockerNotAvailableError()
        return self._invoke([path, *args])

    def is_available(self) -> bool:
        return bool(self._lookup(self.DOCKER_BIN))

    @staticmethod
    def parse_ps_output(text: str) -> List[DockerContainerStat]:
        ret = []
        for line in text.split("\n"):
            if not line:
                continue
            cols = line.split("|")
            if len(cols) != 4:
                logger.debug("Skipped docker ps line: %r", line)
                continue
            names = cols[2].split(",")
            ret.append(DockerContainerStat(
                container_id=cols[0],
                name=names[0],
                image=cols[1],
                status=cols[3],
                running="Up" in cols[3],
            ))
        return ret

    def list_containers(self) -> List[DockerContainerStat]:
        """All containers known to docker, running or not. Requires docker permissions."""
        out = self._docker("ps", "-a", "--no-trunc", "--format", self.PS_FORMAT)
        return self.parse_ps_output(out)

    def list_container_ids(self) -> List[str]:
        """Full IDs of running containers."""
        out = self._docker("ps", "-q", "--no-trunc")
        return [line for line in out.split("\n") if line]

    def stats_by_pid(self) -> Dict[int, ContainerStat]:
        """Map every PID of every running container to that container's summary."""
        container_map = {}
        path = Cgroup.mount_point("cpuacct")
        if not os.path.exists(path) or Cgroup.DOCKER_DIR not in os.listdir(path):
            return container_map

        try:
            docker_stats = self.list_containers()
        except CgroupError as e:
            logger.debug("Docker containers unavailable: %s", e)
            return container_map

        for docker_stat in docker_stats:
            if not docker_stat.running:
                continue

            try:
                pids = ProcCollector.pids_docker(docker_stat.container_id)
            except (OSError, CgroupError) as e:
                logger.debug("Skipping container %s: %s", docker_stat.container_id, e)
                continue

            container_stat = ContainerStat(
                type=self.CONTAINER_TYPE,
                name=docker_stat.name,
                id=docker_stat.container_id,
                image=docker_stat.image,
            )
            for pid in pids:
                container_map[pid] = container_stat

        return container_map
