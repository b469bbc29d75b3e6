import argparse
import logging
import signal
import sys
import time
import uuid

from .collectors.cgroup import Cgroup
from .collectors.collector_manager import CollectorManager
from .collectors.container import DockerCollector
from .collectors.cpu import CpuCollector
from .collectors.errors import CgroupError
from .collectors.mem import MemCollector
from .collectors.proc import ProcCollector
from .exporter import Exporter

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="container-profiler",
        description="Per-container CPU and memory statistics from cgroup v1",
    )
    parser.add_argument("--mounts", help=f"Mount table to scan (default: {Cgroup.MOUNTS_FILE})")
    parser.add_argument("--docker-timeout", type=float, default=None,
                        help="Seconds allowed per docker CLI call")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="action", required=True)

    sub.add_parser("containers", help="List docker containers")
    sub.add_parser("ids", help="List running container IDs")
    for name, text in (("cpu", "CPU ticks of a container"),
                       ("mem", "Memory counters of a container"),
                       ("pids", "PIDs of a container")):
        p = sub.add_parser(name, help=text)
        p.add_argument("container_id", nargs="?", default="",
                       help="Container ID (empty reads the aggregate group)")
        p.add_argument("--base", default="", help="Cgroup directory holding the container groups")
    sub.add_parser("procmap", help="Map running PIDs to their containers")

    record = sub.add_parser("record", help="Sample all running containers and export the session")
    record.add_argument("-o", "--output", default="./profiler-output", help="Output directory")
    record.add_argument("-t", "--interval", default=1000, type=int,
                        help="Sampling interval in milliseconds")
    record.add_argument("-f", "--format", default="parquet", choices=Exporter.FORMATS,
                        help="Final export format (default: parquet)")
    record.add_argument("-n", "--count", default=0, type=int,
                        help="Number of samples to take (0 runs until interrupted)")
    return parser


def record(args, docker):
    session_uuid = str(uuid.uuid4())
    logger.info("Session UUID: %s", session_uuid)
    logger.info("Output Dir:   %s", args.output)
    logger.info("Interval:     %dms", args.interval)
    logger.info("Format:       %s", args.format)

    collector = CollectorManager(docker)
    exporter = Exporter(args.output, session_uuid)
    exporter.save_static(collector.get_static_info(session_uuid))

    running = True

    def signal_handler(sig, frame):
        nonlocal running
        logger.info("Signal %s received. Stopping profiler...", sig)
        running = False

    previous = {sig: signal.signal(sig, signal_handler) for sig in (signal.SIGINT, signal.SIGTERM)}

    samples = 0
    try:
        while running:
            loop_start = time.time()

            exporter.save_snapshot(collector.collect_metrics())
            samples += 1
            if args.count and samples >= args.count:
                break

            sleep_sec = (args.interval / 1000.0) - (time.time() - loop_start)
            if sleep_sec > 0:
                time.sleep(sleep_sec)
    finally:
        logger.info("Shutting down after %d samples...", samples)
        for sig, handler in previous.items():
            signal.signal(sig, handler)
        collector.close()
        exporter.process_session(export_format=args.format)


def run(args) -> int:
    default_mounts = Cgroup.MOUNTS_FILE
    if args.mounts:
        Cgroup.MOUNTS_FILE = args.mounts
    try:
        return dispatch(args)
    finally:
        Cgroup.MOUNTS_FILE = default_mounts


def dispatch(args) -> int:
    docker = DockerCollector(timeout=args.docker_timeout)

    if args.action == "containers":
        for stat in docker.list_containers():
            print(stat)
    elif args.action == "ids":
        for container_id in docker.list_container_ids():
            print(container_id)
    elif args.action == "cpu":
        print(CpuCollector.cpu(args.container_id, args.base))
    elif args.action == "mem":
        stat = MemCollector.mem(args.container_id, args.base)
        for field_name, error in stat.errors.items():
            logger.warning("%s unavailable: %s", field_name, error)
        print(stat)
    elif args.action == "pids":
        for pid in ProcCollector.pids(args.container_id, args.base):
            print(pid)
    elif args.action == "procmap":
        print(f"{'PID':>8}  {'PROCESS':<20} {'CONTAINER':<24} {'ID':<12}  IMAGE")
        for row in ProcCollector.describe(docker.stats_by_pid()):
            print(f"{row['pid']:>8}  {row['process']:<20} {row['container']:<24} "
                  f"{row['id'][:12]:<12}  {row['image']}")
    elif args.action == "record":
        record(args, docker)
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        return run(args)
    except (CgroupError, OSError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
