class CgroupError(Exception):
    """Base class for every error raised by the cgroup collectors."""


class DockerNotAvailableError(CgroupError):
    def __init__(self, message="docker not available"):
        super().__init__(message)


class DockerCommandError(CgroupError):
    def __init__(self, args, returncode=None, stderr=""):
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr or ""
        detail = self.stderr.strip() or f"exit status {returncode}"
        super().__init__(f"Command {' '.join(self.command)!r} failed: {detail}")


class MountPointNotFoundError(CgroupError):
    def __init__(self, subsystem: str):
        self.subsystem = subsystem
        super().__init__(f"Mount point for cgroup {subsystem} is not found")


class StatFormatError(CgroupError):
    def __init__(self, path: str, line_count: int):
        self.path = path
        self.line_count = line_count
        super().__init__(f"Wrong format file: {path} ({line_count} lines, expected 1)")
