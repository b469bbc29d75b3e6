import logging
import math
import os
import time
from typing import Callable, Dict, List, Tuple

UINT64_MAX = 2 ** 64 - 1
PID_MAX = 2 ** 31 - 1


def _clock_ticks():
    try:
        return os.sysconf('SC_CLK_TCK')
    except (AttributeError, ValueError, OSError):
        return 100


class BaseCollector:
    logger = logging.getLogger(__name__)
    TICKS_PER_SECOND = _clock_ticks()

    # --- Shared Helper Methods ---
    @staticmethod
    def get_timestamp():
        """Returns current time in milliseconds since epoch."""
        return int(time.time() * 1000)

    @staticmethod
    def _read_lines(file) -> List[str]:
        """
        Reads a file and returns its lines without trailing newlines.
        Raises OSError when the file cannot be opened or read. Undecodable
        bytes are kept as surrogates so the line fails to parse instead.
        """
        with open(file, 'r', errors='surrogateescape') as f:
            return f.read().splitlines()

    @staticmethod
    def _parse_uint(value: str) -> int:
        """Parses an unsigned 64-bit decimal, raising ValueError otherwise."""
        if not (value.isascii() and value.isdigit()):
            raise ValueError(f"invalid unsigned integer: {value!r}")
        number = int(value)
        if number > UINT64_MAX:
            raise ValueError(f"value out of range: {value!r}")
        return number

    @staticmethod
    def _parse_ticks(value: str) -> float:
        """Parses a finite, non-negative tick count, raising ValueError otherwise."""
        if not value.isascii() or "_" in value:
            raise ValueError(f"invalid tick count: {value!r}")
        ticks = float(value)
        if not math.isfinite(ticks) or ticks < 0:
            raise ValueError(f"invalid tick count: {value!r}")
        return ticks

    @staticmethod
    def _parse_pid(value: str) -> int:
        """Parses a PID in the signed 32-bit positive range, raising ValueError otherwise."""
        if not (value.isascii() and value.isdigit()):
            raise ValueError(f"invalid pid: {value!r}")
        pid = int(value)
        if pid > PID_MAX:
            raise ValueError(f"pid out of range: {value!r}")
        return pid

    @staticmethod
    def _parse_kv_lines(lines, keys, convert: Callable[[str], object]) -> Tuple[Dict[str, object], List[str]]:
        """
        Tolerant decoder for '<key> <value>' stat files.

        Lines with an unknown key, a missing value or a value rejected by
        `convert` are collected in the second element instead of raising.
        Returns: (values_by_key, skipped_lines)
        """
        values = {}
        skipped = []
        for line in lines:
            fields = line.split()
            if len(fields) < 2 or fields[0] not in keys:
                skipped.append(line)
                continue
            try:
                values[fields[0]] = convert(fields[1])
            except ValueError:
                skipped.append(line)
        return values, skipped
