"""Readers for the system-wide files of the process information tree."""

import logging
from pathlib import Path

from procmon.config import ProcmonConfig
from procmon.models import SystemCounters
from procmon.textdecode import (
    read_lines,
    read_text,
    scan_numeric_subdirectories,
    split_in_two,
    to_float,
    to_integral,
)

logger = logging.getLogger(__name__)

STAT_FILENAME = "stat"
MEMINFO_FILENAME = "meminfo"
UPTIME_FILENAME = "uptime"
VERSION_FILENAME = "version"


class SystemMetricsReader:
    """
    Query system-wide metrics.

    Every method re-reads its source file, so results always reflect the
    state of the system at call time. Unreadable or malformed files degrade
    to a zero or empty value instead of raising.
    """

    def __init__(
        self,
        proc_root: str | Path = "/proc",
        os_release_path: str | Path = "/etc/os-release",
    ) -> None:
        self._proc_root = Path(proc_root)
        self._os_release_path = Path(os_release_path)

    @classmethod
    def from_config(cls, config: ProcmonConfig) -> "SystemMetricsReader":
        return cls(config.proc_root, config.os_release_path)

    @property
    def proc_root(self) -> Path:
        return self._proc_root

    def operating_system_name(self) -> str:
        """Return the PRETTY_NAME entry of the os-release file."""
        for line in read_lines(self._os_release_path):
            key, value = split_in_two(line, "=")
            if key == "PRETTY_NAME":
                return value.strip("\"'")
        return ""

    def kernel_version(self) -> str:
        """Return the third token of /proc/version."""
        lines = read_lines(self._proc_root / VERSION_FILENAME)
        if not lines:
            return ""
        tokens = lines[0].split()
        return tokens[2] if len(tokens) > 2 else ""

    def total_and_available_memory(self) -> tuple[float, float]:
        """
        Return ``(MemTotal, MemAvailable)`` in kB.

        These are the first two lines of /proc/meminfo. Missing or malformed
        values are reported as 0.
        """
        values = [0.0, 0.0]
        for index, line in enumerate(read_lines(self._proc_root / MEMINFO_FILENAME)[:2]):
            _, value = split_in_two(line.replace("kB", ""), ":")
            try:
                values[index] = to_float(value)
            except ValueError:
                logger.debug("Malformed meminfo line: %r", line)
        return values[0], values[1]

    def memory_utilization(self) -> float:
        """Fraction of memory in use, ``(total - available) / total``."""
        total, available = self.total_and_available_memory()
        if total <= 0:
            return 0.0
        return (total - available) / total

    def uptime_seconds(self) -> int:
        """Seconds since boot, rounded to the nearest integer."""
        uptime, _ = split_in_two(read_text(self._proc_root / UPTIME_FILENAME), " ")
        try:
            return round(to_float(uptime))
        except ValueError:
            return 0

    def total_process_count(self) -> int:
        """Number of process directories currently present."""
        count = 0

        def _count(_name: str) -> None:
            nonlocal count
            count += 1

        scan_numeric_subdirectories(self._proc_root, _count)
        return count

    def running_process_count(self) -> int:
        """Value of the ``procs_running`` counter, 0 if unavailable."""
        for line in read_lines(self._proc_root / STAT_FILENAME):
            if "procs_running" in line:
                _, value = split_in_two(line, " ")
                try:
                    return to_integral(value)
                except ValueError:
                    logger.debug("Malformed procs_running line: %r", line)
                    return 0
        return 0

    def list_process_ids(self) -> list[int]:
        """Every pid in directory-iteration order (unspecified)."""
        pids: list[int] = []
        scan_numeric_subdirectories(self._proc_root, lambda name: pids.append(int(name)))
        return pids

    def cpu_counters(self) -> SystemCounters:
        """Parse the aggregate ``cpu`` line of /proc/stat."""
        lines = read_lines(self._proc_root / STAT_FILENAME)
        if not lines:
            return SystemCounters()
        tokens = lines[0].split()
        if not tokens or tokens[0] != "cpu":
            return SystemCounters()
        values: list[int] = []
        for token in tokens[1:11]:
            try:
                values.append(to_integral(token))
            except ValueError:
                logger.debug("Malformed cpu counter %r", token)
                break
        return SystemCounters.from_values(values)

    def total_cpu_time(self, core_count: int) -> float:
        """Guest-corrected total CPU time averaged over ``core_count`` cores."""
        return self.cpu_counters().total_time() / max(core_count, 1)

    def path(self, *parts: str) -> Path:
        """Build a path below the process information root."""
        return self._proc_root.joinpath(*parts)

