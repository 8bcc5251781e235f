"""Build ProcessRecord instances from a /proc/<pid> directory."""

import logging
import os
from pathlib import Path

from procmon.models import ProcessRecord
from procmon.processor import core_count, detect_processors
from procmon.reader import SystemMetricsReader
from procmon.textdecode import (
    is_number,
    last_segment,
    read_joined,
    read_lines,
    split,
    split_in_two,
    to_float,
    to_integral,
    trim,
)
from procmon.users import STATUS_FILENAME, UserDirectoryResolver

logger = logging.getLogger(__name__)

STAT_FILENAME = "stat"
CMDLINE_FILENAME = "cmdline"
VMSIZE_KEY = "VmSize"

# /proc/<pid>/stat must carry at least this many fields to be trusted
MIN_STAT_FIELDS = 22
UTIME_INDEX = 13
STIME_INDEX = 14


class InvalidIdentifier(ValueError):
    """Raised when a process directory name is not a numeric pid."""

    def __init__(self, name: str) -> None:
        super().__init__(f"process directory name must be numeric, got {name!r}")
        self.name = name


def clock_ticks_per_second() -> int:
    """Kernel clock ticks per second (USER_HZ)."""
    try:
        ticks = os.sysconf("SC_CLK_TCK")
    except (AttributeError, ValueError, OSError):
        return 100
    return ticks if ticks > 0 else 100


def _stat_fields(process_dir: Path) -> list[str]:
    """
    Positional fields of /proc/<pid>/stat.

    The second field is ``(comm)``, which may itself contain spaces, so the
    line is split after the last closing parenthesis.
    """
    contents = read_joined(process_dir / STAT_FILENAME)
    head, paren, tail = contents.rpartition(")")
    if not paren:
        return split(contents, " ")
    pid, _, comm = head.partition(" (")
    return [pid, f"({comm})"] + tail.split()


def _cpu_ticks(fields: list[str]) -> int | None:
    """utime + stime, or None when the stat line is short or malformed."""
    if len(fields) < MIN_STAT_FIELDS:
        return None
    try:
        return to_integral(fields[UTIME_INDEX]) + to_integral(fields[STIME_INDEX])
    except ValueError:
        logger.debug("Malformed utime/stime fields: %r", fields[UTIME_INDEX : STIME_INDEX + 1])
        return None


def find_command(process_dir: str | Path) -> str:
    """
    Return the executable of a process.

    Kernel threads and zombies have an empty cmdline; for those the name
    from the first line of the status file is used instead.
    """
    process_dir = Path(process_dir)
    contents = read_joined(process_dir / CMDLINE_FILENAME)
    if contents:
        return contents.split("\0")[0]

    status = read_lines(process_dir / STATUS_FILENAME)
    if not status:
        return ""
    tokens = split(status[0], ":")
    return trim(tokens[1]) if len(tokens) > 1 else ""


def find_memory_usage(process_dir: str | Path) -> str:
    """
    Return VmSize in MB, truncated to one fractional digit.

    ``"VmSize:   12345 kB"`` becomes ``"12.0"``. Returns ``""`` when the
    field is absent.
    """
    for line in read_lines(Path(process_dir) / STATUS_FILENAME):
        key, value = split_in_two(line, ":")
        if key != VMSIZE_KEY:
            continue
        try:
            megabytes = to_float(value.replace("kB", "")) / 1024.0
        except ValueError:
            logger.debug("Malformed VmSize line: %r", line)
            return ""
        text = f"{megabytes:.6f}"
        return text[: text.find(".") + 2]
    return ""


def find_cpu_ratio(process_dir: str | Path, total_cpu_time: float) -> float:
    """
    Share of CPU time used by a process since it started.

    ``total_cpu_time`` is the system total averaged per core. The result is
    clamped to ``[0, 1]``.
    """
    ticks = _cpu_ticks(_stat_fields(Path(process_dir)))
    if ticks is None or total_cpu_time <= 0:
        return 0.0
    return min(max(ticks / total_cpu_time, 0.0), 1.0)


def find_uptime(process_dir: str | Path, ticks_per_second: int | None = None) -> int:
    """
    Accumulated CPU time of a process (utime + stime) in the TIME+ scale
    used by top and htop, i.e. ``60 * ticks / USER_HZ``.
    """
    ticks = _cpu_ticks(_stat_fields(Path(process_dir)))
    if ticks is None:
        return 0
    return 60 * ticks // (ticks_per_second or clock_ticks_per_second())


class ProcessMetricsBuilder:
    """
    Build immutable ProcessRecords for directories below the proc root.

    The builder holds only paths; every call re-reads the process files.
    """

    def __init__(
        self,
        proc_root: str | Path = "/proc",
        passwd_path: str | Path = "/etc/passwd",
    ) -> None:
        self._reader = SystemMetricsReader(proc_root)
        self._users = UserDirectoryResolver(passwd_path)

    @property
    def reader(self) -> SystemMetricsReader:
        return self._reader

    def total_cpu_time(self) -> float:
        """Per-core total CPU time used as the baseline for cpu_ratio."""
        cores = core_count(detect_processors(self._reader.proc_root))
        return self._reader.total_cpu_time(cores)

    def build(
        self,
        process_dir: str | Path,
        total_cpu_time: float | None = None,
    ) -> ProcessRecord:
        """
        Build the record for ``process_dir``.

        Only the last path segment is used to locate the process, so both
        ``"/proc/42"`` and ``"42"`` address the same process.

        Args:
            process_dir: Directory of the process; its name must be the pid.
            total_cpu_time: Precomputed baseline to share across one refresh.

        Raises:
            InvalidIdentifier: The directory name is not purely numeric.
        """
        name = last_segment(process_dir)
        if not is_number(name) or int(name) <= 0:
            raise InvalidIdentifier(name)

        base = self._reader.path(name)
        if total_cpu_time is None:
            total_cpu_time = self.total_cpu_time()

        return ProcessRecord(
            pid=int(name),
            owner_user=self._users.owner_of(base),
            command=find_command(base),
            resident_memory=find_memory_usage(base),
            cpu_ratio=find_cpu_ratio(base, total_cpu_time),
            age_seconds=find_uptime(base),
        )


def build_process(
    process_dir: str | Path,
    proc_root: str | Path = "/proc",
    passwd_path: str | Path = "/etc/passwd",
) -> ProcessRecord:
    """Convenience wrapper around :meth:`ProcessMetricsBuilder.build`."""
    return ProcessMetricsBuilder(proc_root, passwd_path).build(process_dir)
