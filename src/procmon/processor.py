"""Detect logical cores from /proc/cpuinfo."""

import logging
from pathlib import Path

from procmon.models import (
    ProcessorDescriptor,
    ProcessorDetection,
    ProcessorsAvailable,
    ProcessorsUnavailable,
)
from procmon.textdecode import split_in_two, to_float, to_integral

logger = logging.getLogger(__name__)

CPUINFO_FILENAME = "cpuinfo"
PROCESSOR_KEY = "processor"
MODEL_NAME_KEY = "model name"
FREQUENCY_KEY = "cpu MHz"
CACHE_SIZE_KEY = "cache size"


class _CoreBlock:
    """Accumulates the fields of one ``processor`` block."""

    __slots__ = ("model_name", "frequency_mhz", "cache_size_kb", "found")

    def __init__(self) -> None:
        self.model_name = ""
        self.frequency_mhz = 0.0
        self.cache_size_kb = 0
        self.found: set[str] = set()

    @property
    def complete(self) -> bool:
        return len(self.found) == 3

    def feed(self, key: str, value: str) -> None:
        if key in self.found:
            return
        try:
            if key == MODEL_NAME_KEY:
                self.model_name = value
            elif key == FREQUENCY_KEY:
                self.frequency_mhz = float(round(to_float(value)))
            elif key == CACHE_SIZE_KEY:
                self.cache_size_kb = _leading_int(value)
            else:
                return
        except ValueError:
            logger.debug("Malformed cpuinfo value for %r: %r", key, value)
        self.found.add(key)

    def descriptor(self) -> ProcessorDescriptor:
        return ProcessorDescriptor(
            model_name=self.model_name,
            frequency_mhz=self.frequency_mhz,
            cache_size_kb=self.cache_size_kb,
        )


def _leading_int(value: str) -> int:
    """Parse ``"3072 KB"`` into 3072."""
    number, _, _ = value.upper().partition("KB")
    return to_integral(number)


def parse_cpuinfo(lines: list[str]) -> tuple[ProcessorDescriptor, ...]:
    """
    Build one descriptor per ``processor`` block.

    Only model name, frequency and cache size are collected; once all three
    are found the rest of the block is ignored. A block missing some of them
    still yields a descriptor with default values for the missing fields.
    """
    cores: list[ProcessorDescriptor] = []
    current: _CoreBlock | None = None

    for line in lines:
        key, value = split_in_two(line, ":")
        if key == PROCESSOR_KEY:
            if current is not None:
                cores.append(current.descriptor())
            current = _CoreBlock()
            continue
        if current is None or current.complete:
            continue
        current.feed(key, value)

    if current is not None:
        cores.append(current.descriptor())
    return tuple(cores)


def detect_processors(proc_root: str | Path = "/proc") -> ProcessorDetection:
    """
    Scan the processor description file.

    Returns :class:`ProcessorsUnavailable` when the file cannot be opened,
    which is distinct from a readable file with no cores in it.
    """
    path = Path(proc_root) / CPUINFO_FILENAME
    try:
        with open(path, encoding="utf-8", errors="replace") as fh:
            lines = fh.read().splitlines()
    except OSError as exc:
        logger.debug("Cannot read %s: %s", path, exc)
        return ProcessorsUnavailable(reason=str(exc))
    return ProcessorsAvailable(cores=parse_cpuinfo(lines))


def core_count(detection: ProcessorDetection) -> int:
    """Number of logical cores, 1 when detection failed or found none."""
    if isinstance(detection, ProcessorsAvailable) and detection.cores:
        return len(detection.cores)
    return 1
