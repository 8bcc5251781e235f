"""Median-smoothed CPU utilization sampling."""

import logging
import time
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from procmon.reader import STAT_FILENAME
from procmon.textdecode import read_lines

logger = logging.getLogger(__name__)

DEFAULT_SAMPLES = 10
SAMPLING_INTERVAL_MS = 100

# user, nice, system, idle, iowait, irq, softirq
COUNTED_FIELDS = 7
IDLE_INDEX = 3


def instantaneous_utilization(stat_line: str) -> float:
    """
    CPU utilization in percent from the aggregate ``cpu`` line.

    Computed as ``100 - idle * 100 / (sum of the first seven counters)``.
    Returns 0.0 when the line has fewer than seven counters or cannot be
    parsed; callers treat 0.0 as "no reading".
    """
    tokens = stat_line.split()
    if tokens and not tokens[0].isdigit():
        tokens = tokens[1:]
    try:
        counters = [int(token) for token in tokens[:COUNTED_FIELDS]]
    except ValueError:
        return 0.0
    if len(counters) < COUNTED_FIELDS:
        return 0.0
    total = sum(counters)
    if total <= 0:
        return 0.0
    idle_percent = counters[IDLE_INDEX] * 100.0 / total
    return 100.0 - idle_percent


def median(samples: list[float]) -> float:
    """
    Element at index ``len // 2`` of the sorted samples.

    For an even count this is the upper of the two middle values. An empty
    list yields 0.0.
    """
    if not samples:
        return 0.0
    ordered = sorted(samples)
    return ordered[len(ordered) // 2]


class SamplerState(Enum):
    """Lifecycle of a sampling run."""

    SAMPLING = "sampling"
    DONE = "done"


class CpuUtilizationSampler:
    """
    Take ``samples`` readings of system CPU utilization and report the median.

    The sampler is an explicit state machine: each :meth:`tick` takes one
    reading, and the tick that completes the run computes the median and
    invokes ``callback`` exactly once. :meth:`run` drives the ticks with a
    fixed pause between them; callers with their own scheduler can call
    :meth:`tick` directly instead.
    """

    def __init__(
        self,
        samples: int,
        callback: Callable[[float], None],
        proc_root: str | Path = "/proc",
        interval_ms: int = SAMPLING_INTERVAL_MS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if samples <= 0:
            raise ValueError(f"samples must be positive, got {samples}")
        self._samples = samples
        self._callback = callback
        self._stat_path = Path(proc_root) / STAT_FILENAME
        self._interval = interval_ms / 1000.0
        self._sleep = sleep
        self._readings: list[float] = []
        self._ticks = 0
        self._state = SamplerState.SAMPLING
        self._result: float | None = None

    @property
    def state(self) -> SamplerState:
        return self._state

    @property
    def ticks_taken(self) -> int:
        return self._ticks

    @property
    def readings(self) -> list[float]:
        """Retained (strictly positive) readings so far."""
        return list(self._readings)

    @property
    def result(self) -> float | None:
        """Median once the run is done, otherwise None."""
        return self._result

    def read_once(self) -> float:
        """Take one instantaneous reading from the stats file."""
        lines = read_lines(self._stat_path)
        if not lines:
            return 0.0
        return instantaneous_utilization(lines[0])

    def tick(self) -> SamplerState:
        """
        Take one reading and advance the state machine.

        Raises:
            RuntimeError: The run has already completed.
        """
        if self._state is SamplerState.DONE:
            raise RuntimeError("sampler already completed")

        reading = self.read_once()
        if reading > 0:
            self._readings.append(reading)
        else:
            logger.debug("Discarding empty CPU reading from %s", self._stat_path)
        self._ticks += 1

        if self._ticks >= self._samples:
            self._finish()
        return self._state

    def run(self) -> float:
        """Take every reading, pausing between ticks, and return the median."""
        while self.tick() is SamplerState.SAMPLING:
            self._sleep(self._interval)
        assert self._result is not None
        return self._result

    def _finish(self) -> None:
        if not self._readings:
            logger.debug("No usable CPU readings in %d ticks", self._ticks)
        self._result = median(self._readings)
        self._readings = []
        self._state = SamplerState.DONE
        self._callback(self._result)


def sample_cpu_utilization(
    samples: int = DEFAULT_SAMPLES,
    proc_root: str | Path = "/proc",
    interval_ms: int = SAMPLING_INTERVAL_MS,
) -> float:
    """Run one blocking sampling pass and return the median percentage."""
    values: list[float] = []
    sampler = CpuUtilizationSampler(samples, values.append, proc_root, interval_ms)
    sampler.run()
    return values[0]
