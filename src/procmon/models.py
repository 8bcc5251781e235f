"""Data models for procmon."""

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True, order=True)
class ProcessRecord:
    """
    Immutable snapshot of one process.

    Identity and ordering use the pid only, so sorting a list of records
    orders it by pid ascending. Records are meant to be produced by
    :func:`procmon.process.build_process`.
    """

    pid: int
    owner_user: str = field(compare=False)
    command: str = field(compare=False)
    resident_memory: str = field(compare=False)  # MB, one fractional digit
    cpu_ratio: float = field(compare=False)  # 0.0 - 1.0
    age_seconds: int = field(compare=False)

    def __post_init__(self) -> None:
        if self.pid <= 0:
            raise ValueError(f"pid must be positive, got {self.pid}")


@dataclass(slots=True, frozen=True)
class ProcessorDescriptor:
    """Static identity of one logical core."""

    model_name: str = ""
    frequency_mhz: float = 0.0
    cache_size_kb: int = 0


@dataclass(slots=True, frozen=True)
class ProcessorsUnavailable:
    """The processor description file could not be opened."""

    reason: str = ""


@dataclass(slots=True, frozen=True)
class ProcessorsAvailable:
    """The processor description file was read; ``cores`` may be empty."""

    cores: tuple[ProcessorDescriptor, ...] = ()


ProcessorDetection = ProcessorsUnavailable | ProcessorsAvailable


@dataclass(slots=True, frozen=True)
class SystemCounters:
    """Aggregate CPU time counters (jiffies) from the first line of /proc/stat."""

    user: int = 0
    nice: int = 0
    system: int = 0
    idle: int = 0
    iowait: int = 0
    irq: int = 0
    softirq: int = 0
    steal: int = 0
    guest: int = 0
    guest_nice: int = 0

    @classmethod
    def from_values(cls, values: list[int]) -> "SystemCounters":
        """Build from positional counters; missing trailing counters are 0."""
        padded = (list(values) + [0] * 10)[:10]
        return cls(*padded)

    def total_time(self) -> int:
        """
        Total accounted CPU time.

        Guest time is already included in user/nice by the kernel, so it is
        subtracted there before being added back as virtual time.
        """
        user = self.user - self.guest
        nice = self.nice - self.guest_nice
        idle_all = self.idle + self.iowait
        system_all = self.system + self.irq + self.softirq
        virt_all = self.guest + self.guest_nice
        return user + nice + system_all + idle_all + self.steal + virt_all
