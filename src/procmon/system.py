"""Aggregate view of the system for the display layer."""

import logging

from procmon.config import ProcmonConfig
from procmon.models import ProcessorDescriptor, ProcessorsAvailable, ProcessRecord
from procmon.process import ProcessMetricsBuilder
from procmon.processor import detect_processors
from procmon.reader import SystemMetricsReader
from procmon.sampler import sample_cpu_utilization

logger = logging.getLogger(__name__)


class System:
    """
    Facade over the readers, builders and the CPU sampler.

    Values that cannot change while the machine is up (OS name, kernel
    version and the first core's descriptor) are read once at construction.
    Everything else is re-read on each call.
    """

    def __init__(self, config: ProcmonConfig | None = None) -> None:
        self._config = config or ProcmonConfig()
        self._reader = SystemMetricsReader.from_config(self._config)
        self._builder = ProcessMetricsBuilder(self._config.proc_root, self._config.passwd_path)

        self._kernel = self._reader.kernel_version()
        self._operating_system = self._reader.operating_system_name()
        self._cpu = ProcessorDescriptor()
        detection = detect_processors(self._config.proc_root)
        if isinstance(detection, ProcessorsAvailable) and detection.cores:
            self._cpu = detection.cores[0]
        else:
            logger.debug("No processor descriptors found: %r", detection)

    @property
    def config(self) -> ProcmonConfig:
        return self._config

    def cpu(self) -> ProcessorDescriptor:
        """Descriptor of the first core."""
        return self._cpu

    def cpu_utilization(self) -> float:
        """Median CPU utilization over one sampling run, as a fraction."""
        percent = sample_cpu_utilization(
            self._config.sampler.samples,
            proc_root=self._config.proc_root,
            interval_ms=self._config.sampler.interval_ms,
        )
        return percent / 100.0

    def processes(self) -> list[ProcessRecord]:
        """Records for every live process, sorted by pid."""
        baseline = self._builder.total_cpu_time()
        records = [
            self._builder.build(str(pid), total_cpu_time=baseline)
            for pid in self._reader.list_process_ids()
        ]
        return sorted(records)

    def memory_utilization(self) -> float:
        return self._reader.memory_utilization()

    def uptime(self) -> int:
        return self._reader.uptime_seconds()

    def total_processes(self) -> int:
        return self._reader.total_process_count()

    def running_processes(self) -> int:
        return self._reader.running_process_count()

    def kernel(self) -> str:
        return self._kernel

    def operating_system(self) -> str:
        return self._operating_system
