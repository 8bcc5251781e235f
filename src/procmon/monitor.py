"""Background polling of the System facade."""

import logging
import threading
from dataclasses import dataclass
from queue import Queue

from procmon.models import ProcessorDescriptor, ProcessRecord
from procmon.system import System

logger = logging.getLogger(__name__)

MIN_POLL_RATE = 0.1


@dataclass(slots=True)
class SystemSnapshot:
    """Snapshot of overall system state."""

    operating_system: str
    kernel: str
    cpu: ProcessorDescriptor
    cpu_utilization: float  # 0.0 - 1.0
    memory_utilization: float  # 0.0 - 1.0
    uptime_seconds: int
    total_processes: int
    running_processes: int
    processes: list[ProcessRecord]


class SystemMonitor:
    """
    Polls a :class:`System` and pushes snapshots to a thread-safe Queue.

    Runs in a separate daemon thread. A failed poll is logged and the loop
    keeps going.
    """

    def __init__(
        self,
        update_queue: Queue[SystemSnapshot],
        system: System | None = None,
        poll_rate: float | None = None,
    ) -> None:
        """
        Initialize the SystemMonitor.

        Args:
            update_queue: Thread-safe queue to push updates to.
            system: System facade to poll. Defaults to one over /proc.
            poll_rate: Seconds between polls. Defaults to the configured rate.
        """
        self._queue = update_queue
        self._system = system or System()
        self._poll_rate = max(
            MIN_POLL_RATE,
            poll_rate if poll_rate is not None else self._system.config.monitor.poll_rate,
        )
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def poll_rate(self) -> float:
        """Get the current poll rate."""
        return self._poll_rate

    @poll_rate.setter
    def poll_rate(self, value: float) -> None:
        """Set the poll rate."""
        self._poll_rate = max(MIN_POLL_RATE, value)

    @property
    def is_running(self) -> bool:
        """Check if the monitor thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the monitoring thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop,
            daemon=True,
            name="SystemMonitor",
        )
        self._thread.start()
        logger.info("SystemMonitor started (poll_rate=%.1fs)", self._poll_rate)

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the monitoring thread.

        Args:
            timeout: How long to wait for thread to stop (seconds).
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.info("SystemMonitor stopped")

    def _poll_loop(self) -> None:
        """Main polling loop running in the background thread."""
        while not self._stop_event.is_set():
            try:
                self._queue.put(self.collect_snapshot())
            except Exception:
                logger.exception("Snapshot collection failed")

            self._stop_event.wait(timeout=self._poll_rate)

    def collect_snapshot(self) -> SystemSnapshot:
        """Collect a snapshot of the current system state."""
        system = self._system
        return SystemSnapshot(
            operating_system=system.operating_system(),
            kernel=system.kernel(),
            cpu=system.cpu(),
            cpu_utilization=system.cpu_utilization(),
            memory_utilization=system.memory_utilization(),
            uptime_seconds=system.uptime(),
            total_processes=system.total_processes(),
            running_processes=system.running_processes(),
            processes=system.processes(),
        )
