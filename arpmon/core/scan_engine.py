"""
Scan engine for the ARP monitor.

The engine wires the host table, the segment partition, the scan workers and
the shutdown coordinator together from a MonitorConfig, and is the only object
the query layer needs: it exposes read-only views of the host table.
"""

import threading
from typing import Any, Dict, List, Optional

from .data_models import ADDRESS_FIRST, ADDRESS_LAST, HostRecord
from .host_table import HostTable
from .partitioner import partition
from .scan_worker import ScanWorker
from .shutdown import ShutdownCoordinator
from ..config.config_loader import MonitorConfig
from ..scanners.arp_probe import create_probe
from ..scanners.base_probe import BaseProbe
from ..utils.logger import Logger, get_logger


class ScanEngine:
    """
    Owns the host table and the pool of scan workers.

    Example:
        engine = ScanEngine(config)
        engine.start()
        ...
        engine.records()
        ...
        engine.stop()
    """

    def __init__(self, config: MonitorConfig, probe: Optional[BaseProbe] = None,
                 logger: Optional[Logger] = None):
        """
        Initialize the engine. Workers are created but not started.

        Args:
            config: Validated monitor configuration
            probe: Probe shared by all workers; built from the config if omitted
            logger: Logger instance
        """
        self.config = config
        self.logger = logger or get_logger(__name__)
        self.prefix = config.prefix
        self.probe = probe or create_probe(
            config.method, config.probe_timeout, config.interface, self.logger
        )

        self.table = HostTable(config.self_address, config.mac, ADDRESS_FIRST, ADDRESS_LAST)
        self.segments = partition(config.workers, ADDRESS_FIRST, ADDRESS_LAST)
        self.coordinator = ShutdownCoordinator(len(self.segments), self.logger)

        self.workers: List[ScanWorker] = []
        for index, segment in enumerate(self.segments):
            worker = ScanWorker(
                index=index,
                segment=segment,
                table=self.table,
                probe=self.probe,
                prefix=self.prefix,
                tokens=self.coordinator.tokens,
                wait_seconds=config.wait_seconds,
                poll_interval=config.poll_interval,
                logger=self.logger
            )
            self.coordinator.register(worker)
            self.workers.append(worker)

        self._start_lock = threading.Lock()
        self._started = False

    @property
    def running(self) -> bool:
        return self._started and not self.coordinator.is_stopped

    def start(self) -> None:
        """Start every worker. Calling start() again does nothing."""
        with self._start_lock:
            if self._started:
                return
            self._started = True

        for worker in self.workers:
            worker.start()
        self.logger.info(
            f"Started {len(self.workers)} scan workers",
            method=self.probe.method,
            timeout=self.probe.timeout
        )

    def request_stop(self) -> None:
        """Post the stop tokens without waiting."""
        self.coordinator.request_shutdown()

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Stop every worker and wait for them to exit.

        Args:
            timeout: Overall deadline, or None to wait as long as it takes

        Returns:
            True once every worker has exited
        """
        return self.coordinator.shutdown(timeout)

    def get_all(self) -> Dict[int, Optional[str]]:
        return self.table.get_all()

    def records(self) -> List[HostRecord]:
        return self.table.records()

    def status(self) -> Dict[str, Any]:
        """Summary of the engine for the health endpoint and logs."""
        return {
            "running": self.running,
            "workers": [
                {
                    "name": worker.name,
                    "segment": str(worker.segment),
                    "state": worker.state.value,
                    "cycles": worker.cycles,
                    "probes": worker.probes_sent,
                }
                for worker in self.workers
            ],
            "resolved": self.table.resolved_count(),
            "probe_statistics": self.probe.statistics,
        }
