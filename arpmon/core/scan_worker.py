"""
Scan worker thread for the ARP monitor.

Each worker owns one segment of the host range. It probes every address of
the segment in ascending order, commits each result to the host table, and
waits between probes. The wait listens on the shutdown token channel, so a
posted token ends it immediately; a token posted while a probe is in flight
is seen as soon as that probe returns.

Worker loop:

    PROBING -> WAITING -> PROBING -> ... -> STOPPED

The only exit is taking a shutdown token during WAITING.
"""

import queue
import threading
import time
from typing import Optional

from .data_models import ProbeOutcome, Segment, WorkerState
from .host_table import HostTable
from ..scanners.base_probe import BaseProbe
from ..utils.logger import Logger
from ..utils.network_utils import build_ip


class ScanWorker(threading.Thread):
    """
    Thread that keeps one segment of the host table up to date.
    """

    def __init__(
        self,
        index: int,
        segment: Segment,
        table: HostTable,
        probe: BaseProbe,
        prefix: str,
        tokens: queue.Queue,
        wait_seconds: float = 12.0,
        poll_interval: float = 0.5,
        logger: Optional[Logger] = None
    ):
        """
        Initialize the worker.

        Args:
            index: Worker number, used in the thread name
            segment: Host identifiers this worker probes
            table: Shared host table to commit results to
            probe: Probe used for every address
            prefix: Network prefix such as "192.168.1."
            tokens: Channel the shutdown coordinator posts stop tokens to
            wait_seconds: Pause after every probe
            poll_interval: Longest single blocking wait on the token channel
            logger: Logger instance
        """
        super().__init__(name=f"scan-worker-{index}", daemon=True)
        self.index = index
        self.segment = segment
        self.table = table
        self.probe = probe
        self.prefix = prefix
        self.wait_seconds = wait_seconds
        self.poll_interval = poll_interval
        self.logger = logger
        self._tokens = tokens
        self._state = WorkerState.IDLE
        self.cycles = 0
        self.probes_sent = 0

    @property
    def state(self) -> WorkerState:
        return self._state

    def run(self) -> None:
        self._log_debug(f"WORKER({self.segment}) started")
        try:
            while not self._scan_cycle():
                self.cycles += 1
        finally:
            self._state = WorkerState.STOPPED
            self._log_debug(f"WORKER({self.segment}) stopped")

    def _scan_cycle(self) -> bool:
        """
        Probe the whole segment once.

        Returns:
            True if a shutdown token was taken, False to scan again
        """
        probed = False
        for address in self.segment:
            if address == self.table.self_address:
                continue

            self._state = WorkerState.PROBING
            self._probe_and_commit(address)
            probed = True

            self._state = WorkerState.WAITING
            if self._wait_for_token():
                return True

        if not probed:
            # Nothing to probe; still honour the cadence rather than spin
            self._state = WorkerState.WAITING
            return self._wait_for_token()
        return False

    def _probe_and_commit(self, address: int) -> None:
        # The probe runs without the table lock; only the commit takes it
        result = self.probe.probe(build_ip(self.prefix, address))
        self.probes_sent += 1

        if result.outcome is ProbeOutcome.RESOLVED:
            self.table.set(address, result.mac)
        elif result.outcome is ProbeOutcome.TIMEOUT:
            self.table.clear(address)

    def _wait_for_token(self) -> bool:
        """
        Wait out the cadence while listening for a shutdown token.

        Returns:
            True if a token was taken, False if the cadence elapsed
        """
        deadline = time.monotonic() + self.wait_seconds
        while True:
            remaining = deadline - time.monotonic()
            try:
                if remaining <= 0:
                    # Last polling boundary of the cadence
                    self._tokens.get_nowait()
                else:
                    self._tokens.get(timeout=min(self.poll_interval, remaining))
            except queue.Empty:
                if remaining <= 0:
                    return False
                continue
            self._tokens.task_done()
            return True

    def _log_debug(self, message: str) -> None:
        if self.logger:
            self.logger.debug(message, worker=self.index)
