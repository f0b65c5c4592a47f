"""
Shutdown coordination for the scan workers.

On a termination request the coordinator posts exactly one stop token per
worker into a bounded channel, then joins every worker. Workers do not talk to
each other: any worker may take any token, so stopping only requires that the
number of tokens equals the number of workers.
"""

import queue
import threading
import time
from typing import List, Optional

from .data_models import ShutdownToken
from ..utils.logger import Logger, get_logger


class ShutdownCoordinator:
    """
    Posts stop tokens and waits for every worker thread to exit.
    """

    def __init__(self, worker_count: int, logger: Optional[Logger] = None):
        """
        Initialize the coordinator.

        Args:
            worker_count: Number of workers that will be registered
            logger: Logger instance
        """
        self.worker_count = worker_count
        self.tokens: queue.Queue = queue.Queue(maxsize=worker_count)
        self.logger = logger or get_logger(__name__)
        self._workers: List[threading.Thread] = []
        self._lock = threading.Lock()
        self._requested = False
        self._stopped = threading.Event()

    def register(self, worker: threading.Thread) -> None:
        with self._lock:
            if len(self._workers) >= self.worker_count:
                raise ValueError(f"Coordinator sized for {self.worker_count} workers")
            self._workers.append(worker)

    @property
    def shutdown_requested(self) -> bool:
        return self._requested

    @property
    def is_stopped(self) -> bool:
        return self._stopped.is_set()

    def request_shutdown(self) -> None:
        """Post one token per registered worker. Later calls do nothing."""
        with self._lock:
            if self._requested:
                return
            self._requested = True
            for sequence in range(len(self._workers)):
                self.tokens.put(ShutdownToken(sequence))

        self.logger.debug(f"Posted {len(self._workers)} shutdown tokens")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every worker has exited.

        Args:
            timeout: Overall deadline in seconds, or None to wait indefinitely

        Returns:
            True if all workers exited, False if the deadline passed first
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        for worker in self._workers:
            if not worker.is_alive() and worker.ident is None:
                # Never started
                continue
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            worker.join(remaining)
            if worker.is_alive():
                return False

        self._stopped.set()
        return True

    def shutdown(self, timeout: Optional[float] = None) -> bool:
        self.request_shutdown()
        return self.wait(timeout)
