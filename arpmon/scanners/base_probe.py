"""
Base probe interface for the ARP monitor.

This module defines the abstract base class every probe implements. A probe
sends one address-resolution request and classifies what happened:

    RESOLVED  a reply arrived; the table entry gets the MAC
    TIMEOUT   no reply within the timeout; the table entry is cleared
    IGNORED   anything else went wrong; the table entry is left alone

Only an explicit timeout counts as evidence that a host has gone away. Every
other failure is treated as noise on a live network, so probe() never raises.
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..core.data_models import ProbeOutcome, ProbeResult
from ..utils.logger import Logger
from ..utils.network_utils import normalize_mac


class BaseProbe(ABC):
    """
    Abstract base class for ARP probes.

    Subclasses implement _resolve(), which returns the MAC address of the
    target, returns None when the target did not answer in time, and raises
    on any other failure. probe() turns that into a ProbeResult.
    """

    method = "base"

    def __init__(self, timeout: float = 6.0, interface: Optional[str] = None,
                 logger: Optional[Logger] = None):
        """
        Initialize the probe.

        Args:
            timeout: Seconds to wait for a reply
            interface: Network interface to send on (None for the default route)
            logger: Logger instance for probe diagnostics
        """
        self.timeout = timeout
        self.interface = interface
        self.logger = logger
        self._stats_lock = threading.Lock()
        self._stats: Dict[str, int] = {outcome.value: 0 for outcome in ProbeOutcome}

    @abstractmethod
    def _resolve(self, target: str) -> Optional[str]:
        """
        Send one ARP request to the target and wait for the reply.

        Args:
            target: IPv4 address to resolve

        Returns:
            MAC address of the target, or None if no reply arrived in time

        Raises:
            Exception: Any failure other than a timeout
        """

    def probe(self, target: str) -> ProbeResult:
        """
        Probe a single target and classify the outcome.

        Args:
            target: IPv4 address to probe

        Returns:
            ProbeResult describing the outcome
        """
        started = time.monotonic()
        try:
            mac = self._resolve(target)
        except Exception as e:
            result = ProbeResult(
                target=target,
                outcome=ProbeOutcome.IGNORED,
                latency=time.monotonic() - started,
                error=f"{type(e).__name__}: {e}"
            )
        else:
            latency = time.monotonic() - started
            if mac is None:
                result = ProbeResult(target=target, outcome=ProbeOutcome.TIMEOUT, latency=latency)
            else:
                try:
                    result = ProbeResult(
                        target=target,
                        outcome=ProbeOutcome.RESOLVED,
                        mac=normalize_mac(mac),
                        latency=latency
                    )
                except ValueError as e:
                    result = ProbeResult(
                        target=target,
                        outcome=ProbeOutcome.IGNORED,
                        latency=latency,
                        error=str(e)
                    )

        self._record(result)
        return result

    def _record(self, result: ProbeResult) -> None:
        with self._stats_lock:
            self._stats[result.outcome.value] += 1

        if result.outcome is ProbeOutcome.RESOLVED:
            self._log_debug(f"<-- {result.target} ({result.mac}) {result.latency * 1000:.1f} ms")
        elif result.outcome is ProbeOutcome.TIMEOUT:
            self._log_debug(f"<-- {result.target} [timeout]")
        else:
            self._log_debug(f"<-- {result.target} [ignored] {result.error}")

    @property
    def statistics(self) -> Dict[str, int]:
        """Counts of probe outcomes so far."""
        with self._stats_lock:
            return dict(self._stats)

    def _log_debug(self, message: str) -> None:
        """Log a debug message if logger is available."""
        if self.logger:
            self.logger.debug(message)
